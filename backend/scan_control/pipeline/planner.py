"""
流水线规划器 - Settings → Plan

职责：
1. 按字段独立查表得出各阶段参数
2. 纯函数：无I/O、无状态，同一输入得到相同计划

规则：
- 幅面：a4/legal/max 查表，其余为设备默认
- 分辨率：jpg 为 300，其余（含 pdf 与未设置）为 200
- 单页调整：crop/deskew 按开关；色彩配置总是启用；仅 pdf 归一化
- 输出：pdf 写入暂存目录并追加 Aggregate；其余直接写入输出目录

测试要点：
- test_plan_jpg_a4: 示例1
- test_plan_pdf_letter: 示例2
- test_plan_empty_settings: 示例3
- test_geometry_table: 幅面查表完整性
- test_plan_is_pure: 重复规划一致
"""

from __future__ import annotations

from ..config import ScannerConfig
from ..interfaces import PlanningError
from ..models import (
    AcquireParams,
    AdjustParams,
    AggregateParams,
    Geometry,
    OutputRoute,
    Plan,
    Settings,
    Stage,
    StageKind,
)
from .stages import GEOMETRY_TABLE, RESOLUTION_DEFAULT, RESOLUTION_JPG


class PipelinePlanner:
    """流水线规划器"""

    def __init__(
        self,
        source_profile: str = "profiles/scansnap.icc",
        target_profile: str = "profiles/sRGB_v4_ICC_preference.icc",
        source: str = "ADF Duplex",
        color_mode: str = "Color",
    ):
        self.profiles = (source_profile, target_profile)
        self.source = source
        self.color_mode = color_mode

    @classmethod
    def from_config(cls, config: ScannerConfig) -> PipelinePlanner:
        return cls(
            source_profile=config.source_profile,
            target_profile=config.target_profile,
            source=config.source,
            color_mode=config.color_mode,
        )

    def plan(self, settings: Settings) -> Plan:
        """生成处理计划"""
        if not isinstance(settings, Settings):
            raise PlanningError(f"不支持的输入类型: {type(settings).__name__}")

        stages = [
            Stage(kind=StageKind.ACQUIRE, params=self._acquire_params(settings)),
            Stage(kind=StageKind.PER_IMAGE_ADJUST, params=self._adjust_params(settings)),
        ]
        if settings.is_pdf:
            stages.append(Stage(kind=StageKind.AGGREGATE, params=AggregateParams()))

        return Plan(stages=tuple(stages))

    @staticmethod
    def geometry_for(settings: Settings) -> Geometry | None:
        return GEOMETRY_TABLE.get(settings.size)

    def _acquire_params(self, settings: Settings) -> AcquireParams:
        return AcquireParams(
            source=self.source,
            color_mode=self.color_mode,
            resolution=RESOLUTION_JPG if settings.is_jpg else RESOLUTION_DEFAULT,
            geometry=self.geometry_for(settings),
        )

    def _adjust_params(self, settings: Settings) -> AdjustParams:
        return AdjustParams(
            crop=settings.crop,
            deskew=settings.deskew,
            normalize=settings.is_pdf,
            profiles=self.profiles,
            output=OutputRoute.STAGING if settings.is_pdf else OutputRoute.OUTPUT_DIR,
        )
