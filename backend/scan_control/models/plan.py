"""
处理计划模型 - 规划器输出的有序阶段列表

Plan 完全由 Settings 决定，无状态、可重复计算；
各阶段参数为类型化对象，由后端适配层翻译为命令参数。
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field


class StageKind(str, Enum):
    """阶段类型"""
    ACQUIRE = "Acquire"
    PER_IMAGE_ADJUST = "PerImageAdjust"
    AGGREGATE = "Aggregate"


class OutputRoute(str, Enum):
    """单页调整结果的去向"""
    STAGING = "staging"         # 私有暂存目录（待合并）
    OUTPUT_DIR = "output_dir"   # 直接进入持久输出目录


class Geometry(BaseModel):
    """采集幅面（mm）"""

    model_config = ConfigDict(frozen=True)

    page_width: float
    page_height: float
    x: float
    y: float

    def as_args(self) -> list[str]:
        return [
            "--page-width", _fmt(self.page_width),
            "--page-height", _fmt(self.page_height),
            "-x", _fmt(self.x),
            "-y", _fmt(self.y),
        ]


class AcquireParams(BaseModel):
    """采集参数"""

    model_config = ConfigDict(frozen=True)

    source: str = "ADF Duplex"
    color_mode: str = "Color"
    resolution: int = 200
    geometry: Geometry | None = Field(None, description="None 表示设备默认幅面（letter）")


class AdjustParams(BaseModel):
    """单页调整参数"""

    model_config = ConfigDict(frozen=True)

    crop: bool = False
    deskew: bool = False
    normalize: bool = False
    profiles: tuple[str, str]
    rendering_intent: str = "Relative"
    quality: int = 90
    background: str = "#bdc9d0"
    output: OutputRoute = OutputRoute.OUTPUT_DIR


class AggregateParams(BaseModel):
    """合并参数"""

    model_config = ConfigDict(frozen=True)

    document_format: str = "pdf"
    naming: str = "capture_timestamp"


StageParams = Union[AcquireParams, AdjustParams, AggregateParams]


class Stage(BaseModel):
    """处理阶段"""

    model_config = ConfigDict(frozen=True)

    kind: StageKind
    params: StageParams

    @property
    def parameters(self) -> dict[str, Any]:
        """扁平键值视图"""
        flat: dict[str, Any] = {}
        for key, value in self.params.model_dump(mode="json").items():
            if isinstance(value, dict):
                for sub_key, sub_value in value.items():
                    flat[f"{key}.{sub_key}"] = sub_value
            else:
                flat[key] = value
        return flat

    def describe(self) -> str:
        params = ", ".join(f"{k}={v}" for k, v in self.parameters.items())
        return f"{self.kind.value}{{{params}}}"


class Plan(BaseModel):
    """处理计划"""

    model_config = ConfigDict(frozen=True)

    stages: tuple[Stage, ...] = ()

    @property
    def kinds(self) -> list[StageKind]:
        return [s.kind for s in self.stages]

    def has(self, kind: StageKind) -> bool:
        return kind in self.kinds

    def stage(self, kind: StageKind) -> Stage | None:
        """取第一个指定类型的阶段"""
        for s in self.stages:
            if s.kind == kind:
                return s
        return None

    def describe(self) -> list[str]:
        return [s.describe() for s in self.stages]


def _fmt(value: float) -> str:
    # 210.0 -> "210"，221.121 保持原样
    return f"{value:g}"
