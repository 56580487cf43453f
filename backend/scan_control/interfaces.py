"""
模块接口契约 - 定义外部协作方的抽象接口

设计原则：
1. 执行器只依赖接口，不直接依赖 scanimage/convert 等具体工具
2. 每个接口定义清晰的输入输出类型
3. 便于单元测试和mock替换

使用方式：
    from scan_control.interfaces import IScanBackend

    class FakeBackend(IScanBackend):
        def acquire(self, params, staging_dir, timestamp) -> list[Path]:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .models import AcquireParams, AdjustParams, AggregateParams


# ============================================================================
# 字节流接口
# ============================================================================

class IByteStream(Protocol):
    """字节流协议（serial.Serial 满足此协议）"""

    def read(self, size: int = 1) -> bytes:
        """读取至多 size 字节；超时返回已读到的内容（可能为空）"""
        ...


# ============================================================================
# 扫描后端接口
# ============================================================================

class IScanBackend(ABC):
    """扫描后端接口 - 采集/单页调整/合并/输出"""

    @abstractmethod
    def acquire(
        self, params: AcquireParams, staging_dir: Path, timestamp: str
    ) -> list[Path]:
        """
        从进纸器采集全部页面

        Args:
            params: 采集参数（分辨率/幅面等）
            staging_dir: 私有暂存目录
            timestamp: 本次采集时间戳，用于命名

        Returns:
            原始图像路径列表（0..n 张，按页序）

        Raises:
            ExecutionError: 采集失败
        """
        ...

    @abstractmethod
    def adjust(self, raw_image: Path, params: AdjustParams, destination_dir: Path) -> Path:
        """
        调整单张图像（纠偏/裁边/色彩配置/归一化）

        Args:
            raw_image: 原始图像
            params: 调整参数（同一任务内所有图像一致）
            destination_dir: 输出目录

        Returns:
            调整后的图像路径
        """
        ...

    @abstractmethod
    def route_output(self, adjusted_image: Path, destination_dir: Path) -> Path:
        """将调整后的图像移入持久输出目录（无需合并时使用）"""
        ...

    @abstractmethod
    def aggregate(
        self, images: list[Path], destination: Path, params: AggregateParams
    ) -> Path:
        """
        合并多张图像为单个多页文档

        Args:
            images: 已调整的图像
            destination: 目标文档路径
            params: 合并参数

        Returns:
            生成的文档路径
        """
        ...


class IDesktopFocus(ABC):
    """桌面聚焦接口 - 任务完成后展示输出目录"""

    @abstractmethod
    def surface(self, output_dir: Path) -> bool:
        """
        聚焦输出窗口，或切换工作区并打开文件浏览器

        Returns:
            是否成功（失败只记录告警，不抛异常）
        """
        ...


# ============================================================================
# 异常定义
# ============================================================================

class ScanControlError(Exception):
    """基础异常"""
    pass


class ParseError(ScanControlError):
    """帧解析错误"""

    def __init__(self, message: str, frame: str | None = None):
        super().__init__(message)
        self.frame = frame


class PlanningError(ScanControlError):
    """规划错误（对合法Settings不应出现）"""
    pass


class ExecutionError(ScanControlError):
    """后端执行错误（任务级失败，不影响后续任务）"""

    def __init__(self, message: str, stage: str | None = None):
        super().__init__(message)
        self.stage = stage


class ListenerError(ScanControlError):
    """字节流错误（监听循环致命）"""
    pass
