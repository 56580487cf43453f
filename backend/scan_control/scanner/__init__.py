"""
扫描后端模块 - 外部工具适配层

子模块：
- scanimage_backend: 采集/调整/合并命令封装
- desktop: 任务完成后的桌面聚焦
"""

from .desktop import WmctrlDesktopFocus
from .scanimage_backend import ScanImageBackend

__all__ = [
    "ScanImageBackend",
    "WmctrlDesktopFocus",
]
