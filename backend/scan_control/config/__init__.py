"""
配置层 - 加载运行期配置

职责：
- 加载 config/scan_control.yaml（运行期参数）
- 提供类型安全的配置访问接口
"""

from .runtime_config import (
    DesktopConfig,
    LoggingConfig,
    OutputConfig,
    RuntimeConfig,
    ScannerConfig,
    SerialConfig,
    get_config,
    reload_config,
)

__all__ = [
    "RuntimeConfig",
    "SerialConfig",
    "ScannerConfig",
    "OutputConfig",
    "DesktopConfig",
    "LoggingConfig",
    "get_config",
    "reload_config",
]
