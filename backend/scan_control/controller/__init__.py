"""
控制器模块 - 按钮盒串口帧的接收与解析

子模块：
- listener: 字节流 → 帧文本
- parser: 帧文本 → Settings
- serial_port: 串口打开
"""

from .listener import FrameListener
from .parser import SettingsParser
from .serial_port import open_serial_port

__all__ = [
    "FrameListener",
    "SettingsParser",
    "open_serial_port",
]
