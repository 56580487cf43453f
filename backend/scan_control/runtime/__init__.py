"""
运行时模块 - 日志汇聚、退出协调、主循环

子模块：
- log_sink: 队列解耦的异步日志写入
- shutdown: 协作式退出标志与信号转换
- server: 监听/解析/规划/执行主循环
"""

from .log_sink import LogSink
from .server import ScanServer
from .shutdown import ShutdownCoordinator

__all__ = [
    "LogSink",
    "ShutdownCoordinator",
    "ScanServer",
]
