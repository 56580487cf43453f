"""
退出协调器 - 进程级协作式取消标志

状态：Running → Quitting（单向，不可重置）

约束：
- request_quit 可在信号处理上下文中调用，只做两件事：
  向日志队列投递原因（非阻塞），置位标志
- should_quit 非阻塞，供主循环与帧监听器轮询

测试要点：
- test_request_quit_idempotent: 幂等
- test_signal_handler_sets_flag: 信号转换
"""

from __future__ import annotations

import logging
import signal
import threading
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_SIGNALS = ("SIGINT", "SIGQUIT", "SIGTERM")


class ShutdownCoordinator:
    """退出协调器"""

    def __init__(self) -> None:
        self._quit = threading.Event()
        self._previous: dict[signal.Signals, Any] = {}

    def request_quit(self, reason: str = "quit requested") -> None:
        """请求退出（幂等）"""
        logger.info(reason)
        self._quit.set()

    def should_quit(self) -> bool:
        return self._quit.is_set()

    def install_signal_handlers(self, names: tuple[str, ...] = DEFAULT_SIGNALS) -> None:
        """注册信号处理（只能在主线程调用）"""
        for name in names:
            signum = getattr(signal, name, None)
            if signum is None:
                continue
            self._previous[signum] = signal.signal(signum, self._handle_signal)

    def restore_signal_handlers(self) -> None:
        for signum, handler in self._previous.items():
            signal.signal(signum, handler)
        self._previous.clear()

    def _handle_signal(self, signum: int, frame: object) -> None:
        name = signal.Signals(signum).name
        self.request_quit(f"caught {name}, exiting gracefully")
