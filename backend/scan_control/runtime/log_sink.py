"""
日志汇聚 - 队列解耦的异步日志写入

职责：
1. 生产者（主循环/信号处理/各组件）只向队列投递记录，不做I/O
2. 独立线程（QueueListener）从队列取出并写入日志文件或标准输出
3. 停止时排空队列

使用方式：
    with LogSink(config.logging, verbose=True):
        logging.getLogger("scan_control").info("starting")
"""

from __future__ import annotations

import logging
import queue
import sys
from logging.handlers import QueueHandler, QueueListener

from ..config import LoggingConfig

LOGGER_NAME = "scan_control"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class LogSink:
    """队列日志汇聚"""

    def __init__(
        self,
        config: LoggingConfig | None = None,
        verbose: bool = False,
        logger_name: str = LOGGER_NAME,
    ):
        self.config = config or LoggingConfig()
        self.level = logging.DEBUG if verbose else logging.getLevelName(self.config.log_level.upper())
        self.logger = logging.getLogger(logger_name)
        self.queue: queue.Queue[logging.LogRecord] = queue.Queue(maxsize=self.config.queue_size)
        self.queue_handler = QueueHandler(self.queue)
        self._handlers: list[logging.Handler] = []
        self._listener: QueueListener | None = None
        self._saved: tuple[int, bool] | None = None

    @property
    def running(self) -> bool:
        return self._listener is not None

    def start(self) -> LogSink:
        """挂载队列处理器并启动消费线程"""
        if self._listener is not None:
            return self

        self._handlers = [self._build_handler()]
        self._listener = QueueListener(self.queue, *self._handlers, respect_handler_level=True)
        self._listener.start()

        self._saved = (self.logger.level, self.logger.propagate)
        self.logger.addHandler(self.queue_handler)
        self.logger.setLevel(self.level)
        self.logger.propagate = False
        return self

    def stop(self) -> None:
        """卸载处理器，排空队列并关闭输出"""
        if self._listener is None:
            return

        self.logger.removeHandler(self.queue_handler)
        if self._saved is not None:
            self.logger.setLevel(self._saved[0])
            self.logger.propagate = self._saved[1]
            self._saved = None
        self._listener.stop()
        self._listener = None
        for handler in self._handlers:
            handler.close()
        self._handlers = []

    def __enter__(self) -> LogSink:
        return self.start()

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def _build_handler(self) -> logging.Handler:
        if self.config.log_to_file:
            log_file = self.config.log_file
            log_file.parent.mkdir(parents=True, exist_ok=True, mode=0o755)
            log_file.touch(exist_ok=True)
            log_file.chmod(0o644)
            handler: logging.Handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        else:
            handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.setLevel(self.level)
        return handler
