"""
主循环 - 监听按钮并依次执行扫描任务

职责：
1. 打开字节流，逐帧接收
2. 帧 → Settings → Plan → 执行（严格交替，同一时间只有一个任务）
3. 每个帧、每项规划决策在执行前记录日志
4. 轮询退出标志，协作式退出

错误策略：
- ListenerError：不捕获，终止主循环
- ParseError：记录原始帧；on_parse_error=abort 时终止主循环，skip 时丢弃该帧
- ExecutionError：在执行器内按任务隔离
"""

from __future__ import annotations

import logging
from typing import Callable, Iterator

from ..config import RuntimeConfig, SerialConfig
from ..controller import FrameListener, SettingsParser, open_serial_port
from ..interfaces import IByteStream, IDesktopFocus, IScanBackend, ParseError
from ..models import Job
from ..pipeline import PipelineExecutor, PipelinePlanner
from .shutdown import ShutdownCoordinator

logger = logging.getLogger(__name__)

StreamFactory = Callable[[SerialConfig], IByteStream]


class ScanServer:
    """扫描主循环"""

    def __init__(
        self,
        config: RuntimeConfig,
        backend: IScanBackend,
        shutdown: ShutdownCoordinator,
        desktop: IDesktopFocus | None = None,
        stream_factory: StreamFactory = open_serial_port,
    ):
        self.config = config
        self.backend = backend
        self.shutdown = shutdown
        self.stream_factory = stream_factory

        self.parser = SettingsParser()
        self.planner = PipelinePlanner.from_config(config.scanner)
        self.executor = PipelineExecutor(
            output_dir=config.output.out_dir,
            desktop=desktop,
            staging_prefix=config.output.staging_prefix,
        )

    def run(self) -> None:
        """运行直到收到退出请求"""
        logger.info("starting")
        while not self.shutdown.should_quit():
            self._listen_once()
        logger.info("exiting")

    def _listen_once(self) -> None:
        logger.info("controller starting")
        stream = self.stream_factory(self.config.serial)
        try:
            for frame in self.frames(stream):
                self.handle_frame(frame)
        finally:
            close = getattr(stream, "close", None)
            if close is not None:
                close()
        logger.info("controller exiting")

    def frames(self, stream: IByteStream) -> Iterator[str]:
        listener = FrameListener(
            stream,
            self.shutdown,
            terminator=self.config.terminator_bytes,
            chunk_size=self.config.serial.chunk_size,
        )
        return listener.listen()

    def handle_frame(self, frame: str) -> Job | None:
        """处理单帧；返回执行的任务，跳过时返回 None"""
        logger.info("收到帧: %r", frame)
        try:
            settings = self.parser.parse(frame)
        except ParseError as e:
            logger.error("帧解析失败: %s | 原始帧: %r", e, e.frame)
            if self.config.serial.on_parse_error == "skip":
                return None
            raise

        logger.info("设置: %s", settings.summary())
        if settings.unknown_keys:
            logger.info("忽略未知键: %s", ", ".join(settings.unknown_keys))

        plan = self.planner.plan(settings)
        for line in plan.describe():
            logger.info("计划: %s", line)

        job = self.executor.execute(plan, self.backend)
        return job
