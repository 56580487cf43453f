"""
帧监听器 - 将带超时的字节流切分为完整帧

职责：
1. 累积字节直到缓冲区中出现终止符
2. 整个缓冲区作为一帧输出并清空
3. 每次读取前检查退出标志，退出时丢弃未完成的帧
4. 字节流读取错误转为 ListenerError（不重试）

注意：
- 同一缓冲区出现多个终止符（连按两次按钮）时不拆分，整体作为一帧输出

测试要点：
- test_single_frame_across_reads: 跨多次读取拼接成一帧
- test_timeout_is_noop: 空读取不报错
- test_two_terminators_not_split: 双帧不拆分
- test_quit_discards_partial: 退出时丢弃半帧
- test_read_error_is_listener_error: 读取错误
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterator

from ..interfaces import IByteStream, ListenerError

if TYPE_CHECKING:
    from ..runtime.shutdown import ShutdownCoordinator

logger = logging.getLogger(__name__)


class FrameListener:
    """帧监听器"""

    def __init__(
        self,
        stream: IByteStream,
        shutdown: ShutdownCoordinator,
        terminator: bytes = b")",
        chunk_size: int = 1024,
    ):
        if not terminator:
            raise ValueError("terminator must not be empty")
        self.stream = stream
        self.shutdown = shutdown
        self.terminator = terminator
        self.chunk_size = chunk_size

    def listen(self) -> Iterator[str]:
        """逐帧产出帧文本（惰性，直到退出）"""
        buffer = bytearray()
        while not self.shutdown.should_quit():
            logger.debug("监听中")
            try:
                chunk = self.stream.read(self.chunk_size)
            except OSError as e:
                raise ListenerError(f"串口读取失败: {e}") from e

            if not chunk:
                continue

            buffer += chunk
            if self.terminator in buffer:
                frame = buffer.decode("ascii", errors="replace")
                buffer.clear()
                yield frame

        if buffer:
            logger.debug("退出时丢弃未完成的帧: %r", bytes(buffer))
