"""
pytest 配置与公共 fixtures

使用方式：
    def test_something(parser, planner):
        plan = planner.plan(parser.parse("()"))
"""

from __future__ import annotations

import tempfile
from datetime import datetime
from pathlib import Path
from typing import Generator

import pytest

from scan_control.config import LoggingConfig, OutputConfig, RuntimeConfig
from scan_control.controller import SettingsParser
from scan_control.interfaces import ExecutionError, IDesktopFocus, IScanBackend
from scan_control.models import AcquireParams, AdjustParams, AggregateParams
from scan_control.pipeline import PipelineExecutor, PipelinePlanner
from scan_control.runtime import ShutdownCoordinator

FIXED_NOW = datetime(2026, 10, 19, 9, 30, 0)
FIXED_TIMESTAMP = "2026_10_19_09_30_00"


# ============================================================================
# 替身实现
# ============================================================================

class FakeStream:
    """按顺序返回预设分片的字节流；分片耗尽后请求退出"""

    def __init__(self, chunks: list[bytes | Exception], shutdown: ShutdownCoordinator):
        self.chunks = list(chunks)
        self.shutdown = shutdown
        self.reads = 0
        self.closed = False

    def read(self, size: int = 1) -> bytes:
        self.reads += 1
        if not self.chunks:
            self.shutdown.request_quit("stream exhausted")
            return b""
        chunk = self.chunks.pop(0)
        if isinstance(chunk, Exception):
            raise chunk
        return chunk

    def close(self) -> None:
        self.closed = True


class FakeBackend(IScanBackend):
    """记录调用的扫描后端；可指定第N张调整失败"""

    def __init__(self, pages: int = 2, fail_on_adjust: int | None = None, fail_acquire: bool = False):
        self.pages = pages
        self.fail_on_adjust = fail_on_adjust
        self.fail_acquire = fail_acquire
        self.calls: list[str] = []
        self.staging_dirs: list[Path] = []
        self.aggregated: list[tuple[list[Path], Path]] = []

    def acquire(self, params: AcquireParams, staging_dir: Path, timestamp: str) -> list[Path]:
        self.calls.append("acquire")
        self.staging_dirs.append(staging_dir)
        if self.fail_acquire:
            raise ExecutionError("scanner offline")
        images = []
        for i in range(1, self.pages + 1):
            image = staging_dir / f"{timestamp}_{i:03d}.tif"
            image.write_bytes(b"tif")
            images.append(image)
        return images

    def adjust(self, raw_image: Path, params: AdjustParams, destination_dir: Path) -> Path:
        self.calls.append("adjust")
        if self.fail_on_adjust is not None and self.calls.count("adjust") == self.fail_on_adjust:
            raise ExecutionError(f"convert failed on {raw_image.name}")
        output = destination_dir / f"{raw_image.stem}.jpg"
        output.write_bytes(b"jpg")
        return output

    def route_output(self, adjusted_image: Path, destination_dir: Path) -> Path:
        self.calls.append("route_output")
        target = destination_dir / adjusted_image.name
        adjusted_image.replace(target)
        return target

    def aggregate(self, images: list[Path], destination: Path, params: AggregateParams) -> Path:
        self.calls.append("aggregate")
        self.aggregated.append((list(images), destination))
        destination.write_bytes(b"%PDF")
        return destination


class FakeDesktop(IDesktopFocus):
    """记录聚焦请求"""

    def __init__(self) -> None:
        self.surfaced: list[Path] = []

    def surface(self, output_dir: Path) -> bool:
        self.surfaced.append(output_dir)
        return True


# ============================================================================
# 文件 Fixtures
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """临时目录"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def out_dir(temp_dir: Path) -> Path:
    """持久输出目录"""
    return temp_dir / "scan"


# ============================================================================
# 组件 Fixtures
# ============================================================================

@pytest.fixture
def runtime_config(temp_dir: Path, out_dir: Path) -> RuntimeConfig:
    """运行期配置（输出与日志指向临时目录）"""
    return RuntimeConfig(
        output=OutputConfig(out_dir=out_dir),
        logging=LoggingConfig(log_file=temp_dir / "scan-control.log"),
    )


@pytest.fixture
def shutdown() -> ShutdownCoordinator:
    return ShutdownCoordinator()


@pytest.fixture
def parser() -> SettingsParser:
    return SettingsParser()


@pytest.fixture
def planner() -> PipelinePlanner:
    return PipelinePlanner(source_profile="scanner.icc", target_profile="srgb.icc")


@pytest.fixture
def desktop() -> FakeDesktop:
    return FakeDesktop()


@pytest.fixture
def executor(out_dir: Path, desktop: FakeDesktop) -> PipelineExecutor:
    return PipelineExecutor(output_dir=out_dir, desktop=desktop, clock=lambda: FIXED_NOW)


@pytest.fixture
def make_stream(shutdown: ShutdownCoordinator):
    """字节流工厂：make_stream([b"(", b")"])"""
    def _make(chunks: list[bytes | Exception]) -> FakeStream:
        return FakeStream(chunks, shutdown)
    return _make


@pytest.fixture
def make_backend():
    """扫描后端工厂：make_backend(pages=3, fail_on_adjust=2)"""
    return FakeBackend


@pytest.fixture
def capture_timestamp() -> str:
    """FIXED_NOW 对应的采集时间戳"""
    return FIXED_TIMESTAMP
