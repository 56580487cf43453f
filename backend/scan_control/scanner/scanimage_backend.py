"""
扫描后端 - scanimage / ImageMagick / GraphicsMagick 封装

职责：
- 将类型化阶段参数翻译为命令参数列表（不经过shell）
- 执行命令并处理超时和错误
- dry-run 时只记录命令，不产生副作用

依赖：
- scanimage (SANE)、convert (ImageMagick)、gm (GraphicsMagick)

测试要点：
- test_acquire_command: 采集命令
- test_adjust_command_flags: crop/deskew/normalize 开关
- test_aggregate_command: 合并命令
- test_dry_run_no_process: dry-run 不调用进程
- test_command_failure: 非零退出码转为 ExecutionError
"""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from pathlib import Path

from ..config import ScannerConfig
from ..interfaces import ExecutionError, IScanBackend
from ..models import AcquireParams, AdjustParams, AggregateParams

logger = logging.getLogger(__name__)

CROP_ARGS = ["-border", "5x5", "-fuzz", "20%", "-trim", "+repage"]
DESKEW_ARGS = ["-fuzz", "10%", "-deskew", "40%", "+repage"]


class ScanImageBackend(IScanBackend):
    """命令行扫描后端"""

    def __init__(self, config: ScannerConfig | None = None, dry_run: bool = False):
        self.config = config or ScannerConfig()
        self.dry_run = dry_run

    # ------------------------------------------------------------------
    # 命令构造
    # ------------------------------------------------------------------

    def acquire_command(self, params: AcquireParams, staging_dir: Path, timestamp: str) -> list[str]:
        cmd = [
            self.config.scanimage,
            "--device-name", self.config.device_name,
            "--format=tiff",
            f"--source={params.source}",
            "--mode", params.color_mode,
            "--resolution", str(params.resolution),
            f"--batch={staging_dir / f'{timestamp}_%03d.tif'}",
        ]
        if params.geometry is not None:
            cmd.extend(params.geometry.as_args())
        cmd.extend([
            f"--swdespeck={self.config.despeckle}",
            "--sleeptimer", str(self.config.sleep_timer),
        ])
        return cmd

    def adjust_command(self, raw_image: Path, params: AdjustParams, output_path: Path) -> list[str]:
        source_icc, target_icc = params.profiles
        cmd = [
            self.config.convert,
            str(raw_image),
            "-bordercolor", params.background,
            "-background", params.background,
        ]
        if params.deskew:
            cmd.extend(DESKEW_ARGS)
        if params.crop:
            cmd.extend(CROP_ARGS)
        cmd.extend([
            "-intent", params.rendering_intent,
            "-profile", source_icc,
            "-profile", target_icc,
            "+profile", "*",
        ])
        if params.normalize:
            cmd.append("-normalize")
        cmd.extend(["-quality", f"{params.quality}%", str(output_path)])
        return cmd

    def aggregate_command(self, images: list[Path], destination: Path) -> list[str]:
        return [self.config.gm, "convert", *[str(p) for p in images], str(destination)]

    # ------------------------------------------------------------------
    # IScanBackend
    # ------------------------------------------------------------------

    def acquire(self, params: AcquireParams, staging_dir: Path, timestamp: str) -> list[Path]:
        """采集，返回暂存目录中的 tif 列表"""
        self._run(self.acquire_command(params, staging_dir, timestamp))
        return sorted(staging_dir.glob(f"{timestamp}_*.tif"))

    def adjust(self, raw_image: Path, params: AdjustParams, destination_dir: Path) -> Path:
        """调整单页，输出同名 jpg"""
        output_path = destination_dir / f"{raw_image.stem}.jpg"
        self._run(self.adjust_command(raw_image, params, output_path))
        return output_path

    def route_output(self, adjusted_image: Path, destination_dir: Path) -> Path:
        """移入输出目录"""
        target = destination_dir / adjusted_image.name
        logger.info("输出: %s", target)
        if self.dry_run:
            return target
        try:
            shutil.move(str(adjusted_image), str(target))
        except OSError as e:
            raise ExecutionError(f"移动输出失败: {adjusted_image} -> {target}: {e}") from e
        return target

    def aggregate(self, images: list[Path], destination: Path, params: AggregateParams) -> Path:
        """合并为多页文档"""
        self._run(self.aggregate_command(images, destination))
        return destination

    def _run(self, cmd: list[str]) -> None:
        logger.info(shlex.join(cmd))
        if self.dry_run:
            return

        try:
            subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.config.timeout_sec,
                check=True,
            )
        except FileNotFoundError as e:
            raise ExecutionError(f"命令不存在: {cmd[0]}") from e
        except subprocess.TimeoutExpired as e:
            raise ExecutionError(f"命令超时: {cmd[0]}") from e
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or e.stdout or "").strip()
            raise ExecutionError(f"命令失败({e.returncode}): {cmd[0]}: {detail}") from e
