"""
桌面聚焦 - 任务完成后展示输出目录

流程：
1. wmctrl -F -a <标题>：输出窗口已打开则直接聚焦
2. 否则在 wmctrl -d 中找到名称含 <工作区名> 的工作区并切换
3. 打开文件浏览器定位到输出目录

失败只记录告警，不影响任务结果。
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from ..config import DesktopConfig
from ..interfaces import IDesktopFocus

logger = logging.getLogger(__name__)


class WmctrlDesktopFocus(IDesktopFocus):
    """基于 wmctrl 的桌面聚焦"""

    def __init__(self, config: DesktopConfig | None = None, dry_run: bool = False):
        self.config = config or DesktopConfig()
        self.dry_run = dry_run

    def surface(self, output_dir: Path) -> bool:
        if self.dry_run or not self.config.enabled:
            return False

        try:
            focused = subprocess.run(
                [self.config.wmctrl, "-F", "-a", self.config.window_title],
                capture_output=True,
                text=True,
                timeout=self.config.timeout_sec,
            )
            if focused.returncode == 0:
                return True

            listing = subprocess.run(
                [self.config.wmctrl, "-d"],
                capture_output=True,
                text=True,
                timeout=self.config.timeout_sec,
            )
            workspace = self.find_workspace(listing.stdout, self.config.workspace_name)
            if workspace is not None:
                subprocess.run(
                    [self.config.wmctrl, "-s", workspace],
                    capture_output=True,
                    timeout=self.config.timeout_sec,
                )
            else:
                logger.warning("未找到工作区: %s", self.config.workspace_name)

            subprocess.Popen(
                [self.config.file_browser, str(output_dir)],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning("桌面聚焦失败: %s", e)
            return False

        return True

    @staticmethod
    def find_workspace(listing: str, name: str) -> str | None:
        """从 wmctrl -d 输出中找出工作区编号"""
        for line in listing.splitlines():
            if name in line:
                fields = line.split()
                if fields:
                    return fields[0]
        return None
