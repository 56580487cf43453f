"""
命令行入口

子命令：
- listen: 监听按钮盒并执行扫描任务
- plan:   解析一帧并打印计划（不调用后端）

退出码：0 正常退出；1 监听器失败或帧解析失败终止
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from .config import RuntimeConfig, get_config, reload_config
from .controller import SettingsParser
from .interfaces import ListenerError, ParseError
from .pipeline import PipelinePlanner
from .runtime import LogSink, ScanServer, ShutdownCoordinator
from .scanner import ScanImageBackend, WmctrlDesktopFocus

logger = logging.getLogger("scan_control.cli")


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="scan-control",
        description="监听扫描按钮盒并运行扫描任务",
    )
    p.add_argument(
        "--config",
        type=Path,
        default=None,
        help="运行期配置文件（默认：config/scan_control.yaml）",
    )
    sub = p.add_subparsers(dest="command", required=True)

    listen = sub.add_parser("listen", help="监听按钮盒并运行扫描任务")
    listen.add_argument("--port", default=None, help="串口设备路径（覆盖配置）")
    listen.add_argument(
        "--log",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="日志写入 ~/.scan-control.log（--no-log 输出到标准输出）",
    )
    listen.add_argument("-v", "--verbose", action="store_true", help="输出调试日志")
    listen.add_argument(
        "-n",
        "--dryrun",
        action="store_true",
        help="试运行：只记录命令，不调用扫描/图像工具",
    )

    plan = sub.add_parser("plan", help="解析一帧并打印处理计划")
    plan.add_argument("frame", help="帧文本，如 \"('size' => 'a4', 'mode' => 'pdf')\"")
    return p


def load_config(path: Path | None) -> RuntimeConfig:
    return reload_config(path) if path else get_config()


def cmd_listen(args: argparse.Namespace, config: RuntimeConfig) -> int:
    if args.port:
        config.serial.port = args.port
    if args.log is not None:
        config.logging.log_to_file = args.log
    dry_run = args.dryrun or config.dry_run

    shutdown = ShutdownCoordinator()
    with LogSink(config.logging, verbose=args.verbose):
        shutdown.install_signal_handlers()
        server = ScanServer(
            config=config,
            backend=ScanImageBackend(config.scanner, dry_run=dry_run),
            shutdown=shutdown,
            desktop=WmctrlDesktopFocus(config.desktop, dry_run=dry_run),
        )
        try:
            server.run()
        except ListenerError as e:
            logger.error("监听器失败: %s", e)
            return 1
        except ParseError as e:
            logger.error("因帧解析失败退出: %s", e)
            return 1
        except Exception:
            logger.exception("主循环异常退出")
            raise
        finally:
            shutdown.restore_signal_handlers()
    return 0


def cmd_plan(args: argparse.Namespace, config: RuntimeConfig) -> int:
    try:
        settings = SettingsParser().parse(args.frame)
    except ParseError as e:
        print(f"解析失败: {e}")
        return 1

    plan = PipelinePlanner.from_config(config.scanner).plan(settings)
    output = {
        "settings": settings.model_dump(mode="json"),
        "plan": [
            {"kind": stage.kind.value, "parameters": stage.parameters}
            for stage in plan.stages
        ],
    }
    print(json.dumps(output, ensure_ascii=False, indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    config = load_config(args.config)

    if args.command == "listen":
        return cmd_listen(args, config)
    return cmd_plan(args, config)


if __name__ == "__main__":
    raise SystemExit(main())
