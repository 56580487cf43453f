import argparse
import sys
from pathlib import Path


def _add_backend_to_path() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    backend_root = repo_root / "backend"
    if str(backend_root) not in sys.path:
        sys.path.insert(0, str(backend_root))


def _collect_frames(path: Path) -> list[str]:
    lines = path.read_text(encoding="utf-8").splitlines()
    return [line for line in lines if line.strip()]


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Parse and plan recorded button-box frames without scanning."
    )
    parser.add_argument(
        "frames_file",
        help="帧文件（每行一帧，如串口抓包或日志摘录）",
    )
    parser.add_argument(
        "--config",
        default="config/scan_control.yaml",
        help="运行期配置（默认：config/scan_control.yaml）",
    )
    args = parser.parse_args()

    _add_backend_to_path()
    from scan_control.config import RuntimeConfig  # type: ignore
    from scan_control.controller import SettingsParser  # type: ignore
    from scan_control.interfaces import ParseError  # type: ignore
    from scan_control.pipeline import PipelinePlanner  # type: ignore

    config = RuntimeConfig.from_yaml(args.config)
    settings_parser = SettingsParser()
    planner = PipelinePlanner.from_config(config.scanner)

    frames = _collect_frames(Path(args.frames_file))
    if not frames:
        print("未找到可处理的帧")
        return 1

    failures = 0
    for frame in frames:
        try:
            settings = settings_parser.parse(frame)
        except ParseError as exc:
            failures += 1
            print(f"{frame}: ERROR {exc}")
            continue
        plan = planner.plan(settings)
        print(f"{frame}: {settings.summary()}")
        for line in plan.describe():
            print(f"    {line}")

    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
