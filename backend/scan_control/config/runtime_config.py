"""
运行期配置 - 读取 config/scan_control.yaml

职责：
- 加载串口/扫描仪/输出目录/日志等运行参数
- 提供环境变量覆盖机制（SCAN_CONTROL_ 前缀，嵌套用 __；优先于配置文件）
- 类型安全的配置访问
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

DEFAULT_CONFIG_PATH = Path("config/scan_control.yaml")


class SerialConfig(BaseModel):
    """串口配置"""

    port: str = "/dev/serial/by-id/usb-FTDI_FT232R_USB_UART_A9MH1ZN7-if00-port0"
    baudrate: int = 9600
    bytesize: int = 8
    stopbits: int = 1
    parity: str = "N"
    read_timeout_ms: int = 1000
    terminator: str = ")"
    chunk_size: int = 1024
    on_parse_error: Literal["abort", "skip"] = "abort"


class ScannerConfig(BaseModel):
    """扫描与图像处理工具配置"""

    scanimage: str = "/usr/bin/scanimage"
    convert: str = "convert"
    gm: str = "gm"
    device_name: str = "fujitsu"
    source: str = "ADF Duplex"
    color_mode: str = "Color"
    despeckle: int = 2
    sleep_timer: int = 60
    source_profile: str = "profiles/scansnap.icc"
    target_profile: str = "profiles/sRGB_v4_ICC_preference.icc"
    timeout_sec: int = 600


class OutputConfig(BaseModel):
    """输出配置"""

    model_config = ConfigDict(validate_default=True)

    out_dir: Path = Path("~/scan")
    staging_prefix: str = "scan-control-"

    @field_validator("out_dir")
    @classmethod
    def _expand_out_dir(cls, v: Path) -> Path:
        return Path(v).expanduser()


class DesktopConfig(BaseModel):
    """桌面聚焦配置"""

    enabled: bool = True
    wmctrl: str = "wmctrl"
    window_title: str = "scan"
    workspace_name: str = "scan"
    file_browser: str = "nemo"
    timeout_sec: int = 10


class LoggingConfig(BaseModel):
    """日志配置"""

    model_config = ConfigDict(validate_default=True)

    log_level: str = "INFO"
    log_to_file: bool = True
    log_file: Path = Path("~/.scan-control.log")
    queue_size: int = 0

    @field_validator("log_file")
    @classmethod
    def _expand_log_file(cls, v: Path) -> Path:
        return Path(v).expanduser()


class RuntimeConfig(BaseSettings):
    """运行期配置（支持环境变量覆盖）"""

    serial: SerialConfig = Field(default_factory=SerialConfig)
    scanner: ScannerConfig = Field(default_factory=ScannerConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    desktop: DesktopConfig = Field(default_factory=DesktopConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    dry_run: bool = False

    model_config = {
        "env_prefix": "SCAN_CONTROL_",
        "env_nested_delimiter": "__",
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # 环境变量 > YAML（经构造参数传入） > 默认值
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RuntimeConfig:
        """从YAML文件加载配置"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        runtime_opts = data.get("runtime_options", {})

        config = cls(
            # 以字典传入，按字段与环境变量合并
            serial=cls._extract(runtime_opts, "serial"),
            scanner=cls._extract(runtime_opts, "scanner"),
            output=cls._extract(runtime_opts, "output"),
            desktop=cls._extract(runtime_opts, "desktop"),
            logging=cls._extract(runtime_opts, "logging"),
            dry_run=runtime_opts.get("dry_run", False),
        )

        config._resolve_paths(base_dir=path.parent)
        return config

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置"""
        section = data.get(key) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            elif not isinstance(v, dict):
                result[k] = v
        return result

    def _resolve_paths(self, base_dir: Path) -> None:
        """解析相对ICC路径为绝对路径（基于配置文件所在目录）"""
        for attr in ("source_profile", "target_profile"):
            profile = Path(getattr(self.scanner, attr))
            if not profile.is_absolute():
                setattr(self.scanner, attr, str((base_dir / profile).resolve()))

    @property
    def terminator_bytes(self) -> bytes:
        return self.serial.terminator.encode("ascii")


# 全局配置实例（仅供CLI入口使用，组件通过构造参数接收配置）
_config: RuntimeConfig | None = None


def get_config() -> RuntimeConfig:
    """获取全局配置（惰性加载）"""
    global _config
    if _config is None:
        _config = RuntimeConfig.from_yaml(DEFAULT_CONFIG_PATH)
    return _config


def reload_config(yaml_path: str | Path | None = None) -> RuntimeConfig:
    """重新加载配置"""
    global _config
    _config = RuntimeConfig.from_yaml(yaml_path or DEFAULT_CONFIG_PATH)
    return _config
