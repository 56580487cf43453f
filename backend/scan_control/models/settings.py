"""
扫描设置模型 - 单帧解码出的任务描述

对应按钮盒发送的帧：('size' => 'letter', 'mode' => 'pdf', 'crop' => 0, 'deskew' => 1)
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field

RawValue = bool | str


class PageSize(str, Enum):
    """纸张幅面"""
    LETTER = "letter"
    A4 = "a4"
    LEGAL = "legal"
    MAX = "max"


class ScanMode(str, Enum):
    """输出模式"""
    PDF = "pdf"
    JPG = "jpg"


class Settings(BaseModel):
    """扫描设置（不可变）"""

    model_config = ConfigDict(frozen=True)

    size: PageSize = PageSize.LETTER
    mode: ScanMode | None = None
    crop: bool = False
    deskew: bool = False
    raw: dict[str, RawValue] = Field(default_factory=dict, description="帧内全部键值（含未知键）")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, RawValue]) -> Settings:
        """由解析后的键值映射构造；未知键只保留在raw中"""
        fields: dict[str, Any] = {"raw": dict(mapping)}

        size = mapping.get("size")
        if isinstance(size, str) and size in _PAGE_SIZES:
            fields["size"] = PageSize(size)

        mode = mapping.get("mode")
        if isinstance(mode, str) and mode in _SCAN_MODES:
            fields["mode"] = ScanMode(mode)

        for key in ("crop", "deskew"):
            if key in mapping:
                # 符号值视为开启
                value = mapping[key]
                fields[key] = value if isinstance(value, bool) else True

        return cls(**fields)

    @property
    def is_pdf(self) -> bool:
        return self.mode == ScanMode.PDF

    @property
    def is_jpg(self) -> bool:
        return self.mode == ScanMode.JPG

    @property
    def unknown_keys(self) -> list[str]:
        """规划器忽略的键"""
        return [k for k in self.raw if k not in _KNOWN_KEYS]

    def summary(self) -> str:
        mode = self.mode.value if self.mode else "-"
        return (
            f"size={self.size.value} mode={mode} "
            f"crop={self.crop} deskew={self.deskew}"
        )


_PAGE_SIZES = {s.value for s in PageSize}
_SCAN_MODES = {m.value for m in ScanMode}
_KNOWN_KEYS = {"size", "mode", "crop", "deskew"}
