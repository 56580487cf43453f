"""
帧解析器 - 将帧文本解析为 Settings

帧语法（按钮盒固件输出的 Perl 哈希字面量）：
    ('size' => 'letter', 'mode' => 'pdf', 'crop' => 0, 'deskew' => 1)

- 值为 0/1 时解析为布尔
- 其余值（单引号单词）解析为枚举符号
- 重复键：后出现者覆盖
- () 合法，得到全部默认值
- 末尾多余的分隔符忽略：('size' => 'a4', )
- 只校验首尾括号；连按两次拼接的帧按一帧解析（结果错乱但不中断监听）

测试要点：
- test_parse_full_frame: 完整帧
- test_parse_empty_record: ()
- test_duplicate_key_last_wins: 重复键
- test_malformed_frames: 各类格式错误
"""

from __future__ import annotations

import re

from ..interfaces import ParseError
from ..models import Settings
from ..models.settings import RawValue

_ENTRY_SEP = re.compile(r",\s?")
_PAIR_SEP = re.compile(r"\s?=>\s?")
_STRIP_CHARS = re.compile(r"[()']")


class SettingsParser:
    """帧解析器实现"""

    def parse(self, frame_text: str) -> Settings:
        """解析帧为 Settings"""
        return Settings.from_mapping(self.parse_mapping(frame_text))

    def parse_mapping(self, frame_text: str) -> dict[str, RawValue]:
        """解析帧为原始键值映射"""
        text = frame_text.strip()
        if not text:
            raise ParseError("空帧", frame=frame_text)

        if not (text.startswith("(") and text.endswith(")")):
            raise ParseError("帧未被括号包围", frame=frame_text)

        body = _STRIP_CHARS.sub("", text)
        if not body.strip():
            return {}

        result: dict[str, RawValue] = {}
        entries = [e for e in _ENTRY_SEP.split(body) if e.strip()]
        for entry in entries:
            key, value = self._split_entry(entry, frame_text)
            result[key] = self._convert(value)
        return result

    @staticmethod
    def _split_entry(entry: str, frame_text: str) -> tuple[str, str]:
        if "=>" not in entry:
            raise ParseError(f"缺少键值分隔符: {entry!r}", frame=frame_text)

        # 多余的 => 片段丢弃，只取前两段
        parts = _PAIR_SEP.split(entry)
        key, value = parts[0].strip(), parts[1].strip()
        if not key:
            raise ParseError(f"缺少键: {entry!r}", frame=frame_text)
        if not value:
            raise ParseError(f"缺少值: {entry!r}", frame=frame_text)
        return key, value

    @staticmethod
    def _convert(value: str) -> RawValue:
        if value == "0":
            return False
        if value == "1":
            return True
        return value
