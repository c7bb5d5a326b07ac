"""Grammar markers and host defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class InfoboxSettings:
    default_title: str = "基本资料"
    body_marker: str = "正文"
    tag_prefix: str = "-"
    attribute_prefix: str = "+"
    label_separator: str = ":"
    tag_separators: str = ",，"
    section_sentinel: str = "==="
    css_id: str = "infobox-style"
    code_block_language: str = "infobox"


DEFAULT_SETTINGS = InfoboxSettings()
