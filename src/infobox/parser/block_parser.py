"""Infobox block parser: splits a fenced block into body, title and fields."""

from __future__ import annotations

import re
from pathlib import Path

from infobox.config import DEFAULT_SETTINGS, InfoboxSettings

from .base import AttributeField, Document, Field, SectionField, TagField


class InfoboxParser:
    """Parse infobox markup into the Document IR."""

    def __init__(self, settings: InfoboxSettings | None = None) -> None:
        self.settings = settings or DEFAULT_SETTINGS

    def parse(self, input_path: Path) -> Document:
        input_path = Path(input_path)
        raw = input_path.read_text(encoding="utf-8")
        return self.parse_text(raw)

    def parse_text(self, source: str) -> Document:
        return parse_infobox_block(source, self.settings)


def parse_infobox_block(source: str, settings: InfoboxSettings | None = None) -> Document:
    """Build a Document from one infobox block."""
    settings = settings or DEFAULT_SETTINGS
    body, title, attribute_block = split_blocks(source, settings)
    image_ref, fields = parse_lines(attribute_block, settings)
    return Document(title=title, body=body, image_ref=image_ref, fields=tuple(fields))


# ---------------------------------------------------------------------------
# Block splitting
# ---------------------------------------------------------------------------

# A standalone ``---label---`` line. The label is captured so that
# ``re.split`` interleaves it with the surrounding segments.
_DELIMITER_RE = re.compile(r"^\s*---(.+?)---\s*$", re.MULTILINE)


def split_blocks(source: str, settings: InfoboxSettings | None = None) -> tuple[str, str, str]:
    """Split *source* into ``(body, title, attribute_block)``.

    ``---正文---`` marks the body explicitly; any other delimiter label is the
    infobox title, with the text above it as the body. Without a delimiter the
    whole source is the attribute block.
    """
    settings = settings or DEFAULT_SETTINGS
    parts = _DELIMITER_RE.split(source)

    body = ""
    title = ""
    attribute_block = ""

    if len(parts) == 1:
        attribute_block = source
    elif parts[1].strip() == settings.body_marker:
        body = _part(parts, 2)
        if _part(parts, 3):
            title = _part(parts, 3)
            attribute_block = _part(parts, 4)
    else:
        body = parts[0]
        title = parts[1]
        attribute_block = _part(parts, 2)

    return body.strip(), title.strip() or settings.default_title, attribute_block.strip()


def _part(parts: list[str], idx: int) -> str:
    return parts[idx] if idx < len(parts) and parts[idx] else ""


# ---------------------------------------------------------------------------
# Attribute lines
# ---------------------------------------------------------------------------

def parse_lines(
    attribute_block: str, settings: InfoboxSettings | None = None
) -> tuple[str | None, list[Field]]:
    """Classify attribute lines into fields; the first image embed wins."""
    settings = settings or DEFAULT_SETTINGS
    sentinel = settings.section_sentinel
    section_re = re.compile(rf"^{re.escape(sentinel)}.+{re.escape(sentinel)}$")

    image_ref: str | None = None
    fields: list[Field] = []

    for line in attribute_block.split("\n"):
        line = line.strip()
        if not line:
            continue

        if line.startswith("![[") and line.endswith("]]"):
            ref = line[3:-2]
            if image_ref is None and ref:
                image_ref = ref
            continue

        if section_re.match(line):
            fields.append(SectionField(title=line.replace(sentinel, "").strip()))
            continue

        if line.startswith(settings.tag_prefix):
            pair = _split_label(line[len(settings.tag_prefix):], settings.label_separator)
            if pair is not None:
                fields.append(TagField(label=pair[0], value=pair[1]))
            continue

        if line.startswith(settings.attribute_prefix):
            pair = _split_label(line[len(settings.attribute_prefix):], settings.label_separator)
            if pair is not None:
                fields.append(AttributeField(label=pair[0], value=pair[1]))
            continue

    return image_ref, fields


def _split_label(content: str, separator: str) -> tuple[str, str] | None:
    """Split ``label: value`` at the first separator; None when there is none."""
    content = content.strip()
    if separator not in content:
        return None
    label, value = content.split(separator, 1)
    return label.strip(), value.strip()


# ---------------------------------------------------------------------------
# Tag lists
# ---------------------------------------------------------------------------

def split_tags(value: str | None, settings: InfoboxSettings | None = None) -> list[str]:
    """Split a tag value on ASCII or full-width commas, dropping empty pieces."""
    if not value:
        return []
    settings = settings or DEFAULT_SETTINGS
    pattern = "[" + re.escape(settings.tag_separators) + "]"
    return [tag.strip() for tag in re.split(pattern, value) if tag.strip()]
