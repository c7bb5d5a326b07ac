"""Tests for the infobox block parser.

Covers:
- Block splitting (no delimiter, ---正文--- marker, titled delimiter)
- Title fallback
- Attribute lines (sections, tags, attributes, images)
- Tag list splitting
- File parsing through InfoboxParser
"""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from infobox.config import DEFAULT_SETTINGS
from infobox.parser.base import AttributeField, Document, SectionField, TagField
from infobox.parser.block_parser import InfoboxParser, parse_infobox_block, parse_lines, split_blocks, split_tags


# ---------------------------------------------------------------------------
# Block splitting
# ---------------------------------------------------------------------------

def test_no_delimiter_is_all_attributes() -> None:
    source = "\n+ Name: Alice\n- Tags: a, b\n"
    body, title, block = split_blocks(source)

    assert body == ""
    assert title == "基本资料"
    assert block == "+ Name: Alice\n- Tags: a, b"


def test_body_marker_with_titled_infobox() -> None:
    source = """\
---正文---
Alice is a *character*.

---Character---
+ Name: Alice
"""
    body, title, block = split_blocks(source)

    assert body == "Alice is a *character*."
    assert title == "Character"
    assert block == "+ Name: Alice"


def test_body_marker_without_second_delimiter() -> None:
    source = "---正文---\nOnly body text.\n+ Name: ignored\n"
    body, title, block = split_blocks(source)

    assert body == "Only body text.\n+ Name: ignored"
    assert title == "基本资料"
    assert block == ""


def test_body_marker_tolerates_padding() -> None:
    body, title, block = split_blocks("  --- 正文 ---  \nBody\n---Info---\n+ A: 1")

    assert body == "Body"
    assert title == "Info"
    assert block == "+ A: 1"


def test_titled_delimiter_splits_body_and_block() -> None:
    source = """\
Some intro text.

---Profile---
+ Born: 1990
"""
    body, title, block = split_blocks(source)

    assert body == "Some intro text."
    assert title == "Profile"
    assert block == "+ Born: 1990"


def test_later_delimiters_are_ignored() -> None:
    source = "Body\n---First---\n+ A: 1\n---Second---\n+ B: 2\n"
    body, title, block = split_blocks(source)

    assert body == "Body"
    assert title == "First"
    assert block == "+ A: 1"


def test_blank_title_falls_back_to_default() -> None:
    _, title, block = split_blocks("Body\n---   ---\n+ A: 1")

    assert title == "基本资料"
    assert block == "+ A: 1"


def test_delimiter_must_occupy_whole_line() -> None:
    source = "text ---Not a title--- more\n+ A: 1"
    body, title, block = split_blocks(source)

    assert body == ""
    assert title == "基本资料"
    assert block == source


def test_custom_default_title() -> None:
    settings = dataclasses.replace(DEFAULT_SETTINGS, default_title="Overview")
    _, title, _ = split_blocks("+ A: 1", settings)
    assert title == "Overview"


# ---------------------------------------------------------------------------
# Attribute lines
# ---------------------------------------------------------------------------

def test_tag_line() -> None:
    image_ref, fields = parse_lines("- Label: a, b,  c")

    assert image_ref is None
    assert fields == [TagField(label="Label", value="a, b,  c")]
    assert split_tags(fields[0].value) == ["a", "b", "c"]


def test_attribute_splits_on_first_separator_only() -> None:
    _, fields = parse_lines("+ Attr: x: y")
    assert fields == [AttributeField(label="Attr", value="x: y")]


def test_attribute_value_keeps_urls() -> None:
    _, fields = parse_lines("+ Site: https://example.org/a:b")
    assert fields == [AttributeField(label="Site", value="https://example.org/a:b")]


def test_prefixed_line_without_separator_is_dropped() -> None:
    _, fields = parse_lines("- justtext\n+ also text\n+ Kept: yes")
    assert fields == [AttributeField(label="Kept", value="yes")]


def test_unprefixed_lines_are_ignored() -> None:
    _, fields = parse_lines("a free note\nKey: value\n+ Real: 1")
    assert fields == [AttributeField(label="Real", value="1")]


def test_section_line() -> None:
    _, fields = parse_lines("===Intro===")
    assert fields == [SectionField(title="Intro")]


def test_section_title_is_trimmed() -> None:
    _, fields = parse_lines("=== Early life ===")
    assert fields == [SectionField(title="Early life")]


def test_short_sentinel_line_is_not_a_section() -> None:
    _, fields = parse_lines("======")
    assert fields == []


def test_image_line_sets_reference() -> None:
    image_ref, fields = parse_lines("![[pic.png]]")
    assert image_ref == "pic.png"
    assert fields == []


def test_first_image_wins() -> None:
    image_ref, fields = parse_lines("![[first.png]]\n+ A: 1\n![[second.png]]")
    assert image_ref == "first.png"
    assert fields == [AttributeField(label="A", value="1")]


def test_empty_image_embed_is_ignored() -> None:
    image_ref, fields = parse_lines("![[]]\n![[real.png]]")
    assert image_ref == "real.png"
    assert fields == []


def test_image_check_precedes_other_rules() -> None:
    image_ref, fields = parse_lines("![[===x===]]")
    assert image_ref == "===x==="
    assert fields == []


def test_blank_lines_never_produce_fields() -> None:
    block = "\n\n   \n===S===\n\n\t\n- T: a\n\n+ A: b\n   \n"
    _, fields = parse_lines(block)
    assert [f.kind for f in fields] == ["section", "tag", "field"]


def test_field_order_and_duplicates_preserved() -> None:
    _, fields = parse_lines("+ Name: A\n===Mid===\n+ Name: B\n- Name: c")
    assert fields == [
        AttributeField(label="Name", value="A"),
        SectionField(title="Mid"),
        AttributeField(label="Name", value="B"),
        TagField(label="Name", value="c"),
    ]


def test_windows_line_endings() -> None:
    _, fields = parse_lines("+ A: 1\r\n- B: x, y\r\n")
    assert fields == [AttributeField(label="A", value="1"), TagField(label="B", value="x, y")]


# ---------------------------------------------------------------------------
# Tag lists
# ---------------------------------------------------------------------------

def test_split_tags_full_width_comma() -> None:
    assert split_tags("剑士，魔法师, 学生") == ["剑士", "魔法师", "学生"]


def test_split_tags_drops_empties_keeps_duplicates() -> None:
    assert split_tags(" a ,, a ,，b, ") == ["a", "a", "b"]


@pytest.mark.parametrize("value", ["", None, " , ，"])
def test_split_tags_empty(value: str | None) -> None:
    assert split_tags(value) == []


# ---------------------------------------------------------------------------
# Document builder
# ---------------------------------------------------------------------------

def test_parse_infobox_block_builds_document() -> None:
    source = """\
---正文---
**Alice** is the protagonist.
---Alice---
![[alice.png]]
===Basics===
+ Full name: Alice Liddell
- Roles: [[Hero]], narrator
"""
    doc = parse_infobox_block(source)

    assert doc == Document(
        title="Alice",
        body="**Alice** is the protagonist.",
        image_ref="alice.png",
        fields=(
            SectionField(title="Basics"),
            AttributeField(label="Full name", value="Alice Liddell"),
            TagField(label="Roles", value="[[Hero]], narrator"),
        ),
    )


def test_parse_is_deterministic() -> None:
    source = "Body\n---T---\n+ A: 1\n- B: x"
    assert parse_infobox_block(source) == parse_infobox_block(source)


def test_document_is_immutable() -> None:
    doc = parse_infobox_block("+ A: 1")
    with pytest.raises(dataclasses.FrozenInstanceError):
        doc.title = "changed"  # type: ignore[misc]


def test_parser_reads_file(tmp_path: Path) -> None:
    p = tmp_path / "block.infobox"
    p.write_text("Intro\n---名片---\n+ 年龄: 17\n", encoding="utf-8")

    doc = InfoboxParser().parse(p)
    assert doc.body == "Intro"
    assert doc.title == "名片"
    assert doc.fields == (AttributeField(label="年龄", value="17"),)
