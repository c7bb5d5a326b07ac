"""Parser package."""

from .base import AttributeField, Document, Field, SectionField, TagField
from .block_parser import InfoboxParser, parse_infobox_block, parse_lines, split_blocks, split_tags

__all__ = [
    "AttributeField",
    "Document",
    "Field",
    "SectionField",
    "TagField",
    "InfoboxParser",
    "parse_infobox_block",
    "parse_lines",
    "split_blocks",
    "split_tags",
]
