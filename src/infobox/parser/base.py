"""Core intermediate representation (IR) for parsed infobox blocks."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Protocol


@dataclass(frozen=True, slots=True)
class SectionField:
    title: str
    kind: Literal["section"] = "section"


@dataclass(frozen=True, slots=True)
class TagField:
    label: str
    value: str
    kind: Literal["tag"] = "tag"


@dataclass(frozen=True, slots=True)
class AttributeField:
    label: str
    value: str
    kind: Literal["field"] = "field"


Field = SectionField | TagField | AttributeField


@dataclass(frozen=True, slots=True)
class Document:
    title: str
    body: str = ""
    image_ref: str | None = None
    fields: tuple[Field, ...] = field(default_factory=tuple)


class Parser(Protocol):
    def parse(self, input_path: Path) -> Document:  # pragma: no cover - structural protocol
        """Parse an input file into Document IR."""
