"""Minimal element tree used as the rendering surface."""

from __future__ import annotations

import html
import re
from typing import Protocol

# Elements serialised without a closing tag.
_VOID_TAGS = frozenset({"br", "hr", "img", "input", "link", "meta"})

_SINGLE_PARAGRAPH_RE = re.compile(r"^\s*<p>(?P<inner>(?:(?!<p[\s>]).)*?)</p>\s*$", re.DOTALL)


class Container(Protocol):
    """UI builder surface the infobox renderer writes into."""

    def create_el(
        self,
        tag: str,
        *,
        cls: str | None = None,
        text: str | None = None,
        attr: dict[str, str] | None = None,
    ) -> "Container": ...

    def create_div(self, *, cls: str | None = None, text: str | None = None) -> "Container": ...

    def create_span(self, *, cls: str | None = None, text: str | None = None) -> "Container": ...

    def set_text(self, text: str) -> None: ...

    def set_attr(self, name: str, value: str) -> None: ...

    def empty(self) -> None: ...

    def append_html(self, fragment: str) -> None: ...

    def unwrap_single_paragraph(self) -> bool: ...


class RawHTML(str):
    """Trusted markup inserted verbatim by the rich-text renderer."""


class Element:
    """A DOM-like node that serialises to HTML."""

    def __init__(
        self,
        tag: str,
        *,
        cls: str | None = None,
        text: str | None = None,
        attr: dict[str, str] | None = None,
    ) -> None:
        self.tag = tag
        self.attrs: dict[str, str] = {}
        self.children: list[Element | RawHTML | str] = []
        if cls:
            self.attrs["class"] = cls
        if attr:
            self.attrs.update(attr)
        if text is not None:
            self.children.append(text)

    def __repr__(self) -> str:
        return f"<Element {self.tag} {self.attrs!r} children={len(self.children)}>"

    # -- builder -----------------------------------------------------------

    def create_el(
        self,
        tag: str,
        *,
        cls: str | None = None,
        text: str | None = None,
        attr: dict[str, str] | None = None,
    ) -> Element:
        child = Element(tag, cls=cls, text=text, attr=attr)
        self.children.append(child)
        return child

    def create_div(self, *, cls: str | None = None, text: str | None = None) -> Element:
        return self.create_el("div", cls=cls, text=text)

    def create_span(self, *, cls: str | None = None, text: str | None = None) -> Element:
        return self.create_el("span", cls=cls, text=text)

    def set_text(self, text: str) -> None:
        self.children = [text]

    def set_attr(self, name: str, value: str) -> None:
        self.attrs[name] = value

    def empty(self) -> None:
        self.children.clear()

    def append_html(self, fragment: str) -> None:
        if fragment:
            self.children.append(RawHTML(fragment))

    def unwrap_single_paragraph(self) -> bool:
        """Replace a lone ``<p>`` wrapper with its contents; return whether it did."""
        markup = self.inner_html()
        match = _SINGLE_PARAGRAPH_RE.match(markup)
        if not match:
            return False
        self.children = [RawHTML(match.group("inner"))]
        return True

    # -- queries -------------------------------------------------------------

    @property
    def cls(self) -> str:
        return self.attrs.get("class", "")

    def find_all(self, cls: str) -> list[Element]:
        """Return descendants whose class list contains *cls*, in document order."""
        found: list[Element] = []
        for child in self.children:
            if isinstance(child, Element):
                if cls in child.cls.split():
                    found.append(child)
                found.extend(child.find_all(cls))
        return found

    def text_content(self) -> str:
        parts: list[str] = []
        for child in self.children:
            if isinstance(child, Element):
                parts.append(child.text_content())
            elif isinstance(child, RawHTML):
                parts.append(html.unescape(re.sub(r"<[^>]+>", "", child)))
            else:
                parts.append(child)
        return "".join(parts)

    # -- serialisation -----------------------------------------------------

    def inner_html(self) -> str:
        parts: list[str] = []
        for child in self.children:
            if isinstance(child, Element):
                parts.append(child.to_html())
            elif isinstance(child, RawHTML):
                parts.append(str(child))
            else:
                parts.append(html.escape(child))
        return "".join(parts)

    def to_html(self) -> str:
        attrs = "".join(f' {name}="{html.escape(value)}"' for name, value in self.attrs.items())
        if self.tag in _VOID_TAGS:
            return f"<{self.tag}{attrs} />"
        return f"<{self.tag}{attrs}>{self.inner_html()}</{self.tag}>"
