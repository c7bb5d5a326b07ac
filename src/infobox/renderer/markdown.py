"""Rich-text rendering of Markdown fragments via mistune."""

from __future__ import annotations

import html
import mimetypes
from pathlib import Path
from typing import Protocol

import mistune

from .dom import Container
from .links import LinkResolver, ResourceResolver, link_target

# Inline rules; mistune skips them inside code spans and code blocks.
_EMBED_PATTERN = r"!\[\[(?P<embed_target>[^\]]+)\]\]"
_WIKILINK_PATTERN = r"\[\[(?P<wiki_target>[^\]|]+)(?:\|(?P<wiki_label>[^\]]+))?\]\]"


class MarkdownRenderer(Protocol):
    async def render(self, markup: str, container: Container, source_path: str) -> None:  # pragma: no cover
        """Render *markup* into *container*."""


class MistuneMarkdownRenderer:
    """Render Markdown with wiki links resolved against a vault."""

    def __init__(self, links: LinkResolver | None = None, resources: ResourceResolver | None = None) -> None:
        self.links = links
        self.resources = resources
        self._md = mistune.create_markdown(
            renderer=mistune.HTMLRenderer(escape=False),
            plugins=["table", "strikethrough", "url", self._wikilinks],
        )

    async def render(self, markup: str, container: Container, source_path: str) -> None:
        container.append_html(self.to_html(markup, source_path))

    def to_html(self, markup: str, source_path: str) -> str:
        state = self._md.block.state_cls()
        state.env["source_path"] = source_path
        output, _ = self._md.parse(markup, state)
        return output

    # -- wiki link plugin ----------------------------------------------------

    def _wikilinks(self, md: mistune.Markdown) -> None:
        """Register ``![[embed]]`` and ``[[target|alias]]`` as inline tokens."""
        md.inline.register("wiki_embed", _EMBED_PATTERN, self._parse_embed, before="link")
        md.inline.register("wikilink", _WIKILINK_PATTERN, self._parse_link, before="link")
        if md.renderer and md.renderer.NAME == "html":
            md.renderer.register("wiki_embed", _render_embed)
            md.renderer.register("wikilink", _render_link)

    def _parse_embed(self, inline, m, state) -> int:
        raw = m.group("embed_target").strip()
        dest = self._resolve(raw, state.env.get("source_path", ""))
        src = None
        if dest is not None and self.resources is not None and _is_image(dest.name):
            src = self.resources.get_resource_path(dest)
        state.append_token(
            {
                "type": "wiki_embed",
                "raw": link_target(raw),
                "attrs": {"alt": raw, "src": src, "resolved": dest is not None},
            }
        )
        return m.end()

    def _parse_link(self, inline, m, state) -> int:
        target = m.group("wiki_target").strip()
        label = (m.group("wiki_label") or target).strip()
        dest = self._resolve(target, state.env.get("source_path", ""))
        state.append_token(
            {
                "type": "wikilink",
                "raw": label,
                "attrs": {
                    "target": target,
                    "href": self._href(dest) if dest is not None else target,
                    "resolved": dest is not None,
                },
            }
        )
        return m.end()

    def _resolve(self, linkpath: str, source_path: str) -> Path | None:
        if self.links is None:
            return None
        return self.links.get_first_linkpath_dest(linkpath, source_path)

    def _href(self, dest: Path) -> str:
        vault_root = getattr(self.links, "vault_root", None)
        if vault_root is not None and dest.is_relative_to(vault_root):
            return dest.relative_to(vault_root).as_posix()
        return dest.as_uri()


def _render_embed(renderer, text: str, alt: str, src: str | None, resolved: bool) -> str:
    if src:
        return f'<img src="{html.escape(src)}" alt="{html.escape(alt)}" />'
    cls = "internal-embed" if resolved else "internal-embed is-unresolved"
    return f'<span class="{cls}">{html.escape(text)}</span>'


def _render_link(renderer, text: str, target: str, href: str, resolved: bool) -> str:
    cls = "internal-link" if resolved else "internal-link is-unresolved"
    return (
        f'<a class="{cls}" data-href="{html.escape(target)}" '
        f'href="{html.escape(href)}">{html.escape(text)}</a>'
    )


def _is_image(name: str) -> bool:
    mime, _ = mimetypes.guess_type(name)
    return bool(mime and mime.startswith("image/"))
