"""Host integration: code-block processors, stylesheet registry and page output."""

from __future__ import annotations

import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from infobox.config import DEFAULT_SETTINGS, InfoboxSettings
from infobox.renderer.dom import Element
from infobox.renderer.html_renderer import InfoboxRenderer
from infobox.renderer.links import LinkResolver, ResourceResolver, VaultLinkResolver, VaultResourceResolver
from infobox.renderer.markdown import MarkdownRenderer, MistuneMarkdownRenderer

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent / "template"

CodeBlockProcessor = Callable[[str, Element, str], Awaitable[None]]

# A closing fence may be longer than the opening one.
_FENCE_RE = re.compile(
    r"^(?P<fence>(?P<fence_char>[`~])(?P=fence_char){2,})[ \t]*(?P<lang>[^\s`]*)[^\n]*\n(?P<source>.*?)^(?P=fence)(?P=fence_char)*[ \t]*$\n?",
    re.MULTILINE | re.DOTALL,
)


@dataclass(frozen=True, slots=True)
class StylesheetLink:
    id: str
    href: str
    rel: str = "stylesheet"
    type: str = "text/css"


class DocumentHead:
    """Stylesheet links installed into the output page, keyed by id."""

    def __init__(self) -> None:
        self._links: dict[str, StylesheetLink] = {}

    def __contains__(self, css_id: str) -> bool:
        return css_id in self._links

    @property
    def links(self) -> list[StylesheetLink]:
        return list(self._links.values())

    def ensure_stylesheet(self, css_id: str, href: str) -> bool:
        """Install a stylesheet link once; return False if it was already there."""
        if css_id in self._links:
            return False
        self._links[css_id] = StylesheetLink(id=css_id, href=href)
        return True

    def remove_stylesheet(self, css_id: str) -> bool:
        return self._links.pop(css_id, None) is not None


# Shared by every plugin in the process unless a head is passed explicitly.
DEFAULT_HEAD = DocumentHead()


def stylesheet_path() -> Path:
    return TEMPLATE_DIR / "styles.css"


class InfoboxPlugin:
    """Wire the infobox renderer into a note-rendering pipeline."""

    def __init__(
        self,
        vault_root: Path,
        *,
        settings: InfoboxSettings | None = None,
        markdown: MarkdownRenderer | None = None,
        links: LinkResolver | None = None,
        resources: ResourceResolver | None = None,
        head: DocumentHead | None = None,
    ) -> None:
        self.vault_root = Path(vault_root)
        self.settings = settings or DEFAULT_SETTINGS
        self.links = links or VaultLinkResolver(self.vault_root)
        self.resources = resources or VaultResourceResolver()
        self.markdown = markdown or MistuneMarkdownRenderer(self.links, self.resources)
        self.head = head if head is not None else DEFAULT_HEAD
        self._processors: dict[str, CodeBlockProcessor] = {}
        self._env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)), autoescape=True, trim_blocks=True, lstrip_blocks=True
        )

    # -- lifecycle -----------------------------------------------------------

    def load(self) -> None:
        self.register_stylesheet()
        self.register_code_block_processor(self.settings.code_block_language, self._render_infobox)
        logger.info("Infobox plugin loaded")

    def unload(self) -> None:
        self.head.remove_stylesheet(self.settings.css_id)
        self._processors.clear()
        logger.info("Infobox plugin unloaded")

    def register_stylesheet(self) -> bool:
        href = self.resources.get_resource_path(stylesheet_path())
        return self.head.ensure_stylesheet(self.settings.css_id, href)

    def register_code_block_processor(self, language: str, processor: CodeBlockProcessor) -> None:
        self._processors[language] = processor

    async def _render_infobox(self, source: str, el: Element, source_path: str) -> None:
        renderer = InfoboxRenderer(
            markdown=self.markdown, links=self.links, resources=self.resources, settings=self.settings
        )
        await renderer.render(source, el, source_path)

    # -- rendering -------------------------------------------------------------

    async def process_code_block(self, language: str, source: str, source_path: str) -> Element | None:
        processor = self._processors.get(language)
        if processor is None:
            return None
        el = Element("div", cls=f"block-language-{language}")
        await processor(source, el, source_path)
        return el

    async def render_note(self, text: str, source_path: str) -> str:
        """Render a Markdown note, handing registered fenced blocks to their processors."""
        parts: list[str] = []
        pending: list[str] = []
        pos = 0

        for m in _FENCE_RE.finditer(text):
            language = m.group("lang")
            if language not in self._processors:
                continue
            pending.append(text[pos:m.start()])
            parts.append(await self._render_markdown("".join(pending), source_path))
            pending.clear()
            el = await self.process_code_block(language, m.group("source"), source_path)
            parts.append(el.to_html())
            pos = m.end()

        pending.append(text[pos:])
        parts.append(await self._render_markdown("".join(pending), source_path))
        return "\n".join(part for part in parts if part)

    async def _render_markdown(self, markup: str, source_path: str) -> str:
        if not markup.strip():
            return ""
        container = Element("div", cls="markdown-preview-section")
        await self.markdown.render(markup, container, source_path)
        return container.to_html()

    def render_page(self, note_html: str, *, title: str, dark_mode: bool = False) -> str:
        template = self._env.get_template("page.html")
        return template.render(
            page_title=title,
            stylesheets=self.head.links,
            content=note_html,
            dark_mode=dark_mode,
        )
