"""Render an infobox block into a two-column wiki layout."""

from __future__ import annotations

import logging

from infobox.config import DEFAULT_SETTINGS, InfoboxSettings
from infobox.parser.base import AttributeField, Document, Field, SectionField, TagField
from infobox.parser.block_parser import parse_infobox_block, split_tags

from .dom import Container
from .links import LinkResolver, ResourceResolver
from .markdown import MarkdownRenderer, MistuneMarkdownRenderer

logger = logging.getLogger(__name__)

ERROR_PREFIX = "Infobox 解析错误: "


class InfoboxRenderer:
    """Render infobox source into a container.

    Markdown renders are awaited one at a time so the output order matches
    the field order. Any failure replaces the whole output with a single
    ``infobox-error`` node.
    """

    def __init__(
        self,
        *,
        markdown: MarkdownRenderer | None = None,
        links: LinkResolver | None = None,
        resources: ResourceResolver | None = None,
        settings: InfoboxSettings | None = None,
    ) -> None:
        self.links = links
        self.resources = resources
        self.markdown = markdown or MistuneMarkdownRenderer(links, resources)
        self.settings = settings or DEFAULT_SETTINGS

    async def render(self, source: str, container: Container, source_path: str = "") -> None:
        try:
            container.empty()
            document = parse_infobox_block(source, self.settings)
            await self.render_document(document, container, source_path)
        except Exception as exc:
            logger.exception("Failed to render infobox in %s", source_path or "<memory>")
            container.empty()
            container.create_el("pre", cls="infobox-error", text=ERROR_PREFIX + str(exc))

    async def render_document(self, document: Document, container: Container, source_path: str) -> None:
        layout = container.create_div(cls="wiki-layout")
        body = layout.create_div(cls="wiki-content")
        if document.body:
            await self.markdown.render(document.body, body, source_path)

        infobox = layout.create_div(cls="infobox")
        infobox.create_div(cls="infobox-title", text=document.title)

        if document.image_ref:
            self._render_image(document.image_ref, infobox.create_div(cls="infobox-image"), source_path)

        table = infobox.create_el("table", cls="infobox-table")
        tbody = table.create_el("tbody")
        for item in document.fields:
            await self._render_field(item, tbody, source_path)

    def _render_image(self, image_ref: str, container: Container, source_path: str) -> None:
        image_file = None
        if self.links is not None:
            image_file = self.links.get_first_linkpath_dest(image_ref, source_path)

        if image_file is None or self.resources is None:
            container.set_text(f"Image not found: {image_ref}")
            return

        src = self.resources.get_resource_path(image_file)
        container.create_el("img", attr={"src": src, "alt": image_ref})

    async def _render_field(self, item: Field, tbody: Container, source_path: str) -> None:
        match item:
            case SectionField(title=title):
                row = tbody.create_el("tr", cls="infobox-section-row")
                row.create_el("td", cls="infobox-section-title", text=title, attr={"colspan": "2"})
            case TagField(label=label, value=value):
                value_td = self._label_row(tbody, label)
                tags = value_td.create_div(cls="infobox-tags")
                for tag in split_tags(value, self.settings):
                    chip = tags.create_span(cls="infobox-tag")
                    await self.markdown.render(tag, chip, source_path)
                    chip.unwrap_single_paragraph()
            case AttributeField(label=label, value=value):
                value_td = self._label_row(tbody, label)
                await self.markdown.render(value, value_td, source_path)
            case _:
                raise TypeError(f"Unsupported infobox field: {item!r}")

    def _label_row(self, tbody: Container, label: str) -> Container:
        row = tbody.create_el("tr")
        row.create_el("td", cls="infobox-label", text=label)
        return row.create_el("td", cls="infobox-value")
