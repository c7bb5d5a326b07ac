"""Renderer package."""

from .dom import Container, Element
from .html_renderer import InfoboxRenderer
from .links import VaultLinkResolver, VaultResourceResolver
from .markdown import MistuneMarkdownRenderer

__all__ = [
    "Container",
    "Element",
    "InfoboxRenderer",
    "MistuneMarkdownRenderer",
    "VaultLinkResolver",
    "VaultResourceResolver",
]
