"""infobox CLI entrypoint."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from pathlib import Path

import click
from rich.logging import RichHandler

from infobox.config import DEFAULT_SETTINGS
from infobox.host import InfoboxPlugin
from infobox.renderer.dom import Element
from infobox.renderer.links import VaultResourceResolver

_NOTE_EXTENSIONS = (".md", ".markdown")
_BLOCK_EXTENSIONS = (".infobox", ".txt")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Path(path_type=Path), required=True, help="Output HTML path")
@click.option(
    "--vault",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Vault root used to resolve links and images (defaults to the input's folder)",
)
@click.option("--title", type=str, default=None, help="Override page title")
@click.option("--default-title", type=str, default=None, help="Infobox caption when the block has no title")
@click.option("--dark-mode", is_flag=True, help="Enable dark mode stylesheet")
@click.option("--embed-images/--no-embed-images", default=True, show_default=True, help="Embed images as base64")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(
    input_path: Path,
    output: Path,
    vault: Path | None,
    title: str | None,
    default_title: str | None,
    dark_mode: bool,
    embed_images: bool,
    verbose: bool,
) -> None:
    """Render infobox blocks into a self-contained HTML page."""
    _setup_logging(verbose)
    render = _select_mode(input_path)

    settings = DEFAULT_SETTINGS
    if default_title:
        settings = dataclasses.replace(settings, default_title=default_title)

    vault_root = (vault or input_path.parent).resolve()
    plugin = InfoboxPlugin(
        vault_root,
        settings=settings,
        resources=VaultResourceResolver(embed_images=embed_images),
    )
    plugin.load()
    try:
        source_path = _relative_source_path(input_path, vault_root)
        text = input_path.read_text(encoding="utf-8")
        content = asyncio.run(render(plugin, text, source_path))
        html = plugin.render_page(content, title=title or input_path.stem, dark_mode=dark_mode)
    finally:
        plugin.unload()

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html, encoding="utf-8")

    click.echo(f"Rendered: {output}")


def _select_mode(input_path: Path):
    lowered = input_path.name.lower()
    if lowered.endswith(_NOTE_EXTENSIONS):
        return _render_note
    if lowered.endswith(_BLOCK_EXTENSIONS):
        return _render_block
    raise click.ClickException(
        f"Unsupported input type: {input_path.name} (expected .md, .markdown, .infobox, or .txt)"
    )


async def _render_note(plugin: InfoboxPlugin, text: str, source_path: str) -> str:
    return await plugin.render_note(text, source_path)


async def _render_block(plugin: InfoboxPlugin, text: str, source_path: str) -> str:
    el = await plugin.process_code_block(plugin.settings.code_block_language, text, source_path)
    return el.to_html() if isinstance(el, Element) else ""


def _relative_source_path(input_path: Path, vault_root: Path) -> str:
    resolved = input_path.resolve()
    if resolved.is_relative_to(vault_root):
        return resolved.relative_to(vault_root).as_posix()
    return resolved.name


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=verbose)],
        force=True,
    )


if __name__ == "__main__":  # pragma: no cover
    main()
