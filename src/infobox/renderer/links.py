"""Resolve wiki-style link targets to files inside a vault directory."""

from __future__ import annotations

import base64
import glob
import logging
import mimetypes
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class LinkResolver(Protocol):
    def get_first_linkpath_dest(self, linkpath: str, source_path: str) -> Path | None:  # pragma: no cover
        """Return the file a link points to, or None when it cannot be found."""


class ResourceResolver(Protocol):
    def get_resource_path(self, path: Path) -> str:  # pragma: no cover
        """Return a ``src``/``href`` value a browser can display."""


def link_target(linkpath: str) -> str:
    """Strip ``|alias`` and ``#subpath`` parts from a wiki link."""
    return linkpath.split("|", 1)[0].split("#", 1)[0].strip()


class VaultLinkResolver:
    """Look up link targets the way a note vault does.

    The path is tried relative to the linking note, then to the vault root.
    Failing that, the shallowest file in the vault with the same name wins.
    Targets without a suffix are also tried as Markdown notes.
    """

    def __init__(self, vault_root: Path) -> None:
        self.vault_root = Path(vault_root).resolve()

    def get_first_linkpath_dest(self, linkpath: str, source_path: str) -> Path | None:
        target = link_target(linkpath)
        if not target:
            return None

        names = [target]
        if not Path(target).suffix:
            names.append(f"{target}.md")

        source_dir = (self.vault_root / source_path).parent if source_path else self.vault_root
        for name in names:
            for base in (source_dir, self.vault_root):
                candidate = (base / name).resolve()
                if candidate.is_file() and candidate.is_relative_to(self.vault_root):
                    return candidate

        for name in names:
            basename = Path(name).name
            matches = sorted(
                (p for p in self.vault_root.rglob(glob.escape(basename)) if p.is_file()),
                key=lambda p: (len(p.relative_to(self.vault_root).parts), str(p)),
            )
            if matches:
                return matches[0]

        logger.debug("Unresolved link %r from %r", linkpath, source_path)
        return None


class VaultResourceResolver:
    """Turn vault files into displayable sources."""

    def __init__(self, embed_images: bool = True) -> None:
        self.embed_images = embed_images

    def get_resource_path(self, path: Path) -> str:
        if self.embed_images:
            data_uri = _maybe_embed_image(path)
            if data_uri:
                return data_uri
        return Path(path).resolve().as_uri()


def _maybe_embed_image(path: Path) -> str | None:
    if not path.exists() or not path.is_file():
        return None
    mime, _ = mimetypes.guess_type(path.name)
    mime = mime or "application/octet-stream"
    data = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime};base64,{data}"
