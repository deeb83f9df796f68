"""Filesystem-backed access to the documentation content tree.

The content root holds loose Markdown/MDX pages plus one subdirectory per
category (``tutorials/`` and ``examples/`` by default) containing notebooks
and optional Python scripts. Every listing is sorted so callers never depend
on the platform's directory enumeration order.
"""

from __future__ import annotations

import collections.abc as cabc
import logging
from pathlib import Path

from nbdocs._constants import MARKDOWN_SUFFIXES, NOTEBOOK_SUFFIXES
from nbdocs.content.errors import ContentError
from nbdocs.content.models import ContentItem
from nbdocs.content.parser import load_content

logger = logging.getLogger(__name__)


class ContentStore:
    """Read-only view over a content root and its category directories."""

    def __init__(self, root: Path, categories: cabc.Iterable[str] = ()) -> None:
        """Initialize the store.

        Parameters
        ----------
        root : Path
            Directory holding loose pages and the category subdirectories.
        categories : Iterable[str]
            Names of the category subdirectories holding notebooks.
        """
        self.root = root
        self.categories = tuple(categories)

    def category_dir(self, category: str | None) -> Path:
        """Return the directory for ``category`` (the root for ``None``)."""
        return self.root if category is None else self.root / category

    def has_category(self, category: str | None) -> bool:
        """Return True when the category directory exists."""
        return self.category_dir(category).is_dir()

    def list_files(self, category: str | None, suffixes: cabc.Iterable[str]) -> list[str]:
        """Return sorted file names in one directory matching ``suffixes``."""
        directory = self.category_dir(category)
        if not directory.is_dir():
            return []
        wanted = tuple(suffix.lower() for suffix in suffixes)
        return sorted(
            entry.name
            for entry in directory.iterdir()
            if entry.is_file() and entry.suffix.lower() in wanted
        )

    def markdown_files(self) -> list[Path]:
        """Return every Markdown/MDX file below the root, sorted by path."""
        if not self.root.is_dir():
            return []
        return sorted(
            (
                path
                for path in self.root.rglob("*")
                if path.is_file() and path.suffix.lower() in MARKDOWN_SUFFIXES
            ),
            key=lambda path: path.relative_to(self.root).as_posix(),
        )

    def notebook_files(self) -> list[Path]:
        """Return root notebooks, then notebooks and scripts per category."""
        files: list[Path] = [
            self.root / name for name in self.list_files(None, (".ipynb",))
        ]
        for suffix in NOTEBOOK_SUFFIXES:
            for category in self.categories:
                directory = self.category_dir(category)
                files.extend(
                    directory / name for name in self.list_files(category, (suffix,))
                )
        return files

    def slug_for(self, path: Path) -> str:
        """Return the posix slug of ``path`` relative to the root, sans suffix."""
        return path.relative_to(self.root).with_suffix("").as_posix()

    def load(self, path: Path) -> ContentItem:
        """Parse a single file from the store."""
        return load_content(path, self.slug_for(path))

    def iter_items(self) -> cabc.Iterator[ContentItem]:
        """Yield every parseable content item, Markdown first then notebooks.

        Files that fail to load are logged and skipped so one broken page
        never hides the rest of the site.
        """
        for path in [*self.markdown_files(), *self.notebook_files()]:
            try:
                yield self.load(path)
            except ContentError as exc:
                logger.warning("Skipping %s: %s", path, exc)

    def signature(self) -> tuple[tuple[str, int], ...]:
        """Return directory modification times used for cache invalidation."""
        stamps: list[tuple[str, int]] = []
        for category in (None, *self.categories):
            directory = self.category_dir(category)
            try:
                stamps.append((str(category or ""), directory.stat().st_mtime_ns))
            except OSError:
                stamps.append((str(category or ""), -1))
        return tuple(stamps)


__all__ = ["ContentStore"]
