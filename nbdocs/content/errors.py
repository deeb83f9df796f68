"""Error taxonomy for loading and rendering documentation content."""

from __future__ import annotations

from pathlib import Path


class ContentError(Exception):
    """Base class for every failure raised by the content pipeline."""


class ContentNotFoundError(ContentError):
    """Raised when a slug does not resolve to any file on disk.

    Attributes
    ----------
    category : str or None
        Category directory that was searched, ``None`` for the content root.
    name : str
        Requested name within the category.
    available : list[str]
        Stems of the files that do exist in the category, for fallback pages.
    """

    def __init__(
        self, category: str | None, name: str, available: list[str] | None = None
    ) -> None:
        self.category = category
        self.name = name
        self.available = list(available or [])
        location = f"{category}/" if category else ""
        super().__init__(f"No content matches '{location}{name}'.")


class FormatError(ContentError):
    """Raised when notebook JSON or a content file cannot be decoded."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Malformed content in '{path}': {reason}")


class ContentIOError(ContentError):
    """Raised when a content file exists but cannot be read."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Unable to read '{path}': {reason}")


class RenderError(ContentError):
    """Raised when converting a parsed document into HTML fails."""


__all__ = [
    "ContentError",
    "ContentIOError",
    "ContentNotFoundError",
    "FormatError",
    "RenderError",
]
