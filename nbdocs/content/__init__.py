"""Content discovery, slug resolution, and parsing for nbdocs."""

from .errors import (
    ContentError,
    ContentIOError,
    ContentNotFoundError,
    FormatError,
    RenderError,
)
from .models import ContentItem, MarkdownDocument, NavNode, NotebookDocument
from .parser import load_content
from .resolver import SlugResolver
from .store import ContentStore

__all__ = [
    "ContentError",
    "ContentIOError",
    "ContentItem",
    "ContentNotFoundError",
    "ContentStore",
    "FormatError",
    "MarkdownDocument",
    "NavNode",
    "NotebookDocument",
    "RenderError",
    "SlugResolver",
    "load_content",
]
