"""Immutable content models produced by the parser and consumed by renderers.

A resolved file becomes exactly one :data:`ContentItem`: either a
:class:`MarkdownDocument` or a :class:`NotebookDocument`. Consumers branch on
the variant with ``match`` rather than probing attributes.

Example
-------
>>> from nbdocs.content.models import Cell, CellKind
>>> Cell(kind=CellKind.MARKDOWN, source="# Title").kind
<CellKind.MARKDOWN: 'markdown'>
"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ
from pathlib import Path  # noqa: TC003 - used for runtime type metadata

from nbdocs._constants import DEFAULT_ORDER


class CellKind(enum.StrEnum):
    """Notebook cell types understood by the renderer."""

    MARKDOWN = "markdown"
    CODE = "code"
    RAW = "raw"


class OutputKind(enum.StrEnum):
    """Notebook output types understood by the renderer."""

    STREAM = "stream"
    DISPLAY_DATA = "display_data"
    EXECUTE_RESULT = "execute_result"
    ERROR = "error"


@dc.dataclass(frozen=True, slots=True)
class StreamPayload:
    """Text written to ``stdout`` or ``stderr`` by a code cell."""

    text: str
    name: str = "stdout"


@dc.dataclass(frozen=True, slots=True)
class ErrorPayload:
    """Exception raised while a code cell executed."""

    name: str
    value: str
    traceback: tuple[str, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class Output:
    """A single code cell output.

    Attributes
    ----------
    kind : OutputKind
        Output type as recorded in the notebook.
    stream : StreamPayload or None
        Populated for ``stream`` outputs.
    data : dict[str, str]
        MIME type to content mapping for ``display_data`` and
        ``execute_result`` outputs; list-valued entries are already joined.
    error : ErrorPayload or None
        Populated for ``error`` outputs.
    """

    kind: OutputKind
    stream: StreamPayload | None = None
    data: dict[str, str] = dc.field(default_factory=dict)
    error: ErrorPayload | None = None


@dc.dataclass(frozen=True, slots=True)
class Cell:
    """A notebook cell with its source already joined into one string."""

    kind: CellKind
    source: str
    outputs: tuple[Output, ...] = ()
    execution_count: int | None = None


@dc.dataclass(frozen=True, slots=True)
class MarkdownDocument:
    """Markdown or MDX page with parsed frontmatter and sanitized body.

    Attributes
    ----------
    slug : str
        Posix path of the file relative to the content root, sans suffix.
    frontmatter : dict[str, Any]
        Decoded frontmatter; always carries ``title``, ``description`` and
        ``order``.
    body : str
        Markdown body after sanitization.
    math : dict[str, str]
        Placeholder token to raw expression mapping extracted from the body.
    path : Path or None
        File the document was read from.
    """

    slug: str
    frontmatter: dict[str, typ.Any]
    body: str
    math: dict[str, str] = dc.field(default_factory=dict)
    path: Path | None = None

    @property
    def title(self) -> str:
        """Return the resolved document title."""
        return str(self.frontmatter.get("title") or self.slug)

    @property
    def order(self) -> int:
        """Return the explicit ordering value or the default sentinel."""
        value = self.frontmatter.get("order", DEFAULT_ORDER)
        return value if isinstance(value, int) else DEFAULT_ORDER


@dc.dataclass(frozen=True, slots=True)
class NotebookDocument:
    """Jupyter notebook (or converted Python script) as ordered cells."""

    slug: str
    title: str
    cells: tuple[Cell, ...]
    language: str = "python"
    path: Path | None = None

    def markdown_text(self) -> str:
        """Return the markdown cell sources joined with single spaces."""
        return " ".join(
            cell.source for cell in self.cells if cell.kind is CellKind.MARKDOWN
        )


ContentItem: typ.TypeAlias = MarkdownDocument | NotebookDocument


@dc.dataclass(frozen=True, slots=True)
class NavNode:
    """Sidebar entry, optionally grouping child entries."""

    title: str
    slug: str
    href: str
    order: int = DEFAULT_ORDER
    children: tuple[NavNode, ...] = ()


__all__ = [
    "Cell",
    "CellKind",
    "ContentItem",
    "ErrorPayload",
    "MarkdownDocument",
    "NavNode",
    "NotebookDocument",
    "Output",
    "OutputKind",
    "StreamPayload",
]
