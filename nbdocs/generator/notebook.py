"""Render notebook cells and their outputs into HTML fragments."""

from __future__ import annotations

import logging
import re
import typing as typ
from html import escape

from nbdocs._constants import DISPLAY_MATH_PREFIX
from nbdocs.content.errors import RenderError
from nbdocs.content.models import Cell, CellKind, NotebookDocument, Output, OutputKind
from nbdocs.generator.extensions import render_math_html
from nbdocs.sanitizer import sanitize_markdown, strip_unsafe_html

if typ.TYPE_CHECKING:
    from nbdocs.generator.renderer import HtmlContentRenderer

logger = logging.getLogger(__name__)

ANSI_PATTERN = re.compile(r"\x1b\[[0-9;:]*[A-Za-z]|\x1b\][^\x07]*(?:\x07|\x1b\\)")
LATEX_DELIMITERS = (("$$", "$$"), ("\\[", "\\]"), ("$", "$"))
BASE64_IMAGE_TYPES = ("image/png", "image/jpeg", "image/gif")


def strip_latex_delimiters(source: str) -> str:
    """Remove one pair of surrounding TeX math delimiters, if present."""
    text = source.strip()
    for opening, closing in LATEX_DELIMITERS:
        if (
            len(text) >= len(opening) + len(closing)
            and text.startswith(opening)
            and text.endswith(closing)
        ):
            return text[len(opening) : len(text) - len(closing)].strip()
    return text


class NotebookHtmlRenderer:
    """Walk a :class:`NotebookDocument` and emit HTML per cell and output."""

    def __init__(self, renderer: HtmlContentRenderer) -> None:
        self.renderer = renderer

    def render(self, notebook: NotebookDocument) -> str:
        """Return the HTML for every cell of ``notebook``.

        Raises
        ------
        RenderError
            If an unexpected error escapes a cell.
        """
        parts: list[str] = []
        for index, cell in enumerate(notebook.cells):
            try:
                parts.append(self.cell(cell, notebook.language))
            except RenderError:
                raise
            except Exception as exc:  # noqa: BLE001 - reported as RenderError
                msg = f"Cell {index} of {notebook.slug} failed to render: {exc}"
                raise RenderError(msg) from exc
        return f'<div class="notebook">{"".join(parts)}</div>'

    def cell(self, cell: Cell, language: str) -> str:
        """Return the HTML for one cell."""
        match cell.kind:
            case CellKind.MARKDOWN:
                return self._markdown_cell(cell)
            case CellKind.CODE:
                return self._code_cell(cell, language)
            case CellKind.RAW:
                return f'<pre class="nb-cell nb-raw">{escape(cell.source)}</pre>'
            case _:
                typ.assert_never(cell.kind)

    def _markdown_cell(self, cell: Cell) -> str:
        sanitized = sanitize_markdown(cell.source)
        try:
            body = self.renderer.markdown(sanitized.text, sanitized.math)
        except RenderError:
            logger.exception("Markdown cell fell back to plain text")
            body = self.renderer.fallback(cell.source)
        return f'<div class="nb-cell nb-markdown">{body}</div>'

    def _code_cell(self, cell: Cell, language: str) -> str:
        if not cell.source.strip() and not cell.outputs:
            return ""
        count = "" if cell.execution_count is None else str(cell.execution_count)
        prompt = f'<div class="nb-prompt">In [{escape(count) or " "}]:</div>'
        source = self.renderer.code_block(cell.source, language)
        outputs = "".join(self.output(output) for output in cell.outputs)
        outputs_html = f'<div class="nb-outputs">{outputs}</div>' if outputs else ""
        return (
            f'<div class="nb-cell nb-code">{prompt}'
            f'<div class="nb-input">{source}</div>{outputs_html}</div>'
        )

    def output(self, output: Output) -> str:
        """Return the HTML for one code cell output."""
        match output.kind:
            case OutputKind.STREAM:
                stream = output.stream
                if stream is None or not stream.text:
                    return ""
                name = re.sub(r"[^a-z0-9_-]", "", stream.name.lower()) or "stdout"
                return (
                    f'<pre class="nb-output nb-stream nb-{name}">'
                    f"{escape(stream.text)}</pre>"
                )
            case OutputKind.DISPLAY_DATA | OutputKind.EXECUTE_RESULT:
                return self._rich_output(output.data)
            case OutputKind.ERROR:
                return self._error_output(output)
            case _:
                typ.assert_never(output.kind)

    def _rich_output(self, data: dict[str, str]) -> str:
        """Prefer HTML, then images, then LaTeX, then Markdown, then text."""
        if html := data.get("text/html"):
            return f'<div class="nb-output nb-html">{strip_unsafe_html(html)}</div>'
        for mime in BASE64_IMAGE_TYPES:
            if payload := data.get(mime):
                encoded = "".join(payload.split())
                return (
                    f'<div class="nb-output nb-image">'
                    f'<img src="data:{mime};base64,{encoded}" alt="Output"></div>'
                )
        if svg := data.get("image/svg+xml"):
            return f'<div class="nb-output nb-image">{strip_unsafe_html(svg)}</div>'
        if latex := data.get("text/latex"):
            token = f"{DISPLAY_MATH_PREFIX}0"
            math_html = render_math_html(token, {token: strip_latex_delimiters(latex)})
            return f'<div class="nb-output nb-latex">{math_html}</div>'
        if markdown_text := data.get("text/markdown"):
            sanitized = sanitize_markdown(markdown_text)
            body = self.renderer.markdown(sanitized.text, sanitized.math)
            return f'<div class="nb-output nb-markdown">{body}</div>'
        if text := data.get("text/plain"):
            return f'<pre class="nb-output nb-text">{escape(text)}</pre>'
        return ""

    @staticmethod
    def _error_output(output: Output) -> str:
        error = output.error
        if error is None:
            return ""
        if error.traceback:
            text = "\n".join(ANSI_PATTERN.sub("", line) for line in error.traceback)
        else:
            text = f"{error.name}: {error.value}"
        return f'<pre class="nb-output nb-error">{escape(text)}</pre>'

    @staticmethod
    def plain_text(notebook: NotebookDocument) -> str:
        """Return every cell source joined with blank lines."""
        return "\n\n".join(cell.source for cell in notebook.cells)


__all__ = ["NotebookHtmlRenderer", "strip_latex_delimiters"]
