"""Utilities for rendering markdown, notebooks, and syntax-highlighted code."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import re
import typing as typ
from html import escape

from markdown import Markdown
from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from nbdocs.content.errors import RenderError
from nbdocs.content.models import MarkdownDocument, NotebookDocument
from nbdocs.generator.extensions import MathExtension, MermaidExtension, mermaid_html
from nbdocs.generator.notebook import NotebookHtmlRenderer
from nbdocs.sanitizer import restore_math

if typ.TYPE_CHECKING:
    from markdown.extensions import Extension

    from nbdocs.content.models import ContentItem
else:  # pragma: no cover - type-checking fallback
    Extension = typ.Any

logger = logging.getLogger(__name__)

CODE_BLOCK_PATTERN = re.compile(r"```([A-Za-z0-9_+#.-]+)?[^\n]*\n(.*?)```", re.DOTALL)
FENCED_INDENT_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)
FENCE_LABEL_PATTERN = re.compile(
    r"^([`~]{3,})([A-Za-z0-9_+#.-]+)?(,[^\r\n]+)$", re.MULTILINE
)
CODEHILITE_OPEN_TAG = re.compile(r'<div class="codehilite">')
DIAGRAM_LANGUAGES = frozenset({"mermaid"})


@dc.dataclass(frozen=True, slots=True)
class RenderedContent:
    """HTML produced for one content item.

    Attributes
    ----------
    title : str
        Display title of the item.
    html : str
        Rendered body HTML.
    kind : str
        ``"markdown"`` or ``"jupyter"``.
    fallback : bool
        True when rendering failed and ``html`` holds the plain-text fallback.
    """

    title: str
    html: str
    kind: str
    fallback: bool = False


class HtmlContentRenderer:
    """Render markdown, notebooks, and code snippets with consistent styling."""

    def __init__(self, pygments_style: str = "monokai") -> None:
        """Initialize a renderer with an optional pygments style.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for syntax highlighting. Defaults to
            ``"monokai"``.
        """
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")
        self.notebooks = NotebookHtmlRenderer(self)

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def markdown(self, text: str, math: cabc.Mapping[str, str] | None = None) -> str:
        """Render sanitized markdown into HTML, substituting math placeholders.

        Raises
        ------
        RenderError
            If Python-Markdown fails while converting ``text``.
        """
        normalized = self._normalize_fenced_blocks(text)
        if not normalized.strip():
            return ""
        extensions: list[Extension | str] = [
            MermaidExtension(),
            "fenced_code",
            "codehilite",
            "tables",
            "sane_lists",
            MathExtension(math),
        ]
        md = Markdown(
            extensions=extensions,
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                }
            },
        )
        try:
            html = md.convert(normalized)
        except Exception as exc:  # noqa: BLE001 - Markdown extensions raise anything
            msg = f"Markdown conversion failed: {exc}"
            raise RenderError(msg) from exc
        return self._annotate_codehilite(html, normalized)

    def code_block(self, code: str, language: str | None = None) -> str:
        """Render ``code`` into highlighted HTML with an optional language tag.

        Parameters
        ----------
        code : str
            Source snippet to highlight.
        language : str, optional
            Pygments lexer name; defaults to ``"text"`` when not provided or
            when the lexer lookup fails. ``"mermaid"`` produces a diagram
            container holding ``code`` verbatim.

        Returns
        -------
        str
            HTML containing the highlighted block with ``data-language``
            metadata applied.
        """
        lang = language or "text"
        if lang.lower() in DIAGRAM_LANGUAGES:
            return mermaid_html(code)
        try:
            lexer = get_lexer_by_name(lang)
        except ClassNotFound:
            lexer = get_lexer_by_name("text")
        html = highlight(code, lexer, self._formatter)
        return self._attach_language_attribute(html, lang)

    def render(self, item: ContentItem) -> RenderedContent:
        """Render a content item, never raising past this boundary.

        Any failure while walking the document is logged and replaced by an
        escaped ``<pre>`` block of the best available sanitized source.
        """
        match item:
            case MarkdownDocument():
                kind = "markdown"
                try:
                    html = self.markdown(item.body, item.math)
                except RenderError:
                    logger.exception("Falling back to plain text for %s", item.slug)
                    return RenderedContent(
                        title=item.title,
                        html=self.fallback(restore_math(item.body, item.math)),
                        kind=kind,
                        fallback=True,
                    )
            case NotebookDocument():
                kind = "jupyter"
                try:
                    html = self.notebooks.render(item)
                except RenderError:
                    logger.exception("Falling back to plain text for %s", item.slug)
                    return RenderedContent(
                        title=item.title,
                        html=self.fallback(self.notebooks.plain_text(item)),
                        kind=kind,
                        fallback=True,
                    )
            case _:
                typ.assert_never(item)
        return RenderedContent(title=item.title, html=html, kind=kind)

    @staticmethod
    def fallback(text: str) -> str:
        """Return ``text`` as an escaped preformatted block."""
        return f'<pre class="render-fallback">{escape(text)}</pre>'

    def _annotate_codehilite(self, html: str, source_markdown: str) -> str:
        """Attach language metadata to each highlighted block in converted markdown."""
        languages = [
            match.group(1) or "text"
            for match in CODE_BLOCK_PATTERN.finditer(source_markdown)
            if (match.group(1) or "").lower() not in DIAGRAM_LANGUAGES
        ]
        if not languages:
            return html
        lang_iter = iter(languages)

        def _repl(match: re.Match[str]) -> str:
            lang = next(lang_iter, "text")
            return (
                f'<div class="codehilite" data-language="{escape(lang, quote=True)}">'
            )

        return CODEHILITE_OPEN_TAG.sub(_repl, html, len(languages))

    @staticmethod
    def _attach_language_attribute(html: str, language: str) -> str:
        """Add a single language attribute to an already highlighted block."""
        safe_lang = escape(language or "text", quote=True)

        def _repl(match: re.Match[str]) -> str:
            return f'<div class="codehilite" data-language="{safe_lang}">'

        return CODEHILITE_OPEN_TAG.sub(_repl, html, 1)

    @staticmethod
    def _normalize_fenced_blocks(text: str) -> str:
        without_indent = FENCED_INDENT_PATTERN.sub(r"\1", text)

        def _strip_labels(match: re.Match[str]) -> str:
            fence, language, _extras = match.groups()
            label = language or ""
            return f"{fence}{label}"

        return FENCE_LABEL_PATTERN.sub(_strip_labels, without_indent)


__all__ = ["CODE_BLOCK_PATTERN", "HtmlContentRenderer", "RenderedContent"]
