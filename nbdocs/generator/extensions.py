"""Python-Markdown extensions for math placeholders and Mermaid diagrams.

:class:`MathExtension` turns the ``DISPLAY_MATH_n``/``INLINE_MATH_n`` tokens
left by :func:`nbdocs.sanitizer.sanitize_markdown` into elements carrying the
original TeX for client-side typesetting. :class:`MermaidExtension` lifts
```` ```mermaid ```` fences out before code highlighting so the diagram
source reaches the diagram engine untouched.
"""

from __future__ import annotations

import collections.abc as cabc
import re
import typing as typ
import xml.etree.ElementTree as etree
from html import escape

from markdown.extensions import Extension
from markdown.inlinepatterns import InlineProcessor
from markdown.preprocessors import Preprocessor
from markdown.treeprocessors import Treeprocessor
from markdown.util import AtomicString

from nbdocs._constants import DISPLAY_MATH_PREFIX, INLINE_MATH_PREFIX

if typ.TYPE_CHECKING:
    from markdown import Markdown

MATH_TOKEN_PATTERN = rf"({DISPLAY_MATH_PREFIX}|{INLINE_MATH_PREFIX})(\d+)"
MERMAID_FENCE_PATTERN = re.compile(
    r"^(?P<indent>[ ]{0,3})(?P<fence>`{3,}|~{3,})[ ]*mermaid[ ]*\n"
    r"(?P<source>.*?)\n(?P=indent)(?P=fence)[ ]*$",
    re.MULTILINE | re.DOTALL,
)
DISPLAY_CLASS = "math math-display"
INLINE_CLASS = "math math-inline"
MISSING_CLASS = "math-missing"


def math_element(token: str, math: cabc.Mapping[str, str]) -> etree.Element:
    """Build the element standing in for a math placeholder ``token``.

    Unknown tokens become a visible ``missing math`` marker instead of
    disappearing from the page.
    """
    expression = math.get(token)
    element = etree.Element("span")
    if expression is None:
        element.set("class", MISSING_CLASS)
        element.set("title", token)
        element.text = AtomicString(f"[missing math: {token}]")
        return element
    if token.startswith(DISPLAY_MATH_PREFIX):
        element.set("class", DISPLAY_CLASS)
        element.text = AtomicString(f"\\[{expression}\\]")
    else:
        element.set("class", INLINE_CLASS)
        element.text = AtomicString(f"\\({expression}\\)")
    element.set("data-tex", expression)
    return element


def render_math_html(token: str, math: cabc.Mapping[str, str]) -> str:
    """Return the serialized HTML for a math placeholder outside Markdown."""
    element = math_element(token, math)
    if element.get("class") == DISPLAY_CLASS:
        element.tag = "div"
    return etree.tostring(element, encoding="unicode", method="html")


class MathPlaceholderInlineProcessor(InlineProcessor):
    """Replace math placeholder tokens within inline text."""

    def __init__(self, pattern: str, md: Markdown, math: cabc.Mapping[str, str]) -> None:
        super().__init__(pattern, md)
        self.math = math

    def handleMatch(  # type: ignore[override]  # noqa: N802
        self, m: re.Match[str], data: str
    ) -> tuple[etree.Element, int, int]:
        """Return the math element for the matched token."""
        return math_element(m.group(0), self.math), m.start(0), m.end(0)


class DisplayMathTreeprocessor(Treeprocessor):
    """Promote paragraphs holding only display math to centred blocks."""

    def run(self, root: etree.Element) -> None:
        """Rewrite lone display-math paragraphs into ``div`` blocks."""
        for element in root.iter("p"):
            children = list(element)
            if len(children) != 1:
                continue
            child = children[0]
            if child.get("class") != DISPLAY_CLASS:
                continue
            if (element.text or "").strip() or (child.tail or "").strip():
                continue
            element.tag = "div"
            element.set("class", "math-block")
            child.tail = None


class MathExtension(Extension):
    """Register math placeholder substitution on a Markdown instance."""

    def __init__(self, math: cabc.Mapping[str, str] | None = None) -> None:
        super().__init__()
        self.math = dict(math or {})

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the inline processor and the display block treeprocessor."""
        md.inlinePatterns.register(
            MathPlaceholderInlineProcessor(MATH_TOKEN_PATTERN, md, self.math),
            "nbdocs_math",
            185,
        )
        md.treeprocessors.register(
            DisplayMathTreeprocessor(md), "nbdocs_display_math", 5
        )


def mermaid_html(source: str) -> str:
    """Return the diagram container for Mermaid ``source``."""
    return f'<pre class="mermaid">{escape(source)}</pre>'


class MermaidPreprocessor(Preprocessor):
    """Stash Mermaid fences as raw HTML before fenced code runs."""

    def run(self, lines: list[str]) -> list[str]:
        """Replace each Mermaid fence with an HTML stash placeholder."""
        text = "\n".join(lines)

        def _stash(match: re.Match[str]) -> str:
            placeholder = self.md.htmlStash.store(mermaid_html(match.group("source")))
            return f"\n\n{placeholder}\n\n"

        return MERMAID_FENCE_PATTERN.sub(_stash, text).split("\n")


class MermaidExtension(Extension):
    """Render ```` ```mermaid ```` fences as diagram containers."""

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the Mermaid preprocessor ahead of ``fenced_code``."""
        md.preprocessors.register(MermaidPreprocessor(md), "nbdocs_mermaid", 28)


__all__ = [
    "MathExtension",
    "MermaidExtension",
    "math_element",
    "mermaid_html",
    "render_math_html",
]
