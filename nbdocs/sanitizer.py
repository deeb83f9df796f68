r"""Repair loosely written Markdown and lift math out of it before rendering.

Docs and notebook cells are frequently authored for MDX or Jupyter, whose
Markdown dialects tolerate tables without separator rows, headings glued to
the previous paragraph, ESM ``import`` lines, and TeX between dollar signs.
:func:`sanitize_markdown` rewrites those constructs into plain Markdown that
Python-Markdown renders predictably and returns the extracted math so the
renderer can substitute it back in.

The passes run in a fixed order and later passes never see protected regions:

1. fenced code blocks (and inline code spans) become opaque placeholders;
2. ``$$...$$`` becomes ``DISPLAY_MATH_n`` and ``$...$`` becomes
   ``INLINE_MATH_n``;
3. pipe tables are padded, given separator rows, and spaced from prose;
4. headings are normalized and spaced from prose;
5. code is restored;
6. ``import``/``export`` lines and ``<script>``/``<style>``/``<iframe>``
   blocks become HTML comments;
7. list markers get exactly one space.

Example
-------
>>> from nbdocs.sanitizer import sanitize_markdown
>>> result = sanitize_markdown("Energy: $$E=mc^2$$")
>>> result.text
'Energy: DISPLAY_MATH_0'
>>> result.math
{'DISPLAY_MATH_0': 'E=mc^2'}
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import re

from nbdocs._constants import (
    CODE_BLOCK_PREFIX,
    DISPLAY_MATH_PREFIX,
    INLINE_CODE_PREFIX,
    INLINE_MATH_PREFIX,
)

logger = logging.getLogger(__name__)

FENCED_CODE_PATTERN = re.compile(r"```[\s\S]*?```")
INLINE_CODE_PATTERN = re.compile(r"(?<!`)`[^`\n]+`(?!`)")
DISPLAY_MATH_PATTERN = re.compile(r"\$\$([\s\S]*?)\$\$")
INLINE_MATH_PATTERN = re.compile(r"(?<![\\$])\$([^$\n]+?)\$")
CODE_PLACEHOLDER_PATTERN = re.compile(
    rf"({CODE_BLOCK_PREFIX}|{INLINE_CODE_PREFIX})(\d+)"
)
MATH_PLACEHOLDER_PATTERN = re.compile(
    rf"({DISPLAY_MATH_PREFIX}|{INLINE_MATH_PREFIX})(\d+)"
)

TABLE_ROW_PATTERN = re.compile(r"^\s*\|.*\|")
SEPARATOR_ROW_PATTERN = re.compile(r"^\s*\|(\s*:?-+:?\s*\|)+\s*$")
CELL_BOUNDARY_PATTERN = re.compile(r"(?<!\\)\|")

HEADING_SPACING_PATTERN = re.compile(r"^(#{1,6})[ \t]+(.+?)[ \t]*$", re.MULTILINE)
HEADING_AFTER_TEXT_PATTERN = re.compile(r"([^\n])\n(#{1,6} )")

IMPORT_PATTERN = re.compile(
    r"^[ \t]*import\s+.*\s+from\s+['\"].*['\"];?[ \t]*$", re.MULTILINE
)
EXPORT_PATTERN = re.compile(r"^[ \t]*export\s+.*$", re.MULTILINE)
UNSAFE_BLOCK_PATTERN = re.compile(
    r"<(script|style|iframe)\b[\s\S]*?</\1\s*>", re.IGNORECASE
)
LIST_MARKER_PATTERN = re.compile(r"^([ \t]*)([*+-]|\d+\.)[ \t]+(?=\S)", re.MULTILINE)


@dc.dataclass(frozen=True, slots=True)
class SanitizedMarkdown:
    """Sanitized Markdown text and the math lifted out of it.

    Attributes
    ----------
    text : str
        Markdown with math replaced by placeholder tokens.
    math : dict[str, str]
        Placeholder token to trimmed expression mapping.
    """

    text: str
    math: dict[str, str]


def sanitize_markdown(markdown_text: str) -> SanitizedMarkdown:
    """Run every sanitization pass over ``markdown_text``.

    Parameters
    ----------
    markdown_text : str
        Raw Markdown, typically a document body or a notebook markdown cell.

    Returns
    -------
    SanitizedMarkdown
        Cleaned text plus the placeholder-to-expression mapping.

    Notes
    -----
    Well-formed input passes through unchanged apart from math extraction.
    Nested fences and tables nested in other block constructs are not
    guaranteed to be stable across repeated runs.
    """
    code: list[str] = []
    text = _protect_code(markdown_text, code)
    text, math = _extract_math(text)
    text = repair_tables(text)
    text = normalize_headings(text)
    text = _restore_code(text, code)
    text = _outside_fences(text, neutralize_scripts)
    text = _outside_fences(text, normalize_list_markers)
    logger.debug(
        "sanitized markdown: %d code blocks, %d math expressions",
        len(code),
        len(math),
    )
    return SanitizedMarkdown(text=text, math=math)


def restore_math(text: str, math: cabc.Mapping[str, str]) -> str:
    """Substitute placeholder tokens back into ``$$...$$`` / ``$...$`` form.

    Tokens with no mapping entry are left untouched.
    """

    def _replace(match: re.Match[str]) -> str:
        token = match.group(0)
        expression = math.get(token)
        if expression is None:
            return token
        if match.group(1) == DISPLAY_MATH_PREFIX:
            return f"$${expression}$$"
        return f"${expression}$"

    return MATH_PLACEHOLDER_PATTERN.sub(_replace, text)


def _protect_code(text: str, store: list[str]) -> str:
    """Swap fenced blocks, then inline spans, for numbered placeholders."""

    def _block(match: re.Match[str]) -> str:
        store.append(match.group(0))
        return f"{CODE_BLOCK_PREFIX}{len(store) - 1}"

    def _inline(match: re.Match[str]) -> str:
        store.append(match.group(0))
        return f"{INLINE_CODE_PREFIX}{len(store) - 1}"

    text = FENCED_CODE_PATTERN.sub(_block, text)
    return INLINE_CODE_PATTERN.sub(_inline, text)


def _restore_code(text: str, store: list[str]) -> str:
    def _replace(match: re.Match[str]) -> str:
        index = int(match.group(2))
        if index < len(store):
            return store[index]
        return match.group(0)

    return CODE_PLACEHOLDER_PATTERN.sub(_replace, text)


def _extract_math(text: str) -> tuple[str, dict[str, str]]:
    """Replace display then inline math with placeholders."""
    math: dict[str, str] = {}
    counters = {DISPLAY_MATH_PREFIX: 0, INLINE_MATH_PREFIX: 0}

    def _lift(prefix: str) -> cabc.Callable[[re.Match[str]], str]:
        def _replace(match: re.Match[str]) -> str:
            token = f"{prefix}{counters[prefix]}"
            counters[prefix] += 1
            math[token] = match.group(1).strip()
            return token

        return _replace

    text = DISPLAY_MATH_PATTERN.sub(_lift(DISPLAY_MATH_PREFIX), text)
    text = INLINE_MATH_PATTERN.sub(_lift(INLINE_MATH_PREFIX), text)
    return text, math


def _cell_count(row: str) -> int:
    return len(CELL_BOUNDARY_PATTERN.findall(row.strip())) - 1


def _close_row(row: str) -> str:
    """Give ``row`` a trailing pipe when its author left it off."""
    stripped = row.rstrip()
    if stripped.endswith("|"):
        return row
    return f"{stripped} |"


def _pad_row(row: str, missing: int, *, separator: bool) -> str:
    """Append ``missing`` cells after the trailing pipe of ``row``."""
    filler = " --- |" if separator else "  |"
    return f"{row.rstrip()}{filler * missing}"


def _separator_row(cells: int) -> str:
    return "|" + " --- |" * cells


def _repair_table(rows: list[str]) -> list[str]:
    """Pad short rows and add a separator row to a run of table lines."""
    if len(rows) < 2:
        return rows
    rows = [_close_row(row) for row in rows]
    counts = [_cell_count(row) for row in rows]
    widest = max(counts)
    repaired = [
        _pad_row(row, widest - count, separator=bool(SEPARATOR_ROW_PATTERN.match(row)))
        if count < widest
        else row
        for row, count in zip(rows, counts, strict=True)
    ]
    if not SEPARATOR_ROW_PATTERN.match(repaired[1]):
        repaired.insert(1, _separator_row(widest))
    return repaired


def repair_tables(text: str) -> str:
    """Normalize every run of pipe-table lines in ``text``.

    Each run is separated from surrounding prose by blank lines, rows with
    fewer cells than the widest row are padded, and a ``| --- |`` separator
    row is inserted when the second row is not already one.
    """
    lines = text.split("\n")
    output: list[str] = []
    index = 0
    while index < len(lines):
        if not TABLE_ROW_PATTERN.match(lines[index]):
            output.append(lines[index])
            index += 1
            continue
        end = index
        while end < len(lines) and TABLE_ROW_PATTERN.match(lines[end]):
            end += 1
        if output and output[-1].strip():
            output.append("")
        output.extend(_repair_table(lines[index:end]))
        if end < len(lines) and lines[end].strip():
            output.append("")
        index = end
    return "\n".join(output)


def normalize_headings(text: str) -> str:
    """Collapse spacing after ``#`` markers and space headings from prose."""
    text = HEADING_SPACING_PATTERN.sub(r"\1 \2", text)
    return HEADING_AFTER_TEXT_PATTERN.sub(r"\1\n\n\2", text)


def strip_unsafe_html(text: str) -> str:
    """Replace ``<script>``, ``<style>`` and ``<iframe>`` blocks with comments."""
    return UNSAFE_BLOCK_PATTERN.sub(
        lambda match: f"<!-- {match.group(1).lower()} removed -->", text
    )


def neutralize_scripts(text: str) -> str:
    """Comment out ESM statements and executable HTML blocks."""
    text = IMPORT_PATTERN.sub("<!-- import removed -->", text)
    text = EXPORT_PATTERN.sub("<!-- export removed -->", text)
    return strip_unsafe_html(text)


def normalize_list_markers(text: str) -> str:
    """Ensure list markers are followed by exactly one space."""
    return LIST_MARKER_PATTERN.sub(r"\1\2 ", text)


def _outside_fences(text: str, transform: cabc.Callable[[str], str]) -> str:
    """Apply ``transform`` to the text between fenced code blocks only."""
    pieces: list[str] = []
    cursor = 0
    for match in FENCED_CODE_PATTERN.finditer(text):
        pieces.append(transform(text[cursor : match.start()]))
        pieces.append(match.group(0))
        cursor = match.end()
    pieces.append(transform(text[cursor:]))
    return "".join(pieces)


__all__ = [
    "SanitizedMarkdown",
    "normalize_headings",
    "normalize_list_markers",
    "neutralize_scripts",
    "repair_tables",
    "restore_math",
    "sanitize_markdown",
    "strip_unsafe_html",
]
