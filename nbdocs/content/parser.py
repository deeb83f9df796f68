"""Parse content files into :mod:`nbdocs.content.models` objects.

Markdown and MDX files are split into frontmatter and a sanitized body;
notebooks are decoded from JSON into ordered cells; Python example scripts
are converted into notebook-like cells so they render through the same
pipeline.

Example
-------
>>> from nbdocs.content.parser import split_frontmatter
>>> meta, body = split_frontmatter("---\\ntitle: Intro\\n---\\n# Hello")
>>> meta["title"], body
('Intro', '# Hello')
"""

from __future__ import annotations

import logging
import re
import typing as typ
from pathlib import Path

import msgspec
import msgspec.json as msgspec_json
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from nbdocs._constants import (
    DEFAULT_NOTEBOOK_LANGUAGE,
    DEFAULT_ORDER,
    MARKDOWN_SUFFIXES,
)
from nbdocs.content.errors import ContentIOError, FormatError
from nbdocs.content.models import (
    Cell,
    CellKind,
    ContentItem,
    ErrorPayload,
    MarkdownDocument,
    NotebookDocument,
    Output,
    OutputKind,
    StreamPayload,
)
from nbdocs.sanitizer import FENCED_CODE_PATTERN, sanitize_markdown

logger = logging.getLogger(__name__)

FRONTMATTER_DELIMITER = "---"
TITLE_PATTERN = re.compile(r"^#[ \t]+(.*)$", re.MULTILINE)
DOCSTRING_DELIMITERS = ('"""', "'''")


def _join(value: object) -> str:
    """Join a notebook list-of-strings field, passing strings through."""
    if isinstance(value, list):
        return "".join(str(part) for part in value)
    if value is None:
        return ""
    return str(value)


def _strip_quotes(value: str) -> str:
    for quote in ('"', "'"):
        if len(value) >= 2 and value.startswith(quote) and value.endswith(quote):
            return value[1:-1]
    return value


def _manual_frontmatter(block: str) -> dict[str, typ.Any]:
    """Split ``key: value`` lines when the block is not valid YAML."""
    data: dict[str, typ.Any] = {}
    for line in block.splitlines():
        key, sep, value = line.partition(":")
        if not sep or not key.strip():
            continue
        data[key.strip()] = _strip_quotes(value.strip())
    return data


def split_frontmatter(text: str) -> tuple[dict[str, typ.Any], str]:
    """Return the decoded frontmatter mapping and the remaining body.

    Parameters
    ----------
    text : str
        Full file contents.

    Returns
    -------
    tuple[dict[str, Any], str]
        Frontmatter (empty when the file has none) and the body with the
        frontmatter block removed.

    Notes
    -----
    The block must open on the first line with ``---`` and close with a line
    holding only ``---``. YAML that fails to decode, or decodes to something
    other than a mapping, is re-read line by line as ``key: value`` pairs so a
    single stray character never takes the page down.
    """
    lines = text.split("\n")
    if not lines or lines[0].strip() != FRONTMATTER_DELIMITER:
        return {}, text
    closing = next(
        (
            idx
            for idx, line in enumerate(lines[1:], start=1)
            if line.strip() == FRONTMATTER_DELIMITER
        ),
        None,
    )
    if closing is None:
        return {}, text

    block = "\n".join(lines[1:closing])
    body = "\n".join(lines[closing + 1 :]).strip("\n")
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        loaded = loader.load(block)
    except YAMLError as exc:
        logger.warning("Falling back to manual frontmatter split: %s", exc)
        return _manual_frontmatter(block), body
    if loaded is None:
        return {}, body
    if not isinstance(loaded, dict):
        logger.warning("Frontmatter is not a mapping; splitting lines manually")
        return _manual_frontmatter(block), body
    return {str(key): value for key, value in loaded.items()}, body


def _coerce_order(value: object) -> int:
    match value:
        case bool():
            return DEFAULT_ORDER
        case int():
            return value
        case str() as text if text.strip().lstrip("-").isdigit():
            return int(text.strip())
        case _:
            return DEFAULT_ORDER


def first_heading(markdown_text: str) -> str | None:
    """Return the text of the first level-one heading outside code fences."""
    match = TITLE_PATTERN.search(FENCED_CODE_PATTERN.sub("", markdown_text))
    if match is None:
        return None
    return match.group(1).strip() or None


def parse_markdown(text: str, slug: str, path: Path | None = None) -> MarkdownDocument:
    """Build a :class:`MarkdownDocument` from raw Markdown/MDX text.

    The title falls back from the frontmatter value to the first ``#``
    heading and finally to the file stem.
    """
    frontmatter, body = split_frontmatter(text)
    sanitized = sanitize_markdown(body)
    stem = path.stem if path is not None else slug.rsplit("/", 1)[-1]
    resolved = dict(frontmatter)
    resolved["title"] = (
        frontmatter.get("title") or first_heading(sanitized.text) or stem
    )
    resolved["description"] = frontmatter.get("description") or ""
    resolved["order"] = _coerce_order(frontmatter.get("order", DEFAULT_ORDER))
    return MarkdownDocument(
        slug=slug,
        frontmatter=resolved,
        body=sanitized.text,
        math=sanitized.math,
        path=path,
    )


def _parse_output(raw: typ.Mapping[str, typ.Any]) -> Output | None:
    kind = raw.get("output_type")
    match kind:
        case "stream":
            return Output(
                kind=OutputKind.STREAM,
                stream=StreamPayload(
                    text=_join(raw.get("text")), name=str(raw.get("name", "stdout"))
                ),
            )
        case "display_data" | "execute_result":
            data = raw.get("data") or {}
            if not isinstance(data, dict):
                data = {}
            return Output(
                kind=OutputKind(kind),
                data={str(mime): _join(value) for mime, value in data.items()},
            )
        case "error":
            traceback = raw.get("traceback") or []
            if not isinstance(traceback, list):
                traceback = [str(traceback)]
            return Output(
                kind=OutputKind.ERROR,
                error=ErrorPayload(
                    name=str(raw.get("ename", "")),
                    value=str(raw.get("evalue", "")),
                    traceback=tuple(str(line) for line in traceback),
                ),
            )
        case _:
            logger.debug("Skipping unsupported notebook output type %r", kind)
            return None


def _parse_cell(raw: typ.Mapping[str, typ.Any]) -> Cell:
    cell_type = raw.get("cell_type", "code")
    try:
        kind = CellKind(cell_type)
    except ValueError:
        logger.debug("Treating unknown cell type %r as raw", cell_type)
        kind = CellKind.RAW
    outputs: list[Output] = []
    if kind is CellKind.CODE:
        for output in raw.get("outputs") or []:
            if isinstance(output, dict) and (parsed := _parse_output(output)):
                outputs.append(parsed)
    count = raw.get("execution_count")
    return Cell(
        kind=kind,
        source=_join(raw.get("source")),
        outputs=tuple(outputs),
        execution_count=count if isinstance(count, int) else None,
    )


def notebook_title(cells: typ.Iterable[Cell], fallback: str) -> str:
    """Return the first ``# `` heading found in a markdown cell or ``fallback``."""
    for cell in cells:
        if cell.kind is not CellKind.MARKDOWN:
            continue
        heading = first_heading(cell.source)
        if heading:
            return heading
    return fallback


def _notebook_language(metadata: object) -> str:
    if not isinstance(metadata, dict):
        return DEFAULT_NOTEBOOK_LANGUAGE
    language_info = metadata.get("language_info") or {}
    kernelspec = metadata.get("kernelspec") or {}
    name = (
        (language_info.get("name") if isinstance(language_info, dict) else None)
        or (kernelspec.get("language") if isinstance(kernelspec, dict) else None)
        or DEFAULT_NOTEBOOK_LANGUAGE
    )
    return str(name).lower()


def parse_notebook(
    raw: bytes | str, slug: str, path: Path | None = None
) -> NotebookDocument:
    """Decode notebook JSON into a :class:`NotebookDocument`.

    Raises
    ------
    FormatError
        If the payload is not valid JSON or lacks a ``cells`` array.
    """
    source_path = path or Path(slug)
    try:
        payload = msgspec_json.decode(raw)
    except msgspec.DecodeError as exc:
        raise FormatError(source_path, f"invalid notebook JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise FormatError(source_path, "notebook root must be an object")
    raw_cells = payload.get("cells")
    if not isinstance(raw_cells, list):
        raise FormatError(source_path, "notebook has no 'cells' array")
    cells = tuple(_parse_cell(cell) for cell in raw_cells if isinstance(cell, dict))
    stem = source_path.stem
    return NotebookDocument(
        slug=slug,
        title=notebook_title(cells, stem),
        cells=cells,
        language=_notebook_language(payload.get("metadata")),
        path=path,
    )


def _script_cells(text: str) -> list[Cell]:
    """Group a Python script into markdown (docs/comments) and code cells."""
    cells: list[Cell] = []
    buffer: list[str] = []
    kind: CellKind | None = None
    delimiter: str | None = None

    def _flush() -> None:
        nonlocal buffer, kind
        source = "\n".join(buffer).strip("\n")
        if kind is not None and source.strip():
            cells.append(Cell(kind=kind, source=source))
        buffer = []
        kind = None

    for line in text.splitlines():
        stripped = line.strip()
        if delimiter is not None:
            if stripped.endswith(delimiter):
                buffer.append(stripped[: -len(delimiter)])
                _flush()
                delimiter = None
            else:
                buffer.append(line)
            continue
        opener = next((d for d in DOCSTRING_DELIMITERS if stripped.startswith(d)), None)
        if opener is not None:
            _flush()
            kind = CellKind.MARKDOWN
            rest = stripped[len(opener) :]
            if rest.endswith(opener) and rest:
                buffer.append(rest[: -len(opener)])
                _flush()
            else:
                buffer.append(rest)
                delimiter = opener
        elif stripped.startswith("#!"):
            continue
        elif stripped.startswith("#"):
            if kind is not CellKind.MARKDOWN:
                _flush()
                kind = CellKind.MARKDOWN
            buffer.append(re.sub(r"^#\s?", "", stripped))
        elif not stripped:
            if kind is CellKind.CODE:
                buffer.append(line)
            else:
                _flush()
        else:
            if kind is not CellKind.CODE:
                _flush()
                kind = CellKind.CODE
            buffer.append(line)
    _flush()
    return cells


def parse_python_script(
    text: str, slug: str, path: Path | None = None
) -> NotebookDocument:
    """Convert a Python example script into a notebook-like document.

    Module docstrings and runs of ``#`` comments become markdown cells and the
    remaining code becomes code cells. The title is the first markdown
    heading, else the first line of the first markdown cell, else the stem.
    """
    cells = tuple(_script_cells(text))
    stem = path.stem if path is not None else slug.rsplit("/", 1)[-1]
    title = notebook_title(cells, "")
    if not title:
        first_markdown = next(
            (cell for cell in cells if cell.kind is CellKind.MARKDOWN), None
        )
        lines = first_markdown.source.strip().splitlines() if first_markdown else []
        title = lines[0].strip() if lines else stem
    return NotebookDocument(slug=slug, title=title, cells=cells, path=path)


def load_content(path: Path, slug: str) -> ContentItem:
    """Read ``path`` from disk and parse it according to its suffix.

    Raises
    ------
    ContentIOError
        If the file cannot be read.
    FormatError
        If the file cannot be decoded or parsed.
    """
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ContentIOError(path, exc.strerror or str(exc)) from exc

    suffix = path.suffix.lower()
    if suffix == ".ipynb":
        return parse_notebook(raw, slug, path)
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise FormatError(path, f"not UTF-8 text: {exc}") from exc
    if suffix == ".py":
        return parse_python_script(text, slug, path)
    if suffix in MARKDOWN_SUFFIXES:
        return parse_markdown(text, slug, path)
    raise FormatError(path, f"unsupported content type '{suffix}'")


__all__ = [
    "first_heading",
    "load_content",
    "notebook_title",
    "parse_markdown",
    "parse_notebook",
    "parse_python_script",
    "split_frontmatter",
]
