"""Case-insensitive substring search over parsed content items."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import re
import typing as typ

from nbdocs._constants import NOTEBOOK_EXCERPT
from nbdocs.content.models import ContentItem, MarkdownDocument, NotebookDocument
from nbdocs.sanitizer import restore_math

logger = logging.getLogger(__name__)

DEFAULT_EXCERPT_LENGTH = 150
REMOVED_MARKER_PATTERN = re.compile(r"<!-- \w+ removed -->\n*")


@dc.dataclass(frozen=True, slots=True)
class SearchResult:
    """One search hit as returned by ``/api/search``."""

    title: str
    slug: str
    href: str
    type: str
    excerpt: str

    def to_dict(self) -> dict[str, str]:
        """Return the result as a JSON-ready mapping."""
        return dc.asdict(self)


def _plain_body(document: MarkdownDocument) -> str:
    """Return the document body with math restored and removal markers dropped."""
    text = restore_math(document.body, document.math)
    return REMOVED_MARKER_PATTERN.sub("", text).lstrip()


def _haystack(item: ContentItem) -> tuple[str, str]:
    """Return the searchable body text and result type for ``item``."""
    match item:
        case MarkdownDocument():
            return _plain_body(item), "markdown"
        case NotebookDocument():
            return item.markdown_text(), "jupyter"
        case _:
            typ.assert_never(item)


def excerpt_for(item: ContentItem, length: int = DEFAULT_EXCERPT_LENGTH) -> str:
    """Return the summary shown beneath a search hit."""
    match item:
        case MarkdownDocument():
            return f"{_plain_body(item)[:length]}..."
        case NotebookDocument():
            return NOTEBOOK_EXCERPT
        case _:
            typ.assert_never(item)


def search(
    items: cabc.Iterable[ContentItem],
    query: str,
    *,
    href: cabc.Callable[[str], str] = lambda slug: f"/docs/{slug}",
    excerpt_length: int = DEFAULT_EXCERPT_LENGTH,
) -> list[SearchResult]:
    """Return the items whose title or body contains ``query``.

    Parameters
    ----------
    items : Iterable[ContentItem]
        Items to scan, in the order results should be returned.
    query : str
        Text to look for; matching ignores case.
    href : Callable[[str], str], optional
        Maps a slug to its page URL.
    excerpt_length : int, optional
        Number of body characters kept in Markdown excerpts.

    Raises
    ------
    ValueError
        If ``query`` is empty or only whitespace.
    """
    needle = query.strip().lower()
    if not needle:
        msg = "Query parameter is required"
        raise ValueError(msg)
    results: list[SearchResult] = []
    for item in items:
        body, kind = _haystack(item)
        if needle in item.title.lower() or needle in body.lower():
            results.append(
                SearchResult(
                    title=item.title,
                    slug=item.slug,
                    href=href(item.slug),
                    type=kind,
                    excerpt=excerpt_for(item, excerpt_length),
                )
            )
    logger.debug("Search for %r matched %d item(s)", query, len(results))
    return results


__all__ = ["DEFAULT_EXCERPT_LENGTH", "SearchResult", "excerpt_for", "search"]
