r"""Resolve URL slugs to content files using ranked match strategies.

A requested name is compared against the files of one directory by a fixed
sequence of strategies, each a pure function ``(name, candidates) ->
candidate | None``. The first strategy that returns a candidate wins, so the
tier order lives in one auditable tuple, :data:`MATCH_STRATEGIES`.

Candidates are sorted by extension priority and then lexically before any
strategy runs, which makes "first match" deterministic on every filesystem.

Example
-------
>>> from nbdocs.content.resolver import resolve_name
>>> resolve_name("2", ["01_intro.ipynb", "02_basis_sets.ipynb"], (".ipynb",))
'02_basis_sets.ipynb'
>>> resolve_name("intro", ["01_intro.ipynb"], (".ipynb",))
'01_intro.ipynb'
"""

from __future__ import annotations

import collections.abc as cabc
import logging
import re
import typing as typ

from nbdocs._constants import NOTEBOOK_SUFFIXES, ROOT_SUFFIXES

if typ.TYPE_CHECKING:
    from pathlib import Path

    from nbdocs.content.store import ContentStore

logger = logging.getLogger(__name__)

NUMERIC_PREFIX_PATTERN = re.compile(r"^(\d+)_(.*)$")
BARE_NUMBER_PATTERN = re.compile(r"^\d+$")

MatchStrategy: typ.TypeAlias = cabc.Callable[[str, cabc.Sequence[str]], str | None]


def _stem(filename: str) -> str:
    """Return ``filename`` without its final suffix."""
    head, dot, _ext = filename.rpartition(".")
    return head if dot and head else filename


def _strip_prefix(name: str) -> str:
    match = NUMERIC_PREFIX_PATTERN.match(name)
    return match.group(2) if match else name


def _basename(name: str) -> str:
    return name.rsplit("/", 1)[-1]


def exact_match(name: str, candidates: cabc.Sequence[str]) -> str | None:
    """Match ``name`` verbatim, with or without a suffix."""
    for candidate in candidates:
        if candidate == name or _stem(candidate) == name:
            return candidate
    return None


def case_insensitive_match(name: str, candidates: cabc.Sequence[str]) -> str | None:
    """Match ``name`` ignoring case, with or without a suffix."""
    wanted = name.lower()
    for candidate in candidates:
        if candidate.lower() == wanted or _stem(candidate).lower() == wanted:
            return candidate
    return None


def numeric_prefix_match(name: str, candidates: cabc.Sequence[str]) -> str | None:
    """Match an ``<int>_name`` request by prefix value and remainder.

    Leading zeros are ignored so ``2_foo`` finds ``02_foo.ipynb``.
    """
    requested = NUMERIC_PREFIX_PATTERN.match(name)
    if requested is None:
        return None
    number, rest = int(requested.group(1)), requested.group(2).lower()
    for candidate in candidates:
        found = NUMERIC_PREFIX_PATTERN.match(_basename(_stem(candidate)))
        if found and int(found.group(1)) == number and found.group(2).lower() == rest:
            return candidate
    return None


def prefix_number_match(name: str, candidates: cabc.Sequence[str]) -> str | None:
    """Match a bare integer request against files carrying that prefix."""
    if not BARE_NUMBER_PATTERN.match(name):
        return None
    number = int(name)
    for candidate in candidates:
        found = NUMERIC_PREFIX_PATTERN.match(_basename(_stem(candidate)))
        if found and int(found.group(1)) == number:
            return candidate
    return None


def partial_match(name: str, candidates: cabc.Sequence[str]) -> str | None:
    """Match by substring once numeric prefixes are removed from both sides."""
    wanted = _strip_prefix(_basename(name)).lower()
    full = _basename(name).lower()
    if not wanted:
        return None
    for candidate in candidates:
        stem = _basename(_stem(candidate)).lower()
        bare = _strip_prefix(stem)
        if not bare:
            continue
        if bare == wanted or wanted in bare or bare in wanted or full in stem:
            return candidate
    return None


MATCH_STRATEGIES: tuple[MatchStrategy, ...] = (
    exact_match,
    case_insensitive_match,
    numeric_prefix_match,
    prefix_number_match,
    partial_match,
)


def order_candidates(
    candidates: cabc.Iterable[str], suffixes: cabc.Sequence[str]
) -> list[str]:
    """Sort candidates by suffix priority and then lexically."""
    priority = {suffix.lower(): idx for idx, suffix in enumerate(suffixes)}

    def _key(candidate: str) -> tuple[int, str]:
        suffix = "." + candidate.rpartition(".")[2].lower()
        return priority.get(suffix, len(priority)), candidate

    return sorted(candidates, key=_key)


def resolve_name(
    name: str,
    candidates: cabc.Iterable[str],
    suffixes: cabc.Sequence[str],
    strategies: cabc.Sequence[MatchStrategy] = MATCH_STRATEGIES,
) -> str | None:
    """Return the best candidate for ``name`` or ``None``.

    Parameters
    ----------
    name : str
        Requested name, usually the last slug segment.
    candidates : Iterable[str]
        File names (or root-relative posix paths) available for matching.
    suffixes : Sequence[str]
        Accepted suffixes in priority order.
    strategies : Sequence[MatchStrategy]
        Strategies tried in order; the first non-``None`` result wins.
    """
    ordered = order_candidates(candidates, suffixes)
    cleaned = name.strip().strip("/")
    if not cleaned or not ordered:
        return None
    for strategy in strategies:
        found = strategy(cleaned, ordered)
        if found is not None:
            logger.debug("Resolved %r to %r via %s", cleaned, found, strategy.__name__)
            return found
    return None


def split_slug(slug: str, categories: cabc.Iterable[str]) -> tuple[str | None, str]:
    """Split ``tutorials/01_intro`` into ``("tutorials", "01_intro")``.

    Slugs whose first segment is not a known category resolve against the
    content root and keep their full path as the name.
    """
    cleaned = slug.strip().strip("/")
    head, sep, rest = cleaned.partition("/")
    if sep and head in set(categories):
        return head, rest
    return None, cleaned


class SlugResolver:
    """Find content files for slugs within a :class:`ContentStore`."""

    def __init__(self, store: ContentStore) -> None:
        self.store = store

    @staticmethod
    def suffixes_for(category: str | None) -> tuple[str, ...]:
        """Return accepted suffixes for a category in priority order."""
        return ROOT_SUFFIXES if category is None else NOTEBOOK_SUFFIXES

    def candidates(self, category: str | None) -> list[str]:
        """Return candidate names for ``category``.

        Root candidates are posix paths relative to the content root so
        nested pages such as ``guides/install.md`` stay addressable.
        """
        suffixes = self.suffixes_for(category)
        if category is not None:
            return self.store.list_files(category, suffixes)
        nested = [
            self.store.slug_for(path) + path.suffix
            for path in self.store.markdown_files()
        ]
        loose = self.store.list_files(None, suffixes)
        return sorted({*nested, *loose})

    def available(self, category: str | None) -> list[str]:
        """Return the stems of every file in ``category`` for fallback pages."""
        return [_stem(name) for name in self.candidates(category)]

    def resolve(self, category: str | None, name: str) -> Path | None:
        """Return the file best matching ``name`` in ``category``, or ``None``.

        A missing category directory yields ``None`` without running any
        strategy.
        """
        if not self.store.has_category(category):
            logger.info("Category directory %r does not exist", category)
            return None
        found = resolve_name(name, self.candidates(category), self.suffixes_for(category))
        if found is None:
            logger.info("No content matches %r in %r", name, category or "root")
            return None
        return self.store.category_dir(category) / found


__all__ = [
    "MATCH_STRATEGIES",
    "MatchStrategy",
    "SlugResolver",
    "case_insensitive_match",
    "exact_match",
    "numeric_prefix_match",
    "order_candidates",
    "partial_match",
    "prefix_number_match",
    "resolve_name",
    "split_slug",
]
