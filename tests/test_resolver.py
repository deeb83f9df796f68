"""Unit tests for slug resolution strategies and the store-backed resolver."""

from __future__ import annotations

import typing as typ

import pytest

from nbdocs.content.resolver import (
    MATCH_STRATEGIES,
    SlugResolver,
    order_candidates,
    resolve_name,
    split_slug,
)
from nbdocs.content.store import ContentStore

if typ.TYPE_CHECKING:
    from pathlib import Path

NOTEBOOKS = (".ipynb", ".py")
TUTORIALS = [
    "01_intro_to_antimatter_basics.ipynb",
    "02_working_with_positronium.ipynb",
    "10_relativistic_effects.ipynb",
]


@pytest.mark.parametrize(
    ("name", "candidates", "expected"),
    [
        ("01_intro", ["01_intro.ipynb", "01_intro_extended.ipynb"], "01_intro.ipynb"),
        ("01_INTRO", ["01_intro.ipynb"], "01_intro.ipynb"),
        ("1_intro", ["01_intro.ipynb"], "01_intro.ipynb"),
        ("2", TUTORIALS, "02_working_with_positronium.ipynb"),
        ("10", TUTORIALS, "10_relativistic_effects.ipynb"),
        ("01_intro_to_antimatter", TUTORIALS, "01_intro_to_antimatter_basics.ipynb"),
        ("positronium", TUTORIALS, "02_working_with_positronium.ipynb"),
    ],
)
def test_resolve_name_tiers(name: str, candidates: list[str], expected: str) -> None:
    """Each strategy tier finds the expected file."""
    assert resolve_name(name, candidates, NOTEBOOKS) == expected


def test_exact_match_wins_over_partial() -> None:
    """A verbatim stem beats a file that merely contains the name."""
    candidates = ["01_intro_extended.ipynb", "intro.ipynb"]
    assert resolve_name("intro", candidates, NOTEBOOKS) == "intro.ipynb"


def test_unmatched_name_returns_none() -> None:
    """Names sharing nothing with any candidate resolve to nothing."""
    assert resolve_name("zzz", TUTORIALS, NOTEBOOKS) is None
    assert resolve_name("", TUTORIALS, NOTEBOOKS) is None
    assert resolve_name("intro", [], NOTEBOOKS) is None


def test_notebooks_take_priority_over_scripts() -> None:
    """With equal stems the ``.ipynb`` file is chosen before the ``.py`` one."""
    assert order_candidates(["01_a.py", "01_a.ipynb"], NOTEBOOKS) == [
        "01_a.ipynb",
        "01_a.py",
    ]
    assert resolve_name("01_a", ["01_a.py", "01_a.ipynb"], NOTEBOOKS) == "01_a.ipynb"


def test_strategy_order_is_fixed() -> None:
    """The tier order is exact, case, numeric prefix, bare number, partial."""
    assert [strategy.__name__ for strategy in MATCH_STRATEGIES] == [
        "exact_match",
        "case_insensitive_match",
        "numeric_prefix_match",
        "prefix_number_match",
        "partial_match",
    ]


@pytest.mark.parametrize(
    ("slug", "expected"),
    [
        ("tutorials/01_intro", ("tutorials", "01_intro")),
        ("/examples/01_heh/", ("examples", "01_heh")),
        ("guides/install", (None, "guides/install")),
        ("overview", (None, "overview")),
    ],
)
def test_split_slug(slug: str, expected: tuple[str | None, str]) -> None:
    """Only configured categories are split off the slug."""
    assert split_slug(slug, ["tutorials", "examples"]) == expected


def test_resolver_finds_notebook_in_category(store: ContentStore) -> None:
    """A shortened tutorial slug resolves to the full notebook filename."""
    resolver = SlugResolver(store)
    path = resolver.resolve("tutorials", "01_intro_to_antimatter")
    assert path is not None
    assert path.name == "01_intro_to_antimatter_basics.ipynb"


def test_resolver_finds_nested_root_page(store: ContentStore, content_root: Path) -> None:
    """Markdown below the root stays addressable by its relative path."""
    guides = content_root / "guides"
    guides.mkdir()
    (guides / "install.md").write_text("# Install\n", encoding="utf-8")
    resolver = SlugResolver(store)
    assert resolver.resolve(None, "guides/install") == guides / "install.md"
    assert resolver.resolve(None, "overview") == content_root / "overview.mdx"


def test_missing_category_resolves_to_none(content_root: Path) -> None:
    """A category directory that does not exist never matches."""
    resolver = SlugResolver(ContentStore(content_root, ["tutorials", "notes"]))
    assert resolver.resolve("notes", "anything") is None


def test_available_lists_category_stems(store: ContentStore) -> None:
    """Fallback pages list the stems of every file in the category."""
    assert SlugResolver(store).available("tutorials") == [
        "01_intro_to_antimatter_basics",
        "02_working_with_positronium",
    ]
