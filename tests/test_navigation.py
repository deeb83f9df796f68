"""Unit tests for the sidebar navigation builder."""

from __future__ import annotations

import os
import typing as typ

import pytest
from conftest import notebook_json

from nbdocs import navigation
from nbdocs.config import SiteConfig
from nbdocs.content.store import ContentStore
from nbdocs.navigation import NavigationBuilder, build_navigation, notebook_label

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def nav_root(tmp_path: Path) -> Path:
    """Create a tree exercising keyword titles and prefix ordering."""
    root = tmp_path / "content"
    tutorials = root / "tutorials"
    tutorials.mkdir(parents=True)
    (root / "examples").mkdir()
    for name in ("overview.md", "GetStarted.md", "custom_page.md", "releasenotes.mdx"):
        (root / name).write_text("# Page\n", encoding="utf-8")
    for name in ("10_c.ipynb", "02_b.ipynb", "01_a.ipynb", "appendix.ipynb"):
        (tutorials / name).write_text(notebook_json([]), encoding="utf-8")
    return root


def _build(root: Path) -> list[typ.Any]:
    config = SiteConfig(content_dir=root)
    return build_navigation(ContentStore(root, config.category_keys), config)


def test_top_level_order_and_titles(nav_root: Path) -> None:
    """Root pages use the keyword table and sort with categories by order."""
    nodes = _build(nav_root)
    assert [(node.title, node.order) for node in nodes] == [
        ("Getting Started", 1),
        ("Overview", 10),
        ("Tutorials", 40),
        ("Release Notes", 70),
        ("custom_page", 999),
    ]
    assert nodes[0].href == "/docs/GetStarted"


def test_empty_categories_are_omitted(nav_root: Path) -> None:
    """A category directory without notebooks contributes no node."""
    assert "examples" not in {node.slug for node in _build(nav_root)}


def test_notebooks_sorted_by_prefix(nav_root: Path) -> None:
    """Children sort numerically by prefix with unprefixed files last."""
    tutorials = next(node for node in _build(nav_root) if node.slug == "tutorials")
    assert [(child.title, child.order) for child in tutorials.children] == [
        ("a", 1),
        ("b", 2),
        ("c", 10),
        ("appendix", 999),
    ]
    assert tutorials.children[0].href == "/docs/tutorials/01_a"


@pytest.mark.parametrize(
    ("stem", "expected"),
    [
        ("03_advanced_basis_sets", ("advanced basis sets", 3)),
        ("00_preface", ("preface", 0)),
        ("appendix", ("appendix", 999)),
    ],
)
def test_notebook_label(stem: str, expected: tuple[str, int]) -> None:
    """Numeric prefixes become the order and the rest the title."""
    assert notebook_label(stem) == expected


def test_builder_caches_until_directory_changes(
    nav_root: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """The tree is rebuilt only when a watched directory mtime moves."""
    calls: list[int] = []
    original = navigation.build_navigation

    def _counting(store: ContentStore, config: SiteConfig) -> list[typ.Any]:
        calls.append(1)
        return original(store, config)

    monkeypatch.setattr(navigation, "build_navigation", _counting)
    config = SiteConfig(content_dir=nav_root)
    builder = NavigationBuilder(ContentStore(nav_root, config.category_keys), config)
    first = builder.build()
    assert builder.build() == first
    assert len(calls) == 1, "an unchanged tree must come from the cache"

    tutorials = nav_root / "tutorials"
    (tutorials / "03_d.ipynb").write_text(notebook_json([]), encoding="utf-8")
    stat = tutorials.stat()
    os.utime(tutorials, ns=(stat.st_atime_ns, stat.st_mtime_ns + 1_000_000_000))
    rebuilt = builder.build()
    assert len(calls) == 2, "a directory change must trigger a rebuild"
    children = next(node for node in rebuilt if node.slug == "tutorials").children
    assert "d" in [child.title for child in children]
