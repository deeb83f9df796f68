"""Unit tests for content search."""

from __future__ import annotations

import pytest
from conftest import markdown_cell, notebook_json

from nbdocs.content.models import Cell, CellKind, MarkdownDocument, NotebookDocument
from nbdocs.content.parser import parse_markdown
from nbdocs.content.store import ContentStore
from nbdocs.search import search

LONG_BODY = "Positronium " + "x" * 300


@pytest.fixture
def items() -> list[MarkdownDocument | NotebookDocument]:
    """Return one Markdown page and one notebook."""
    return [
        MarkdownDocument(
            slug="theory", frontmatter={"title": "Theory", "order": 20}, body=LONG_BODY
        ),
        NotebookDocument(
            slug="tutorials/01_intro",
            title="Introduction",
            cells=(
                Cell(kind=CellKind.MARKDOWN, source="Antimatter basics"),
                Cell(kind=CellKind.CODE, source="antimatter_solver()"),
            ),
        ),
    ]


def test_markdown_hit_has_truncated_excerpt(items: list) -> None:
    """Markdown hits quote the first 150 body characters."""
    results = search(items, "POSITRONIUM")
    assert len(results) == 1
    result = results[0]
    assert result.type == "markdown"
    assert result.href == "/docs/theory"
    assert result.excerpt == LONG_BODY[:150] + "..."


def test_notebook_hit_matches_markdown_cells(items: list) -> None:
    """Notebook hits come from markdown cells and use a fixed excerpt."""
    results = search(items, "antimatter basics")
    assert [(r.slug, r.type, r.excerpt) for r in results] == [
        ("tutorials/01_intro", "jupyter", "Jupyter notebook")
    ]
    assert search(items, "solver") == [], "code cells are not searched"


def test_title_matches(items: list) -> None:
    """Titles are searched as well as bodies."""
    assert [r.slug for r in search(items, "introduction")] == ["tutorials/01_intro"]


def test_results_keep_item_order(items: list) -> None:
    """Results are returned in the order items were supplied."""
    both = [*items, MarkdownDocument(slug="z", frontmatter={"title": "x"}, body="")]
    assert [r.slug for r in search(both, "x")] == ["theory", "z"]


@pytest.mark.parametrize("query", ["", "   "])
def test_blank_query_is_rejected(items: list, query: str) -> None:
    """Blank queries are a caller error."""
    with pytest.raises(ValueError, match="Query parameter is required"):
        search(items, query)


def test_search_over_store(store: ContentStore) -> None:
    """Searching a store covers root pages, notebooks, and scripts."""
    slugs = [r.slug for r in search(store.iter_items(), "positron")]
    assert slugs == [
        "getstarted",
        "tutorials/01_intro_to_antimatter_basics",
        "tutorials/02_working_with_positronium",
    ]


def test_math_is_searchable_and_excerpts_are_readable() -> None:
    """Math is matched in its dollar form and excerpts carry no markers."""
    document = parse_markdown(
        "import Chart from './chart'\n\nEnergy is $$E=mc^2$$ here.", "energy"
    )
    assert [r.slug for r in search([document], "mc^2")] == ["energy"]
    (result,) = search([document], "energy is")
    assert result.excerpt == "Energy is $$E=mc^2$$ here...."


def test_root_notebooks_are_searched(store: ContentStore) -> None:
    """Notebooks at the content root are listed alongside category notebooks."""
    (store.root / "lab.ipynb").write_text(
        notebook_json([markdown_cell("# Lab Notes\n\nPositron traps.")]),
        encoding="utf-8",
    )
    slugs = [r.slug for r in search(store.iter_items(), "positron traps")]
    assert slugs == ["lab"]
