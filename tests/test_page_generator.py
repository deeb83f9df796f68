"""Tests for page assembly and the static build."""

from __future__ import annotations

import typing as typ

from bs4 import BeautifulSoup
from conftest import markdown_cell, notebook_json

from nbdocs.generator import DocsPageGenerator

if typ.TYPE_CHECKING:
    from pathlib import Path

    from nbdocs.config import SiteConfig


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def test_render_notebook_page(site_config: SiteConfig) -> None:
    """A shortened slug renders the matching notebook inside the layout."""
    page = DocsPageGenerator(site_config).render_page("tutorials/01_intro_to_antimatter")
    assert page.status == 200
    assert page.title == "Introduction to Antimatter"
    soup = _soup(page.html)
    assert soup.select_one("article.doc-jupyter") is not None
    assert soup.select_one("pre.nb-stream").get_text() == "hello\n"
    active = soup.select_one("nav.sidebar li.is-active a")
    assert active is not None, "the current page should be highlighted"
    assert active["href"] == "/docs/tutorials/01_intro_to_antimatter_basics"


def test_render_markdown_page(site_config: SiteConfig) -> None:
    """MDX pages render with imports removed and math substituted."""
    page = DocsPageGenerator(site_config).render_page("overview")
    soup = _soup(page.html)
    assert page.status == 200
    assert soup.select_one("article.doc-markdown span.math-inline") is not None
    assert "import Callout" not in soup.select_one("article").get_text()


def test_missing_page_lists_available_files(site_config: SiteConfig) -> None:
    """Unknown slugs produce a 404 page naming the category's files."""
    page = DocsPageGenerator(site_config).render_page("tutorials/zzz")
    assert page.status == 404
    links = [a["href"] for a in _soup(page.html).select("ul.available-files a")]
    assert links == [
        "/docs/tutorials/01_intro_to_antimatter_basics",
        "/docs/tutorials/02_working_with_positronium",
    ]


def test_malformed_notebook_is_500(site_config: SiteConfig, content_root: Path) -> None:
    """Content that cannot be decoded yields the error panel."""
    (content_root / "tutorials" / "09_broken.ipynb").write_text("{", encoding="utf-8")
    page = DocsPageGenerator(site_config).render_page("tutorials/09_broken")
    assert page.status == 500
    assert _soup(page.html).select_one("section.error-panel") is not None


def test_category_page_lists_children(site_config: SiteConfig) -> None:
    """Category slugs render an index of their notebooks."""
    page = DocsPageGenerator(site_config).render_page("examples")
    assert page.status == 200
    assert page.title == "Examples"
    entries = [a.get_text() for a in _soup(page.html).select("ol.section-entries a")]
    assert entries == ["heh"]


def test_render_index_lists_sections(site_config: SiteConfig) -> None:
    """The landing page links every top-level navigation entry."""
    page = DocsPageGenerator(site_config).render_index()
    entries = [a.get_text() for a in _soup(page.html).select("ul.index-entries a")]
    assert entries == ["Getting Started", "Overview", "Tutorials", "Examples"]


def test_run_writes_static_site(site_config: SiteConfig) -> None:
    """The static build writes the index, stylesheet, and every page."""
    written = DocsPageGenerator(site_config).run()
    out_dir = site_config.output_dir
    assert written[0] == out_dir / "index.html"
    assert ".codehilite" in (out_dir / "pygments.css").read_text(encoding="utf-8")
    expected = {
        out_dir / "getstarted" / "index.html",
        out_dir / "overview" / "index.html",
        out_dir / "tutorials" / "index.html",
        out_dir / "tutorials" / "01_intro_to_antimatter_basics" / "index.html",
        out_dir / "examples" / "01_heh" / "index.html",
    }
    assert expected <= set(written)
    assert all(path.exists() for path in written)


def test_missing_root_page_lists_root_files(site_config: SiteConfig) -> None:
    """Unknown root slugs return a 404 naming the root pages."""
    page = DocsPageGenerator(site_config).render_page("nonexistent")
    assert page.status == 404
    soup = _soup(page.html)
    assert "nonexistent" in soup.select_one("p.not-found-message").get_text()
    links = [a.get_text() for a in soup.select("ul.available-files a")]
    assert links == ["getstarted", "overview"]


def test_empty_category_is_404(site_config: SiteConfig, content_root: Path) -> None:
    """A category without any notebooks renders the not-found page."""
    (content_root / "examples" / "01_heh.py").unlink()
    page = DocsPageGenerator(site_config).render_page("examples")
    assert page.status == 404
    assert page.title == "Examples"
    assert _soup(page.html).select_one("ul.available-files") is None


def test_root_notebook_is_built(site_config: SiteConfig, content_root: Path) -> None:
    """Notebooks at the content root are rendered by the static build."""
    (content_root / "lab.ipynb").write_text(
        notebook_json([markdown_cell("# Lab Notes")]), encoding="utf-8"
    )
    written = DocsPageGenerator(site_config).run()
    assert site_config.output_dir / "lab" / "index.html" in written
