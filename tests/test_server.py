"""Tests for the Flask HTTP interface."""

from __future__ import annotations

import typing as typ

import pytest
from bs4 import BeautifulSoup

from nbdocs import server
from nbdocs.server import create_app

if typ.TYPE_CHECKING:
    from flask.testing import FlaskClient

    from nbdocs.config import SiteConfig


@pytest.fixture
def client(site_config: SiteConfig) -> FlaskClient:
    """Return a Flask test client for the fixture content tree."""
    app = create_app(site_config)
    app.config["TESTING"] = True
    return app.test_client()


def test_search_returns_results(client: FlaskClient) -> None:
    """Matching items are returned as JSON objects."""
    response = client.get("/api/search", query_string={"q": "HeH"})
    assert response.status_code == 200
    assert response.get_json() == [
        {
            "title": "HeH System",
            "slug": "examples/01_heh",
            "href": "/docs/examples/01_heh",
            "type": "jupyter",
            "excerpt": "Jupyter notebook",
        }
    ]


@pytest.mark.parametrize("url", ["/api/search", "/api/search?q=", "/api/search?q=%20"])
def test_search_requires_query(client: FlaskClient, url: str) -> None:
    """Missing or blank queries are rejected with a 400."""
    response = client.get(url)
    assert response.status_code == 400
    assert response.get_json() == {"error": "Query parameter is required"}


def test_search_failure_is_500(
    client: FlaskClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Unexpected search failures are reported without details."""

    def _fail(*_args: object, **_kwargs: object) -> list[object]:
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(server, "search", _fail)
    response = client.get("/api/search?q=anything")
    assert response.status_code == 500
    assert response.get_json() == {"error": "Search failed"}


def test_docs_page_and_index(client: FlaskClient) -> None:
    """Pages and the index are served as HTML."""
    response = client.get("/docs/tutorials/2")
    assert response.status_code == 200
    assert response.mimetype == "text/html"
    soup = BeautifulSoup(response.get_data(as_text=True), "html.parser")
    assert soup.select_one("h1.doc-title").get_text() == "Working with Positronium"
    assert client.get("/docs/").status_code == 200


def test_missing_page_is_404(client: FlaskClient) -> None:
    """Unresolvable slugs return the not-found page."""
    response = client.get("/docs/examples/zzz")
    assert response.status_code == 404
    assert "01_heh" in response.get_data(as_text=True)


def test_stylesheet(client: FlaskClient) -> None:
    """The Pygments stylesheet is served as CSS."""
    response = client.get("/docs/pygments.css")
    assert response.status_code == 200
    assert response.mimetype == "text/css"
    assert ".codehilite" in response.get_data(as_text=True)


def test_legacy_category_urls_redirect(client: FlaskClient) -> None:
    """Category URLs outside the docs prefix redirect into it."""
    response = client.get("/tutorials/01_intro_to_antimatter")
    assert response.status_code == 301
    assert response.headers["Location"].endswith("/docs/tutorials/01_intro_to_antimatter")
