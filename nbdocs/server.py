"""Flask application serving rendered documentation and the search API.

Example
-------
>>> from pathlib import Path
>>> from nbdocs.config import load_site_config
>>> from nbdocs.server import create_app
>>> app = create_app(load_site_config(Path("config/site.yaml")))  # doctest: +SKIP
>>> app.test_client().get("/api/search?q=antimatter").status_code  # doctest: +SKIP
200
"""

from __future__ import annotations

import logging
import typing as typ

from flask import Flask, Response, jsonify, redirect, request

from nbdocs.generator.page_generator import STYLESHEET_NAME, DocsPageGenerator
from nbdocs.search import search

if typ.TYPE_CHECKING:
    from nbdocs.config import SiteConfig

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPE = "text/html; charset=utf-8"


def create_app(site_config: SiteConfig) -> Flask:
    """Return a Flask app serving ``site_config``'s documentation.

    Routes
    ------
    ``GET /api/search?q=``
        JSON list of search results; 400 without a query, 500 on failure.
    ``GET <base_path>/``
        Documentation index.
    ``GET <base_path>/pygments.css``
        Highlighting stylesheet.
    ``GET <base_path>/<path:slug>``
        Rendered page, 404 or 500 pages when the slug cannot be served.
    ``GET /<category>/<name>``
        Redirect to the category page under ``base_path``.
    """
    app = Flask(__name__)
    generator = DocsPageGenerator(site_config)
    app.extensions["nbdocs"] = generator
    base = site_config.base_path.rstrip("/")

    @app.get("/api/search")
    def api_search() -> tuple[Response, int]:
        query = request.args.get("q", "")
        if not query.strip():
            return jsonify({"error": "Query parameter is required"}), 400
        try:
            results = search(
                generator.store.iter_items(),
                query,
                href=site_config.href,
                excerpt_length=site_config.excerpt_length,
            )
        except Exception:  # noqa: BLE001 - reported to the client as a 500
            logger.exception("Search for %r failed", query)
            return jsonify({"error": "Search failed"}), 500
        return jsonify([result.to_dict() for result in results]), 200

    @app.get(f"{base}/")
    def docs_index() -> Response:
        page = generator.render_index()
        return Response(page.html, status=page.status, content_type=HTML_CONTENT_TYPE)

    @app.get(f"{base}/{STYLESHEET_NAME}")
    def stylesheet() -> Response:
        return Response(generator.renderer.stylesheet, mimetype="text/css")

    @app.get(f"{base}/<path:slug>")
    def docs_page(slug: str) -> Response:
        page = generator.render_page(slug)
        return Response(page.html, status=page.status, content_type=HTML_CONTENT_TYPE)

    for category in site_config.category_keys:
        app.add_url_rule(
            f"/{category}/<path:name>",
            endpoint=f"legacy_{category}",
            view_func=_legacy_redirect(site_config, category),
        )
    return app


def _legacy_redirect(
    site_config: SiteConfig, category: str
) -> typ.Callable[[str], Response]:
    def _view(name: str) -> Response:
        return redirect(site_config.href(f"{category}/{name}"), code=301)

    return _view


__all__ = ["create_app"]
