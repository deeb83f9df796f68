"""Cyclopts CLI entrypoint for building and serving nbdocs documentation.

The ``nbdocs`` console script renders the content tree into static HTML,
runs a development server, and exposes the search and navigation builders
for quick inspection from a terminal. Every option can also be supplied via
an ``NBDOCS_*`` environment variable.

Examples
--------
Build the static site for the default configuration:

>>> from nbdocs.cli import main
>>> main()  # doctest: +SKIP

Search the content tree from a script:

>>> from nbdocs.cli import app
>>> app(["search", "positronium"])  # doctest: +SKIP
"""

from __future__ import annotations

import json
import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import load_site_config
from .content.store import ContentStore
from .generator import DocsPageGenerator
from .navigation import build_navigation, nav_to_dict
from .search import search as search_items
from .server import create_app

DEFAULT_CONFIG = Path("config/site.yaml")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

app = App(name="nbdocs", config=cyclopts.config.Env("NBDOCS_", command=False))  # type: ignore[unknown-argument]

ConfigOption = typ.Annotated[
    Path, Parameter(help="Path to site config", env_var="NBDOCS_CONFIG")
]
ContentOption = typ.Annotated[
    Path | None,
    Parameter(help="Override the content directory", env_var="NBDOCS_CONTENT_DIR"),
]
VerboseOption = typ.Annotated[
    bool, Parameter(help="Enable debug logging", env_var="NBDOCS_VERBOSE")
]


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT
    )


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


@app.command(help="Render every page into static HTML.")
def build(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    content_dir: ContentOption = None,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="NBDOCS_OUTPUT_DIR"),
    ] = None,
    verbose: VerboseOption = False,
) -> None:
    """Generate the static documentation site.

    Parameters
    ----------
    config : Path, optional
        Path to the ``site.yaml`` configuration file.
    content_dir : Path or None, optional
        Override for the content root declared in the configuration.
    output_dir : Path or None, optional
        Override for the output directory declared in the configuration.
    verbose : bool, optional
        Log at DEBUG level when set.
    """
    _configure_logging(verbose=verbose)
    site_config = load_site_config(config, content_dir=content_dir)
    generator = DocsPageGenerator(site_config, output_dir=output_dir)
    for path in generator.run():
        print(f"wrote {_format_path(path)}")


@app.command(help="Serve the documentation with the Flask development server.")
def serve(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    content_dir: ContentOption = None,
    host: typ.Annotated[
        str, Parameter(help="Interface to bind", env_var="NBDOCS_HOST")
    ] = "127.0.0.1",
    port: typ.Annotated[
        int, Parameter(help="Port to listen on", env_var="NBDOCS_PORT")
    ] = 5000,
    verbose: VerboseOption = False,
) -> None:
    """Run the development server until interrupted."""
    _configure_logging(verbose=verbose)
    site_config = load_site_config(config, content_dir=content_dir)
    create_app(site_config).run(host=host, port=port, debug=verbose)


@app.command(help="Print search results for a query as JSON.")
def search(
    query: str,
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    content_dir: ContentOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Search page titles and bodies for ``query``.

    Raises
    ------
    ValueError
        If ``query`` is blank.
    """
    _configure_logging(verbose=verbose)
    site_config = load_site_config(config, content_dir=content_dir)
    store = ContentStore(site_config.content_dir, site_config.category_keys)
    results = search_items(
        store.iter_items(),
        query,
        href=site_config.href,
        excerpt_length=site_config.excerpt_length,
    )
    print(json.dumps([result.to_dict() for result in results], indent=2))


@app.command(help="Print the sidebar navigation tree as JSON.")
def nav(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    content_dir: ContentOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Print the navigation tree built from the content directory."""
    _configure_logging(verbose=verbose)
    site_config = load_site_config(config, content_dir=content_dir)
    store = ContentStore(site_config.content_dir, site_config.category_keys)
    tree = build_navigation(store, site_config)
    print(json.dumps([nav_to_dict(node) for node in tree], indent=2))


def main() -> None:
    """Invoke the Cyclopts application that powers the ``nbdocs`` command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
