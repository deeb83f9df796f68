"""Render Markdown pages and Jupyter notebooks into a documentation site.

This package exposes the CLI entry points used by ``nbdocs build`` and
``nbdocs serve``.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from nbdocs import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
