"""Shared fixtures that build throwaway content trees for nbdocs tests."""

from __future__ import annotations

import json
import typing as typ
from pathlib import Path

import pytest

from nbdocs.config import SiteConfig
from nbdocs.content.store import ContentStore


def notebook_json(
    cells: list[dict[str, typ.Any]], metadata: dict[str, typ.Any] | None = None
) -> str:
    """Return the JSON text of a minimal nbformat 4 notebook."""
    return json.dumps(
        {
            "cells": cells,
            "metadata": metadata or {"language_info": {"name": "python"}},
            "nbformat": 4,
            "nbformat_minor": 5,
        }
    )


def markdown_cell(source: str) -> dict[str, typ.Any]:
    """Return a notebook markdown cell holding ``source``."""
    return {"cell_type": "markdown", "metadata": {}, "source": source}


def code_cell(
    source: str, outputs: list[dict[str, typ.Any]] | None = None, count: int = 1
) -> dict[str, typ.Any]:
    """Return a notebook code cell with optional outputs."""
    return {
        "cell_type": "code",
        "execution_count": count,
        "metadata": {},
        "outputs": outputs or [],
        "source": source,
    }


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    """Create a content tree with root pages, tutorials, and examples."""
    root = tmp_path / "content"
    tutorials = root / "tutorials"
    examples = root / "examples"
    tutorials.mkdir(parents=True)
    examples.mkdir()
    (root / "getstarted.md").write_text(
        "---\ntitle: Getting Started\norder: 1\n---\n\n"
        "# Getting Started\n\nInstall the positronium toolkit.\n",
        encoding="utf-8",
    )
    (root / "overview.mdx").write_text(
        "import Callout from './callout'\n\n# Overview\n\nEnergy is $E = mc^2$.\n",
        encoding="utf-8",
    )
    (tutorials / "01_intro_to_antimatter_basics.ipynb").write_text(
        notebook_json(
            [
                markdown_cell("# Introduction to Antimatter\n\nPositrons meet electrons."),
                code_cell(
                    "print('hello')",
                    [{"output_type": "stream", "name": "stdout", "text": ["hello\n"]}],
                ),
            ]
        ),
        encoding="utf-8",
    )
    (tutorials / "02_working_with_positronium.ipynb").write_text(
        notebook_json([markdown_cell("# Working with Positronium")]),
        encoding="utf-8",
    )
    (examples / "01_heh.py").write_text(
        '"""# HeH System\n\nGround state of HeH.\n"""\n\nbond = 1.46\n',
        encoding="utf-8",
    )
    return root


@pytest.fixture
def site_config(content_root: Path, tmp_path: Path) -> SiteConfig:
    """Return a site config rooted at the ``content_root`` fixture."""
    return SiteConfig(content_dir=content_root, output_dir=tmp_path / "public")


@pytest.fixture
def store(site_config: SiteConfig) -> ContentStore:
    """Return a content store over the ``content_root`` fixture."""
    return ContentStore(site_config.content_dir, site_config.category_keys)
