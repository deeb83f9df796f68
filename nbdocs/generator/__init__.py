"""Rendering and page assembly for nbdocs.

The :mod:`nbdocs.generator.renderer` module converts Markdown and notebooks
into HTML fragments, and :mod:`nbdocs.generator.page_generator` wraps those
fragments in the Jinja templates to produce complete pages.
"""

from .page_generator import DocsPageGenerator, RenderedPage
from .renderer import HtmlContentRenderer, RenderedContent

__all__ = [
    "DocsPageGenerator",
    "HtmlContentRenderer",
    "RenderedContent",
    "RenderedPage",
]
