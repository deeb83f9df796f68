"""Typed dataclasses describing nbdocs site configuration structures."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from nbdocs._constants import DEFAULT_ORDER


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class ThemeConfig:
    """Visual theming applied to generated documentation."""

    site_name: str = "Documentation"
    tagline: str = "Guides, tutorials, and examples"
    doc_label: str = "Docs"


@dc.dataclass(slots=True)
class CategoryConfig:
    """A notebook category directory shown as a sidebar group."""

    key: str
    title: str
    order: int = DEFAULT_ORDER


@dc.dataclass(slots=True)
class RootPageConfig:
    """Title and order assigned to a top-level page by filename keyword."""

    title: str
    order: int = DEFAULT_ORDER


DEFAULT_CATEGORIES: tuple[CategoryConfig, ...] = (
    CategoryConfig(key="tutorials", title="Tutorials", order=40),
    CategoryConfig(key="examples", title="Examples", order=50),
)

DEFAULT_ROOT_PAGES: dict[str, RootPageConfig] = {
    "getstarted": RootPageConfig(title="Getting Started", order=1),
    "overview": RootPageConfig(title="Overview", order=10),
    "theory": RootPageConfig(title="Theory", order=20),
    "howtos": RootPageConfig(title="How-To Guides", order=30),
    "contibuterguide": RootPageConfig(title="Contributor Guide", order=60),
    "contributorguide": RootPageConfig(title="Contributor Guide", order=60),
    "contributerguide": RootPageConfig(title="Contributor Guide", order=60),
    "releasenotes": RootPageConfig(title="Release Notes", order=70),
}


@dc.dataclass(slots=True)
class SiteConfig:
    """Fully resolved site configuration.

    Attributes
    ----------
    content_dir : Path
        Root of the content tree.
    output_dir : Path
        Destination for static builds.
    base_path : str
        URL prefix under which documentation pages are served.
    pygments_style : str
        Pygments style used for code highlighting.
    excerpt_length : int
        Number of body characters used for search excerpts.
    theme : ThemeConfig
        Site name and tagline rendered in templates.
    categories : tuple[CategoryConfig, ...]
        Notebook category directories in declaration order.
    root_pages : dict[str, RootPageConfig]
        Lower-cased filename stem to sidebar title/order lookup.
    """

    content_dir: Path = Path("content")
    output_dir: Path = Path("public")
    base_path: str = "/docs"
    pygments_style: str = "monokai"
    excerpt_length: int = 150
    theme: ThemeConfig = dc.field(default_factory=ThemeConfig)
    categories: tuple[CategoryConfig, ...] = DEFAULT_CATEGORIES
    root_pages: dict[str, RootPageConfig] = dc.field(
        default_factory=lambda: dict(DEFAULT_ROOT_PAGES)
    )

    @property
    def category_keys(self) -> tuple[str, ...]:
        """Return the configured category directory names."""
        return tuple(category.key for category in self.categories)

    def href(self, slug: str) -> str:
        """Return the site URL for ``slug``."""
        return f"{self.base_path.rstrip('/')}/{slug.strip('/')}"


__all__ = [
    "DEFAULT_CATEGORIES",
    "DEFAULT_ROOT_PAGES",
    "CategoryConfig",
    "RootPageConfig",
    "SiteConfig",
    "SiteConfigError",
    "ThemeConfig",
]
