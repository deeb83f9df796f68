"""High-level orchestration for documentation page assembly.

This module ties the content store, slug resolver, renderer, and navigation
builder together. :class:`DocsPageGenerator` turns a URL slug into a complete
HTML page (never raising past :meth:`DocsPageGenerator.render_page`) and can
write every page of the site into a static output directory.

Example
-------
>>> from pathlib import Path
>>> from nbdocs.config import load_site_config
>>> from nbdocs.generator import DocsPageGenerator
>>> config = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
>>> generator = DocsPageGenerator(config)  # doctest: +SKIP
>>> generator.render_page("tutorials/01_intro").status  # doctest: +SKIP
200
>>> generator.run()  # doctest: +SKIP
[PosixPath('public/index.html'), ...]
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import logging
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from nbdocs.content.errors import (
    ContentError,
    ContentIOError,
    ContentNotFoundError,
    FormatError,
)
from nbdocs.content.resolver import SlugResolver, split_slug
from nbdocs.content.store import ContentStore
from nbdocs.generator.renderer import HtmlContentRenderer
from nbdocs.navigation import NavigationBuilder

if typ.TYPE_CHECKING:
    from nbdocs.config import SiteConfig
    from nbdocs.content.models import ContentItem, NavNode

logger = logging.getLogger(__name__)

STYLESHEET_NAME = "pygments.css"


@dc.dataclass(frozen=True, slots=True)
class RenderedPage:
    """A complete HTML page together with its HTTP status."""

    status: int
    title: str
    html: str


class DocsPageGenerator:
    """Resolve slugs, render content, and wrap it in the site templates."""

    def __init__(
        self,
        site_config: SiteConfig,
        *,
        templates_dir: Path | None = None,
        output_dir: Path | None = None,
    ) -> None:
        """Initialize the generator with configuration and template context.

        Parameters
        ----------
        site_config : SiteConfig
            Site configuration describing the content tree and theming.
        templates_dir : Path, optional
            Directory containing Jinja templates; defaults to the package templates.
        output_dir : Path, optional
            Override for the static output directory; defaults to the site config.
        """
        self.config = site_config
        self.output_dir = output_dir or site_config.output_dir
        default_templates = Path(__file__).resolve().parents[1] / "templates"
        self.templates_dir = templates_dir or default_templates
        self.store = ContentStore(site_config.content_dir, site_config.category_keys)
        self.resolver = SlugResolver(self.store)
        self.renderer = HtmlContentRenderer(site_config.pygments_style)
        self.navigation = NavigationBuilder(self.store, site_config)
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def load(self, slug: str) -> ContentItem:
        """Resolve ``slug`` and parse the matching file.

        Raises
        ------
        ContentNotFoundError
            If no file in the addressed category matches the slug.
        FormatError
            If the file cannot be decoded.
        ContentIOError
            If the file cannot be read.
        """
        category, name = split_slug(slug, self.config.category_keys)
        path = self.resolver.resolve(category, name)
        if path is None:
            raise ContentNotFoundError(category, name, self.resolver.available(category))
        return self.store.load(path)

    def render_page(self, slug: str) -> RenderedPage:
        """Return the full HTML page for ``slug``.

        Missing content yields a 404 page listing the files that do exist,
        unreadable or malformed content yields a 500 panel, and rendering
        failures fall back to escaped source text.
        """
        cleaned = slug.strip().strip("/")
        category = self._category(cleaned)
        if category is not None:
            return self._category_page(category)
        try:
            item = self.load(cleaned)
        except ContentNotFoundError as exc:
            logger.info("%s", exc)
            return self._not_found(exc)
        except (FormatError, ContentIOError) as exc:
            logger.warning("Error loading %s: %s", cleaned, exc)
            return self._error(cleaned, exc)
        except ContentError as exc:  # pragma: no cover - taxonomy guard
            logger.exception("Unexpected content failure for %s", cleaned)
            return self._error(cleaned, exc)

        rendered = self.renderer.render(item)
        html = self._render_template(
            "doc_page.jinja",
            title=rendered.title,
            content=rendered.html,
            kind=rendered.kind,
            fallback=rendered.fallback,
            current_slug=item.slug,
        )
        return RenderedPage(status=200, title=rendered.title, html=html)

    def render_index(self) -> RenderedPage:
        """Return the documentation landing page listing every section."""
        title = self.config.theme.site_name
        html = self._render_template("index.jinja", title=title, current_slug="")
        return RenderedPage(status=200, title=title, html=html)

    def run(self) -> list[Path]:
        """Render every page, the index, and the stylesheet into ``output_dir``.

        Returns
        -------
        list[Path]
            Paths to the written files, index first.
        """
        out_dir = self.output_dir
        out_dir.mkdir(parents=True, exist_ok=True)
        written: list[Path] = []

        index_path = out_dir / "index.html"
        index_path.write_text(self.render_index().html, encoding="utf-8")
        written.append(index_path)

        stylesheet_path = out_dir / STYLESHEET_NAME
        stylesheet_path.write_text(self.renderer.stylesheet, encoding="utf-8")
        written.append(stylesheet_path)

        for slug in self._static_slugs():
            page = self.render_page(slug)
            if page.status != 200:
                logger.warning("Skipping %s (status %d)", slug, page.status)
                continue
            target = out_dir / slug / "index.html"
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(page.html, encoding="utf-8")
            written.append(target)
        return written

    def _static_slugs(self) -> list[str]:
        slugs: dict[str, None] = {}
        for node in self.navigation.build():
            if node.children:
                slugs.setdefault(node.slug, None)
        for path in [*self.store.markdown_files(), *self.store.notebook_files()]:
            slugs.setdefault(self.store.slug_for(path), None)
        return list(slugs)

    def _category(self, slug: str) -> str | None:
        return slug if slug in self.config.category_keys else None

    def _category_page(self, key: str) -> RenderedPage:
        node = self._find_node(key)
        if node is None:
            title = next(
                (c.title for c in self.config.categories if c.key == key), key
            )
            exc = ContentNotFoundError(key, "", self.resolver.available(key))
            return self._not_found(exc, title=title)
        html = self._render_template(
            "index.jinja", title=node.title, section=node, current_slug=key
        )
        return RenderedPage(status=200, title=node.title, html=html)

    def _find_node(self, slug: str) -> NavNode | None:
        return next((node for node in self.navigation.build() if node.slug == slug), None)

    def _not_found(
        self, exc: ContentNotFoundError, *, title: str = "Content not found"
    ) -> RenderedPage:
        category = exc.category
        available = [
            (stem, self.config.href(f"{category}/{stem}" if category else stem))
            for stem in exc.available
        ]
        html = self._render_template(
            "not_found.jinja",
            title=title,
            message=str(exc),
            category=category,
            name=exc.name,
            available=available,
            current_slug="",
        )
        return RenderedPage(status=404, title=title, html=html)

    def _error(self, slug: str, exc: ContentError) -> RenderedPage:
        title = "Error loading content"
        html = self._render_template(
            "error.jinja",
            title=title,
            slug=slug,
            message=str(exc),
            current_slug=slug,
        )
        return RenderedPage(status=500, title=title, html=html)

    def _render_template(self, template_name: str, **context: typ.Any) -> str:
        template = self.env.get_template(template_name)
        return template.render(
            theme=self.config.theme,
            nav=self.navigation.build(),
            base_path=self.config.base_path.rstrip("/"),
            stylesheet_url=self.config.href(STYLESHEET_NAME),
            generated_at=dt.datetime.now(dt.UTC),
            **context,
        )


__all__ = ["DocsPageGenerator", "RenderedPage", "STYLESHEET_NAME"]
