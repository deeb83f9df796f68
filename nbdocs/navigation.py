"""Build the sidebar navigation tree from the content directory layout.

Loose Markdown pages in the content root become top-level leaves whose title
and position come from the configured keyword table; each category directory
becomes a parent whose children are its notebooks, ordered by their numeric
filename prefix.

Example
-------
>>> from nbdocs.navigation import notebook_label
>>> notebook_label("03_advanced_basis_sets")
('advanced basis sets', 3)
>>> notebook_label("appendix")
('appendix', 999)
"""

from __future__ import annotations

import logging
import re
import typing as typ

from nbdocs._constants import DEFAULT_ORDER, MARKDOWN_SUFFIXES, NOTEBOOK_SUFFIXES
from nbdocs.content.models import NavNode

if typ.TYPE_CHECKING:
    from nbdocs.config import SiteConfig
    from nbdocs.content.store import ContentStore

logger = logging.getLogger(__name__)

NOTEBOOK_PREFIX_PATTERN = re.compile(r"^(\d+)_(.*)$")


def _sort_key(node: NavNode) -> tuple[int, str]:
    return node.order, node.slug


def notebook_label(stem: str) -> tuple[str, int]:
    """Return the display title and order encoded in a notebook filename."""
    match = NOTEBOOK_PREFIX_PATTERN.match(stem)
    if match is None:
        return stem.replace("_", " "), DEFAULT_ORDER
    return match.group(2).replace("_", " "), int(match.group(1))


def _root_nodes(store: ContentStore, config: SiteConfig) -> list[NavNode]:
    nodes: list[NavNode] = []
    for name in store.list_files(None, MARKDOWN_SUFFIXES):
        stem = name.rsplit(".", 1)[0]
        page = config.root_pages.get(stem.lower())
        title = page.title if page else stem
        order = page.order if page else DEFAULT_ORDER
        nodes.append(
            NavNode(title=title, slug=stem, href=config.href(stem), order=order)
        )
    return nodes


def _category_node(
    store: ContentStore, config: SiteConfig, key: str, title: str, order: int
) -> NavNode | None:
    stems: dict[str, None] = {}
    for suffix in NOTEBOOK_SUFFIXES:
        for name in store.list_files(key, (suffix,)):
            stems.setdefault(name.rsplit(".", 1)[0], None)
    if not stems:
        logger.debug("Category %r has no notebooks; omitting it", key)
        return None
    children: list[NavNode] = []
    for stem in stems:
        label, child_order = notebook_label(stem)
        slug = f"{key}/{stem}"
        children.append(
            NavNode(title=label, slug=slug, href=config.href(slug), order=child_order)
        )
    children.sort(key=_sort_key)
    return NavNode(
        title=title,
        slug=key,
        href=config.href(key),
        order=order,
        children=tuple(children),
    )


def build_navigation(store: ContentStore, config: SiteConfig) -> list[NavNode]:
    """Return the sorted navigation tree for ``store``.

    Parameters
    ----------
    store : ContentStore
        Content tree to scan.
    config : SiteConfig
        Supplies the root page keyword table, categories and URL prefix.

    Returns
    -------
    list[NavNode]
        Top-level nodes sorted by ``(order, slug)``; categories without any
        notebooks are left out.
    """
    nodes = _root_nodes(store, config)
    for category in config.categories:
        node = _category_node(store, config, category.key, category.title, category.order)
        if node is not None:
            nodes.append(node)
    nodes.sort(key=_sort_key)
    return nodes


class NavigationBuilder:
    """Cache the navigation tree until the content directories change."""

    def __init__(self, store: ContentStore, config: SiteConfig) -> None:
        self.store = store
        self.config = config
        self._signature: tuple[tuple[str, int], ...] | None = None
        self._tree: list[NavNode] = []

    def build(self) -> list[NavNode]:
        """Return the cached tree, rebuilding it when a directory mtime moved."""
        signature = self.store.signature()
        if signature != self._signature:
            logger.debug("Rebuilding navigation for %s", self.store.root)
            self._tree = build_navigation(self.store, self.config)
            self._signature = signature
        return list(self._tree)

    def invalidate(self) -> None:
        """Drop the cached tree so the next build rescans the store."""
        self._signature = None


def nav_to_dict(node: NavNode) -> dict[str, typ.Any]:
    """Return a JSON-ready mapping for ``node`` and its children."""
    payload: dict[str, typ.Any] = {
        "title": node.title,
        "slug": node.slug,
        "href": node.href,
        "order": node.order,
    }
    if node.children:
        payload["children"] = [nav_to_dict(child) for child in node.children]
    return payload


__all__ = ["NavigationBuilder", "build_navigation", "nav_to_dict", "notebook_label"]
