"""Utility helpers shared by the nbdocs configuration loader."""

from __future__ import annotations

import typing as typ

from nbdocs._constants import DEFAULT_ORDER

from .models import (
    DEFAULT_CATEGORIES,
    DEFAULT_ROOT_PAGES,
    CategoryConfig,
    RootPageConfig,
    SiteConfigError,
    ThemeConfig,
)


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_order(value: object, *, context: str) -> int:
    """Return ``value`` as an integer order, defaulting when absent."""
    match value:
        case None:
            return DEFAULT_ORDER
        case bool():
            msg = f"{context}: 'order' must be an integer."
            raise SiteConfigError(msg)
        case int():
            return value
        case str() as text if text.strip().isdigit():
            return int(text.strip())
        case _:
            msg = f"{context}: 'order' must be an integer."
            raise SiteConfigError(msg)


def _build_theme_config(payload: typ.Mapping[str, typ.Any] | None) -> ThemeConfig:
    """Build a ThemeConfig instance from the provided mapping payload."""
    base = ThemeConfig()
    if not payload:
        return base
    return ThemeConfig(
        site_name=payload.get("site_name", base.site_name),
        tagline=payload.get("tagline", base.tagline),
        doc_label=payload.get("doc_label", base.doc_label),
    )


def _build_categories(payload: object) -> tuple[CategoryConfig, ...]:
    """Build category configs from a ``key: {title, order}`` mapping."""
    if payload is None:
        return DEFAULT_CATEGORIES
    if not isinstance(payload, dict):
        msg = "'categories' must be a mapping of directory name to settings."
        raise SiteConfigError(msg)
    categories: list[CategoryConfig] = []
    for key, entry in payload.items():
        settings = entry if isinstance(entry, dict) else {}
        name = str(key).strip().strip("/")
        if not name or "/" in name:
            msg = f"Invalid category directory name {key!r}."
            raise SiteConfigError(msg)
        categories.append(
            CategoryConfig(
                key=name,
                title=_optional_str(settings.get("title")) or name.title(),
                order=_parse_order(settings.get("order"), context=f"category {name}"),
            )
        )
    return tuple(categories)


def _build_root_pages(payload: object) -> dict[str, RootPageConfig]:
    """Merge configured root page overrides into the default keyword table."""
    pages = dict(DEFAULT_ROOT_PAGES)
    if payload is None:
        return pages
    if not isinstance(payload, dict):
        msg = "'root_pages' must be a mapping of filename keyword to settings."
        raise SiteConfigError(msg)
    for key, entry in payload.items():
        keyword = str(key).strip().lower()
        settings = entry if isinstance(entry, dict) else {}
        title = _optional_str(settings.get("title")) or str(key)
        pages[keyword] = RootPageConfig(
            title=title,
            order=_parse_order(settings.get("order"), context=f"root page {keyword}"),
        )
    return pages


__all__ = [
    "_build_categories",
    "_build_root_pages",
    "_build_theme_config",
    "_optional_str",
    "_parse_order",
]
