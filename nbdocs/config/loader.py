"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .helpers import (
    _build_categories,
    _build_root_pages,
    _build_theme_config,
    _optional_str,
)
from .models import SiteConfig, SiteConfigError


def load_site_config(path: Path, *, content_dir: Path | None = None) -> SiteConfig:
    """Load the YAML configuration describing the documentation site.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``config/site.yaml``).
    content_dir : Path, optional
        Override for the content root; relative ``content_dir`` values in the
        file are otherwise resolved against the configuration file's parent.

    Returns
    -------
    SiteConfig
        Parsed site configuration with defaults applied.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    SiteConfigError
        If a field holds an invalid value.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from nbdocs.config import load_site_config
    >>> config = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
    >>> config.category_keys  # doctest: +SKIP
    ('tutorials', 'examples')
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):  # pragma: no cover - config error guard
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    base_dir = path.parent
    defaults = SiteConfig()

    configured_content = Path(raw.get("content_dir", defaults.content_dir))
    if content_dir is not None:
        configured_content = content_dir
    elif not configured_content.is_absolute():
        configured_content = base_dir / configured_content

    output_dir = Path(raw.get("output_dir", defaults.output_dir))
    base_path = _optional_str(raw.get("base_path")) or defaults.base_path
    if not base_path.startswith("/"):
        msg = "'base_path' must start with '/'."
        raise SiteConfigError(msg)

    excerpt_length = raw.get("excerpt_length", defaults.excerpt_length)
    if isinstance(excerpt_length, bool) or not isinstance(excerpt_length, int):
        msg = "'excerpt_length' must be an integer."
        raise SiteConfigError(msg)
    if excerpt_length < 0:
        msg = "'excerpt_length' must not be negative."
        raise SiteConfigError(msg)

    return SiteConfig(
        content_dir=configured_content,
        output_dir=output_dir,
        base_path=base_path,
        pygments_style=raw.get("pygments_style", defaults.pygments_style),
        excerpt_length=excerpt_length,
        theme=_build_theme_config(raw.get("theme")),
        categories=_build_categories(raw.get("categories")),
        root_pages=_build_root_pages(raw.get("root_pages")),
    )


__all__ = ["load_site_config"]
