"""Load and validate site configuration YAML for nbdocs builds.

This subpackage parses the project's ``site.yaml`` file, applies defaults for
the content tree layout, category groups, and top-level page ordering, and
produces typed dataclasses (:class:`SiteConfig`, :class:`CategoryConfig`,
etc.) that the store, navigation builder, and page generator consume. The
primary entry point is :func:`load_site_config`.

Examples
--------
>>> from pathlib import Path
>>> from nbdocs.config import load_site_config
>>> site = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
>>> site.href("tutorials/01_intro")  # doctest: +SKIP
'/docs/tutorials/01_intro'
"""

from .loader import load_site_config
from .models import (
    CategoryConfig,
    RootPageConfig,
    SiteConfig,
    SiteConfigError,
    ThemeConfig,
)

__all__ = [
    "CategoryConfig",
    "RootPageConfig",
    "SiteConfig",
    "SiteConfigError",
    "ThemeConfig",
    "load_site_config",
]
