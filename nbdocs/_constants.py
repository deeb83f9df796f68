"""Common literal values used across nbdocs.

These constants keep file suffixes, ordering defaults, and placeholder
prefixes centralized so the resolver, parser, renderer, and tests import the
same values without drifting. Intended for internal use within the nbdocs
package.

Examples
--------
>>> from nbdocs import _constants
>>> _constants.DEFAULT_ORDER
999
>>> ".ipynb" in _constants.NOTEBOOK_SUFFIXES
True
"""

DEFAULT_ORDER = 999
MARKDOWN_SUFFIXES: tuple[str, ...] = (".md", ".mdx")
NOTEBOOK_SUFFIXES: tuple[str, ...] = (".ipynb", ".py")
ROOT_SUFFIXES: tuple[str, ...] = (*MARKDOWN_SUFFIXES, ".ipynb")

DISPLAY_MATH_PREFIX = "DISPLAY_MATH_"
INLINE_MATH_PREFIX = "INLINE_MATH_"
CODE_BLOCK_PREFIX = "CODE_BLOCK_"
INLINE_CODE_PREFIX = "INLINE_CODE_"

DEFAULT_NOTEBOOK_LANGUAGE = "python"
NOTEBOOK_EXCERPT = "Jupyter notebook"
