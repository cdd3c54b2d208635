# docengine/markdown/shortcodes/handlers/__init__.py

from .admonition import ADMONITION_TYPES, admonition
from .columns import columns, split_columns
from .figure import figure
from .template import TemplateShortcode

# Built-in groups that can be enabled in settings: group -> (name, handler, block)
BUILTIN_SHORTCODES = {
    "admonition": [(name, admonition, True) for name in ADMONITION_TYPES],
    "columns": [("columns", columns, True)],
    "figure": [("figure", figure, False)],
}


def register_builtins(registry, groups=None):
    """Register the built-in groups (default: all of them) on registry."""
    for group in groups if groups is not None else BUILTIN_SHORTCODES:
        for name, handler, block in BUILTIN_SHORTCODES[group]:
            registry.register(name, handler, block=block)
    return registry


__all__ = [
    "ADMONITION_TYPES",
    "BUILTIN_SHORTCODES",
    "TemplateShortcode",
    "admonition",
    "columns",
    "figure",
    "register_builtins",
    "split_columns",
]
