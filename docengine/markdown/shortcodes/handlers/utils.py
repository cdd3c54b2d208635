"""Helpers shared by the built-in handlers."""

import re

_COLON_RUN = re.compile(r"^[ \t]*(:{3,})", re.MULTILINE)


def fenced_div(classes, content: str) -> str:
    """
    Wrap markdown content in a Pandoc fenced div.

    The fence is made longer than any colon fence inside the content so that
    nested divs (columns inside an admonition, say) stay balanced.

    Example:
        >>> fenced_div(["admonition", "note"], "Hello")
        '::: {.admonition .note}\\nHello\\n:::'
    """
    longest = max((len(m.group(1)) for m in _COLON_RUN.finditer(content)), default=2)
    fence = ":" * max(3, longest + 1)
    attributes = " ".join(f".{name}" for name in classes)
    return f"{fence} {{{attributes}}}\n{content}\n{fence}"


def strip_body(body) -> str:
    """Drop the newlines that separate a block body from its markers."""
    return (body or "").strip("\n")
