# docengine/markdown/shortcodes/handlers/admonition.py
"""
Admonition shortcodes: note, tip, warning and error.

Input:
    {{% warning title="Heads up" %}}
    Back up your data first.
    {{% /warning %}}

Output (Pandoc fenced div):
    ::: {.admonition .warning}
    **Heads up**

    Back up your data first.
    :::
"""

from .utils import fenced_div, strip_body

# Supported admonition types
ADMONITION_TYPES = ["tip", "note", "warning", "error"]


def admonition(invocation) -> str:
    """
    Render an admonition block.

    The title comes from the `title` argument or the first positional one.
    """
    title = invocation.get("title", 0)
    body = strip_body(invocation.body)

    content = f"**{title}**\n\n{body}" if title else body
    return fenced_div(["admonition", invocation.name], content)
