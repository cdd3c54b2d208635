# docengine/markdown/renderer.py
"""
Markdown to HTML for documents that use shortcodes.

    shortcode expansion (PREPROCESSORS)
        -> pandoc, with fenced divs and raw HTML enabled
        -> HTML clean-up for shortcode output (POSTPROCESSORS)

Shortcode diagnostics end up in context["shortcode_diagnostics"].
"""

import pypandoc

from .config import get_pandoc_config
from .postprocessors import apply_postprocessors
from .preprocessors import apply_preprocessors


def render_markdown(text, context=None):
    """
    Expand shortcodes in text and render the result to HTML5.

    Args:
        text: Markdown that may contain shortcode markers
        context: Dict shared by the processors; may carry a prebuilt
            shortcode_registry, a shortcode_policy and the document_id

    Raises:
        ShortcodeProcessingError: a shortcode problem under a hard policy
    """
    context = context if context is not None else {}

    text = apply_preprocessors(text, context)

    # Admonitions and columns arrive as ::: divs, figures as raw <figure>.
    options = get_pandoc_config()
    html = pypandoc.convert_text(
        text,
        to="html5",
        format="markdown",
        extra_args=options["extra_args"],
        filters=options.get("filters", []),
    )

    return apply_postprocessors(html, context)
