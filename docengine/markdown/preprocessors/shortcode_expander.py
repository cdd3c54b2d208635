"""
Preprocessor that expands shortcodes before markdown conversion.

Converts:
    {{% note %}}Remember to save.{{% /note %}}
into:
    ::: {.admonition .note}
    Remember to save.
    :::

Context keys read:
    shortcode_registry  - ShortcodeRegistry to use (default: built from settings)
    shortcode_policy    - SubstitutionPolicy to use (default: from settings)
    document_id         - name used in diagnostics

Context keys written:
    shortcode_diagnostics - list of Diagnostic found in this document
"""

import logging

from ..config import build_registry, get_substitution_policy
from ..shortcodes import process

logger = logging.getLogger(__name__)


def expand_shortcodes(text: str, context: dict) -> str:
    """
    Substitute every shortcode in text.

    Args:
        text: Raw markdown text
        context: Rendering context (see module docstring)

    Returns:
        Markdown with shortcodes replaced

    Raises:
        ShortcodeProcessingError: a hard-policy problem was found
    """
    registry = context.get("shortcode_registry")
    if registry is None:
        registry = context["shortcode_registry"] = build_registry()
    policy = context.get("shortcode_policy") or get_substitution_policy()
    document_id = context.get("document_id")

    result = process(text, registry, document_id=document_id, policy=policy)

    for diagnostic in result.diagnostics:
        logger.warning(f"Shortcode problem: {diagnostic}")
    context["shortcode_diagnostics"] = result.diagnostics
    return result.text


def shortcode_expander_default(text: str, context: dict) -> str:
    """
    Default configuration for shortcode_expander.

    Register this in PREPROCESSORS.
    """
    return expand_shortcodes(text, context)
