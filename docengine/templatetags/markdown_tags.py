# docengine/templatetags/markdown_tags.py

from django import template
from django.utils.safestring import mark_safe

from docengine.markdown.preprocessors.shortcode_expander import expand_shortcodes
from docengine.markdown.renderer import render_markdown

register = template.Library()


@register.filter(name="markdown")
def markdown_filter(value):
    return mark_safe(render_markdown(value))


@register.filter(name="shortcodes")
def shortcodes_filter(value):
    """Expand shortcodes only; the result is still markdown"""
    return expand_shortcodes(value or "", {})


@register.simple_tag(takes_context=True)
def markdown_with_context(context, value):
    """Template tag that names the document in shortcode diagnostics"""
    processor_context = {
        "document_id": context.get("document_id"),
    }
    return mark_safe(render_markdown(value, context=processor_context))
