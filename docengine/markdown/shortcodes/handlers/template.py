# docengine/markdown/shortcodes/handlers/template.py
"""
Shortcodes backed by a Django template string.

Configured in settings:

    SHORTCODES = {
        "TEMPLATES": {
            "youtube": {
                "template": '<iframe src="https://www.youtube.com/embed/{{ args.0 }}"></iframe>',
            },
            "details": {
                "template": "<details><summary>{{ kwargs.summary }}</summary>\\n\\n{{ body }}\\n\\n</details>",
                "block": True,
            },
        },
    }

Templates see `name`, `args`, `kwargs` and `body`. Arguments are
auto-escaped; the body is already markdown and is inserted as is.
"""

from django.template import Context, Engine
from django.utils.safestring import mark_safe

_engine = None


def get_template_engine() -> Engine:
    """Standalone template engine; shortcode templates never load files."""
    global _engine
    if _engine is None:
        _engine = Engine(autoescape=True)
    return _engine


class TemplateShortcode:
    def __init__(self, source: str, engine: Engine = None):
        self.source = source
        # Raises TemplateSyntaxError right away for broken templates.
        self.template = (engine or get_template_engine()).from_string(source)

    def render(self, invocation) -> str:
        context = Context(
            {
                "name": invocation.name,
                "args": list(invocation.args),
                "kwargs": dict(invocation.kwargs),
                "body": mark_safe(invocation.body or ""),
            }
        )
        return str(self.template.render(context))

    def __repr__(self):
        return f"<TemplateShortcode {self.source[:40]!r}>"
