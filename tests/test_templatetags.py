from docengine.markdown import renderer
from docengine.templatetags.markdown_tags import markdown_filter, shortcodes_filter


def test_shortcodes_filter_returns_markdown():
    assert shortcodes_filter("{{% note %}}x{{% /note %}}") == "::: {.admonition .note}\nx\n:::"


def test_shortcodes_filter_handles_none():
    assert shortcodes_filter(None) == ""


def test_markdown_filter_renders_through_pipeline(monkeypatch):
    seen = []

    def convert_text(text, **kwargs):
        seen.append(text)
        return "<p>rendered</p>"

    monkeypatch.setattr(renderer.pypandoc, "convert_text", convert_text)
    assert markdown_filter("{{% note %}}x{{% /note %}}") == "<p>rendered</p>"
    assert seen == ["::: {.admonition .note}\nx\n:::"]
