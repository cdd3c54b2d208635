import pytest
from bs4 import BeautifulSoup

from docengine.markdown.shortcodes import (
    Invocation,
    ShortcodeProcessingError,
    ShortcodeRegistry,
    process,
)
from docengine.markdown.shortcodes.handlers import (
    TemplateShortcode,
    admonition,
    register_builtins,
    split_columns,
)
from docengine.markdown.shortcodes.handlers.utils import fenced_div


@pytest.fixture
def builtins():
    return register_builtins(ShortcodeRegistry())


def test_builtins_registered(builtins):
    assert builtins.names() == ["columns", "error", "figure", "note", "tip", "warning"]
    assert builtins.block_names() == frozenset({"columns", "error", "note", "tip", "warning"})


def test_admonition_with_title():
    invocation = Invocation(
        name="warning", args=(), kwargs={"title": "Heads up"}, body="\nBack up first.\n"
    )
    assert admonition(invocation) == (
        "::: {.admonition .warning}\n**Heads up**\n\nBack up first.\n:::"
    )


def test_admonition_through_engine(builtins):
    text = "Intro\n\n{{% tip %}}\nUse the cache.\n{{% /tip %}}\n"
    result = process(text, builtins)
    assert result.text == "Intro\n\n::: {.admonition .tip}\nUse the cache.\n:::\n"


def test_columns(builtins):
    text = "{{< columns >}}\nLeft\n<--->\nRight\n{{< /columns >}}"
    assert process(text, builtins).text == (
        ":::: {.columns}\n"
        "::: {.column}\nLeft\n:::\n"
        "::: {.column}\nRight\n:::\n"
        "::::"
    )


def test_columns_inside_admonition_get_longer_fence(builtins):
    text = "{{% note %}}\n{{< columns >}}\nA\n<--->\nB\n{{< /columns >}}\n{{% /note %}}"
    output = process(text, builtins).text
    assert output.startswith("::::: {.admonition .note}\n:::: {.columns}\n")
    assert output.endswith("::::\n:::::")


def test_split_columns_ignores_separator_in_code():
    body = "\n```\n<--->\n```\n<--->\nB\n"
    assert split_columns(body) == ["\n```\n<--->\n```\n", "B\n"]


def test_split_columns_without_separator():
    assert split_columns("only one") == ["only one"]


def test_fenced_div_default_fence():
    assert fenced_div(["a", "b"], "x") == "::: {.a .b}\nx\n:::"


def test_figures_are_numbered_per_document(builtins):
    text = (
        '{{% figure img/a.png "First figure" %}}\n'
        "{{% figure src=img/b.png caption=Second id=fig-b width=300 %}}"
    )
    output = process(text, builtins).text
    soup = BeautifulSoup(output, "html.parser")
    first, second = soup.find_all("figure")

    assert first["id"] == "figure-1"
    assert first.img["src"] == "img/a.png"
    assert first.img["alt"] == "First figure"
    assert first.figcaption.get_text() == "Figure 1: First figure"

    assert second["id"] == "fig-b"
    assert second.img["width"] == "300"
    assert second.figcaption.get_text() == "Figure 2: Second"

    assert process(text, builtins).text == output


def test_figure_escapes_attributes(builtins):
    output = process('{{% figure "a.png" alt=\'x" onload="y\' %}}', builtins).text
    img = BeautifulSoup(output, "html.parser").img
    assert img["alt"] == 'x" onload="y'
    assert not img.has_attr("onload")


@pytest.mark.parametrize(
    "text",
    ["{{% figure %}}", "{{% figure a.png width=wide %}}"],
)
def test_figure_rejects_bad_arguments(builtins, text):
    with pytest.raises(ShortcodeProcessingError):
        process(text, builtins)


def test_template_shortcode_escapes_arguments():
    handler = TemplateShortcode('<a href="{{ args.0 }}">{{ kwargs.label }}</a>')
    invocation = Invocation(name="link", args=("x&y",), kwargs={"label": "<b>"})
    assert handler.render(invocation) == '<a href="x&amp;y">&lt;b&gt;</a>'


def test_template_shortcode_body_is_not_escaped():
    registry = ShortcodeRegistry()
    registry.register(
        "details",
        TemplateShortcode("<details>{{ body }}</details>"),
        block=True,
    )
    result = process("{{% details %}}**bold** & <i>{{% /details %}}", registry)
    assert result.text == "<details>**bold** & <i></details>"
