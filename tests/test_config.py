import pytest
from django.core.exceptions import ImproperlyConfigured
from django.test import override_settings

from docengine.markdown.config import (
    build_registry,
    get_pandoc_config,
    get_shortcode_config,
    get_substitution_policy,
)
from docengine.markdown.shortcodes import ErrorPolicy, SubstitutionPolicy, process


def test_defaults_without_setting():
    config = get_shortcode_config()
    assert config["BUILTINS"] == ["admonition", "columns", "figure"]
    assert config["TEMPLATES"] == {}
    assert get_substitution_policy(config) == SubstitutionPolicy()


def test_default_registry_has_all_builtins():
    registry = build_registry()
    assert {"note", "tip", "warning", "error", "columns", "figure"} <= set(registry.names())


@override_settings(SHORTCODES={"BUILTINS": ["figure"]})
def test_builtins_can_be_limited():
    assert build_registry().names() == ["figure"]


@override_settings(SHORTCODES={"BUILTINS": ["figure", "carousel"]})
def test_unknown_builtin_is_a_configuration_error():
    with pytest.raises(ImproperlyConfigured, match="carousel"):
        build_registry()


@override_settings(
    SHORTCODES={
        "BUILTINS": [],
        "TEMPLATES": {
            "kbd": "<kbd>{{ args.0 }}</kbd>",
            "aside": {"template": "<aside>{{ body }}</aside>", "block": True},
        },
    }
)
def test_template_shortcodes_from_settings():
    registry = build_registry()
    assert registry.block_names() == frozenset({"aside"})

    result = process("{{% kbd Ctrl %}} {{% aside %}}x{{% /aside %}}", registry)
    assert result.text == "<kbd>Ctrl</kbd> <aside>x</aside>"


@pytest.mark.parametrize(
    "templates",
    [
        {"bad": "{% no_such_tag %}"},
        {"bad": {"block": True}},
        {"bad name": "x"},
        {"figure": "duplicate of a builtin"},
    ],
)
def test_broken_templates_are_configuration_errors(templates):
    with override_settings(SHORTCODES={"TEMPLATES": templates}):
        with pytest.raises(ImproperlyConfigured):
            build_registry()


@override_settings(
    SHORTCODES={"ON_HANDLER_NOT_FOUND": "hard", "ON_HANDLER_FAILURE": "soft"}
)
def test_policy_from_settings():
    policy = get_substitution_policy()
    assert policy.handler_not_found is ErrorPolicy.HARD
    assert policy.handler_failure is ErrorPolicy.SOFT
    assert policy.malformed_arguments is ErrorPolicy.SOFT


def test_invalid_policy_value():
    with pytest.raises(ImproperlyConfigured):
        get_substitution_policy({"ON_HANDLER_NOT_FOUND": "loud"})


def test_strict_policy():
    assert get_substitution_policy(strict=True) == SubstitutionPolicy.strict()


def test_pandoc_config_enables_fenced_divs():
    assert "fenced_divs" in get_pandoc_config()["extra_args"][0]
