import pytest

from docengine.markdown.shortcodes import (
    DuplicateShortcodeError,
    Invocation,
    RegistryFrozenError,
    ShortcodeNotFound,
    ShortcodeRegistry,
)


def make_invocation(name="x", *args, body=None, **kwargs):
    return Invocation(name=name, args=args, kwargs=kwargs, body=body, state={})


def test_register_and_resolve():
    registry = ShortcodeRegistry()
    entry = registry.register("badge", lambda inv: "B")

    assert registry.resolve("badge") is entry
    assert "badge" in registry
    assert len(registry) == 1
    assert entry.render(make_invocation("badge")) == "B"


def test_duplicate_name_is_rejected():
    registry = ShortcodeRegistry()
    registry.register("badge", lambda inv: "")
    with pytest.raises(DuplicateShortcodeError):
        registry.register("badge", lambda inv: "")


def test_missing_name_raises_not_found():
    registry = ShortcodeRegistry()
    with pytest.raises(ShortcodeNotFound) as excinfo:
        registry.resolve("nope")
    assert isinstance(excinfo.value, KeyError)
    assert "nope" in str(excinfo.value)


def test_lookup_is_case_sensitive():
    registry = ShortcodeRegistry()
    registry.register("Note", lambda inv: "")
    with pytest.raises(ShortcodeNotFound):
        registry.resolve("note")


@pytest.mark.parametrize("name", ["", "1abc", "has space", "/close", None])
def test_invalid_names(name):
    with pytest.raises(ValueError):
        ShortcodeRegistry().register(name, lambda inv: "")


def test_handler_must_be_callable():
    with pytest.raises(TypeError):
        ShortcodeRegistry().register("x", "not a handler")


def test_decorator_registration():
    registry = ShortcodeRegistry()

    @registry.shortcode("shout", block=True)
    def shout(invocation):
        return invocation.body.upper()

    assert shout(make_invocation(body="hi")) == "HI"
    assert registry.block_names() == frozenset({"shout"})


def test_object_with_render_method():
    class Greeting:
        def render(self, invocation):
            return f"hello {invocation.args[0]}"

    registry = ShortcodeRegistry()
    entry = registry.register("greet", Greeting())
    assert entry.render(make_invocation("greet", "world")) == "hello world"


def test_frozen_registry_is_read_only():
    registry = ShortcodeRegistry()
    registry.register("a", lambda inv: "")
    registry.freeze()

    assert registry.frozen
    with pytest.raises(RegistryFrozenError):
        registry.register("b", lambda inv: "")
    assert registry.resolve("a").name == "a"


def test_names_are_sorted():
    registry = ShortcodeRegistry()
    for name in ("zeta", "alpha", "mid"):
        registry.register(name, lambda inv: "")
    assert registry.names() == ["alpha", "mid", "zeta"]
    assert set(registry.as_mapping()) == {"alpha", "mid", "zeta"}


def test_invocation_get_prefers_named_then_positional():
    invocation = make_invocation("fig", "a.png", "Caption", caption="Named")
    assert invocation.get("caption", 1) == "Named"
    assert invocation.get("src", 0) == "a.png"
    assert invocation.get("missing", 5, "default") == "default"
