import django
import pytest
from django.conf import settings

from docengine.markdown.shortcodes import ShortcodeRegistry


def pytest_configure():
    if not settings.configured:
        settings.configure(
            INSTALLED_APPS=["docengine"],
            USE_TZ=True,
        )
        django.setup()


@pytest.fixture
def registry():
    """Registry with a block `note` and an inline `upper` shortcode."""
    registry = ShortcodeRegistry()
    registry.register("note", lambda inv: "> NOTE: " + inv.body, block=True)
    registry.register("upper", lambda inv: " ".join(inv.args).upper())
    return registry
