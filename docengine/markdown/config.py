import copy
import logging

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.template import TemplateSyntaxError

from .shortcodes import ErrorPolicy, ShortcodeRegistry, SubstitutionPolicy
from .shortcodes.handlers import BUILTIN_SHORTCODES, TemplateShortcode, register_builtins

logger = logging.getLogger(__name__)

DEFAULT_SHORTCODE_CONFIG = {
    "BUILTINS": list(BUILTIN_SHORTCODES),
    "TEMPLATES": {},
    "ON_MALFORMED_ARGUMENTS": ErrorPolicy.SOFT.value,
    "ON_HANDLER_NOT_FOUND": ErrorPolicy.SOFT.value,
    "ON_HANDLER_FAILURE": ErrorPolicy.HARD.value,
}


def get_shortcode_config():
    """
    Shortcode configuration from the SHORTCODES setting.

    Keys missing from the setting fall back to DEFAULT_SHORTCODE_CONFIG. When
    Django settings are not configured at all (the engine used as a plain
    library) the defaults are returned unchanged.
    """
    config = copy.deepcopy(DEFAULT_SHORTCODE_CONFIG)
    if settings.configured:
        config.update(getattr(settings, "SHORTCODES", {}) or {})
    return config


def _policy(config, key):
    value = config.get(key, DEFAULT_SHORTCODE_CONFIG[key])
    try:
        return ErrorPolicy(value)
    except ValueError:
        raise ImproperlyConfigured(
            f"SHORTCODES[{key!r}] must be 'soft' or 'hard', got {value!r}"
        ) from None


def get_substitution_policy(config=None, strict=False):
    """Build the SubstitutionPolicy for a build; strict makes every kind hard."""
    if strict:
        return SubstitutionPolicy.strict()
    config = config if config is not None else get_shortcode_config()
    return SubstitutionPolicy(
        malformed_arguments=_policy(config, "ON_MALFORMED_ARGUMENTS"),
        handler_not_found=_policy(config, "ON_HANDLER_NOT_FOUND"),
        handler_failure=_policy(config, "ON_HANDLER_FAILURE"),
    )


def build_registry(config=None):
    """
    Build a fresh ShortcodeRegistry from configuration.

    Args:
        config: Dict shaped like DEFAULT_SHORTCODE_CONFIG (default: settings)

    Returns:
        ShortcodeRegistry with the enabled built-ins and template shortcodes

    Raises:
        ImproperlyConfigured: unknown built-in group, broken template, or a
            name that is registered twice
    """
    config = config if config is not None else get_shortcode_config()
    registry = ShortcodeRegistry()

    builtins = config.get("BUILTINS", [])
    unknown = [group for group in builtins if group not in BUILTIN_SHORTCODES]
    if unknown:
        raise ImproperlyConfigured(f"Unknown built-in shortcodes: {', '.join(unknown)}")
    register_builtins(registry, builtins)

    for name, options in (config.get("TEMPLATES") or {}).items():
        if isinstance(options, str):
            options = {"template": options}
        try:
            handler = TemplateShortcode(options["template"])
            registry.register(name, handler, block=options.get("block", False))
        except KeyError:
            raise ImproperlyConfigured(f"Template shortcode '{name}' has no 'template'") from None
        except TemplateSyntaxError as e:
            raise ImproperlyConfigured(f"Template shortcode '{name}' is invalid: {e}") from e
        except Exception as e:
            raise ImproperlyConfigured(f"Cannot register shortcode '{name}': {e}") from e

    logger.debug(f"Built shortcode registry with {len(registry)} handler(s): {registry.names()}")
    return registry


def get_pandoc_config():
    """
    Configuration for pypandoc/Pandoc markdown rendering.

    Shortcode handlers emit Pandoc fenced divs (admonitions, columns) and raw
    HTML (figures), so both extensions must stay enabled.
    """
    return {
        "extra_args": [
            "--from=markdown+fenced_divs+raw_html+fenced_code_blocks+fenced_code_attributes+pipe_tables+footnotes+smart+tex_math_dollars",
            "--mathjax",
        ],
        "filters": [],
    }
