# docengine/markdown/shortcodes/__init__.py
"""
Shortcode scanning and substitution.

    from docengine.markdown.shortcodes import ShortcodeRegistry, process

    registry = ShortcodeRegistry()
    registry.register("note", lambda inv: "> NOTE: " + inv.body, block=True)
    process("x {{% note %}}hello{{% /note %}} y", registry).text
    # 'x > NOTE: hello y'
"""

from .arguments import Arguments, parse_arguments
from .diagnostics import (
    ArgumentError,
    BookProcessingError,
    Diagnostic,
    DiagnosticKind,
    DuplicateShortcodeError,
    ErrorPolicy,
    RegistryFrozenError,
    ShortcodeError,
    ShortcodeHandlerError,
    ShortcodeNotFound,
    ShortcodeProcessingError,
    SubstitutionPolicy,
)
from .engine import ProcessResult, ShortcodeProcessor, process
from .registry import Invocation, RegisteredShortcode, ShortcodeRegistry
from .scanner import Literal, Scanner, Shortcode, scan

__all__ = [
    "ArgumentError",
    "Arguments",
    "BookProcessingError",
    "Diagnostic",
    "DiagnosticKind",
    "DuplicateShortcodeError",
    "ErrorPolicy",
    "Invocation",
    "Literal",
    "ProcessResult",
    "RegisteredShortcode",
    "RegistryFrozenError",
    "Scanner",
    "Shortcode",
    "ShortcodeError",
    "ShortcodeHandlerError",
    "ShortcodeNotFound",
    "ShortcodeProcessingError",
    "ShortcodeProcessor",
    "ShortcodeRegistry",
    "SubstitutionPolicy",
    "parse_arguments",
    "process",
    "scan",
]
