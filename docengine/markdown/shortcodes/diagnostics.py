# docengine/markdown/shortcodes/diagnostics.py
"""
Diagnostics, error policy and exceptions for shortcode substitution.

Every problem found while substituting a document is recorded as a
Diagnostic. Whether a diagnostic aborts the document depends on the
SubstitutionPolicy: fail-soft kinds keep the original marker text, hard
kinds make process() raise ShortcodeProcessingError once the whole document
has been scanned.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class DiagnosticKind(str, Enum):
    UNTERMINATED_SHORTCODE = "UnterminatedShortcode"
    UNMATCHED_CLOSING_MARKER = "UnmatchedClosingMarker"
    MALFORMED_ARGUMENTS = "MalformedArguments"
    HANDLER_NOT_FOUND = "HandlerNotFound"
    HANDLER_EXECUTION_FAILURE = "HandlerExecutionFailure"


class ErrorPolicy(str, Enum):
    SOFT = "soft"
    HARD = "hard"


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    message: str
    document_id: Optional[str]
    line: int
    column: int
    severity: str = "warning"

    def as_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "document_id": self.document_id,
            "line": self.line,
            "column": self.column,
            "severity": self.severity,
        }

    def __str__(self) -> str:
        where = self.document_id or "<document>"
        return f"{where}:{self.line}:{self.column}: {self.kind.value}: {self.message}"


@dataclass(frozen=True)
class SubstitutionPolicy:
    """
    Per-kind error policy for one build.

    Unterminated and unmatched markers are always fail-soft and therefore
    have no setting here.
    """

    malformed_arguments: ErrorPolicy = ErrorPolicy.SOFT
    handler_not_found: ErrorPolicy = ErrorPolicy.SOFT
    handler_failure: ErrorPolicy = ErrorPolicy.HARD

    @classmethod
    def strict(cls) -> "SubstitutionPolicy":
        return cls(ErrorPolicy.HARD, ErrorPolicy.HARD, ErrorPolicy.HARD)

    def for_kind(self, kind: DiagnosticKind) -> ErrorPolicy:
        if kind is DiagnosticKind.MALFORMED_ARGUMENTS:
            return self.malformed_arguments
        if kind is DiagnosticKind.HANDLER_NOT_FOUND:
            return self.handler_not_found
        if kind is DiagnosticKind.HANDLER_EXECUTION_FAILURE:
            return self.handler_failure
        return ErrorPolicy.SOFT


class LineIndex:
    """Maps string offsets to 1-based (line, column) pairs."""

    def __init__(self, text: str):
        self._starts = [0]
        pos = text.find("\n")
        while pos != -1:
            self._starts.append(pos + 1)
            pos = text.find("\n", pos + 1)

    def locate(self, offset: int):
        line = bisect_right(self._starts, offset)
        return line, offset - self._starts[line - 1] + 1


# --------------------------------------------------------------------------
# Exceptions
# --------------------------------------------------------------------------


class ShortcodeError(Exception):
    """Base class for every error raised by the shortcode package."""


class ArgumentError(ShortcodeError):
    """Raised by the argument parser; offset is relative to the raw text."""

    def __init__(self, message: str, offset: int):
        super().__init__(f"{message} (at offset {offset})")
        self.message = message
        self.offset = offset


class DuplicateShortcodeError(ShortcodeError):
    pass


class RegistryFrozenError(ShortcodeError):
    pass


class ShortcodeNotFound(ShortcodeError, KeyError):
    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"no handler registered for shortcode '{self.name}'"


class ShortcodeHandlerError(ShortcodeError):
    """Raised by handlers when an argument value is invalid for them."""


class ShortcodeProcessingError(ShortcodeError):
    """A document hit a hard-failure diagnostic; no output was produced."""

    def __init__(self, document_id: Optional[str], diagnostics: List[Diagnostic]):
        self.document_id = document_id
        self.diagnostics = list(diagnostics)
        errors = [d for d in self.diagnostics if d.severity == "error"]
        first = errors[0] if errors else None
        summary = str(first) if first else "shortcode substitution failed"
        super().__init__(
            f"{summary} ({len(errors)} error(s), {len(self.diagnostics)} diagnostic(s))"
        )


class BookProcessingError(ShortcodeError):
    """One or more chapters of a book failed substitution."""

    def __init__(self, failures: List[ShortcodeProcessingError]):
        self.failures = list(failures)
        names = ", ".join(str(f.document_id) for f in self.failures)
        super().__init__(f"shortcode substitution failed for: {names}")
