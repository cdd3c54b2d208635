# docengine/markdown/shortcodes/engine.py
"""
Substitution engine: the single entry point that turns a document with
shortcode markers into the final markdown.

    result = process(text, registry, document_id="guide/intro.md")
    result.text          # substituted document
    result.diagnostics   # every warning found on the way

Handler output is inserted as final text and never scanned again, so a
handler that emits shortcode syntax cannot cause recursion. Block bodies are
substituted before their handler runs, from the segments the scanner already
produced for them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .arguments import parse_arguments
from .diagnostics import (
    ArgumentError,
    Diagnostic,
    DiagnosticKind,
    ErrorPolicy,
    LineIndex,
    ShortcodeNotFound,
    ShortcodeProcessingError,
    SubstitutionPolicy,
)
from .registry import Invocation, ShortcodeRegistry
from .scanner import Literal, Scanner, Segment, Shortcode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessResult:
    text: str
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == "warning"]


class _Pass:
    """State owned by one process() call."""

    def __init__(
        self,
        registry: ShortcodeRegistry,
        policy: SubstitutionPolicy,
        document_id: Optional[str],
        line_index: LineIndex,
    ):
        self.registry = registry
        self.policy = policy
        self.document_id = document_id
        self.line_index = line_index
        self.diagnostics: List[Diagnostic] = []
        self.states: Dict[str, Dict[str, Any]] = {}
        self.failed = False

    def render(self, segments: Sequence[Segment]) -> str:
        parts = []
        for segment in segments:
            if isinstance(segment, Literal):
                parts.append(segment.text)
            else:
                parts.append(self.render_shortcode(segment))
        return "".join(parts)

    def render_shortcode(self, shortcode: Shortcode) -> str:
        body = self.render(shortcode.children) if shortcode.is_block else None

        if not shortcode.name:
            return self.fail(
                shortcode,
                body,
                DiagnosticKind.MALFORMED_ARGUMENTS,
                "missing or invalid shortcode name",
                shortcode.start,
            )

        try:
            entry = self.registry.resolve(shortcode.name)
        except ShortcodeNotFound as exc:
            return self.fail(
                shortcode, body, DiagnosticKind.HANDLER_NOT_FOUND, str(exc), shortcode.start
            )

        try:
            arguments = parse_arguments(shortcode.arguments)
        except ArgumentError as exc:
            return self.fail(
                shortcode,
                body,
                DiagnosticKind.MALFORMED_ARGUMENTS,
                f"'{shortcode.name}': {exc.message}",
                shortcode.arguments_start + exc.offset,
            )

        invocation = Invocation(
            name=shortcode.name,
            args=arguments.positional,
            kwargs=arguments.named,
            body=body,
            line=shortcode.line,
            column=shortcode.column,
            document_id=self.document_id,
            state=self.states.setdefault(shortcode.name, {}),
        )

        try:
            output = entry.render(invocation)
        except Exception as exc:
            logger.debug(
                "Handler for '%s' raised at %s:%s",
                shortcode.name,
                self.document_id,
                shortcode.line,
                exc_info=True,
            )
            return self.fail(
                shortcode,
                body,
                DiagnosticKind.HANDLER_EXECUTION_FAILURE,
                f"handler for '{shortcode.name}' failed: {exc}",
                shortcode.start,
            )

        if not isinstance(output, str):
            return self.fail(
                shortcode,
                body,
                DiagnosticKind.HANDLER_EXECUTION_FAILURE,
                f"handler for '{shortcode.name}' returned "
                f"{type(output).__name__}, expected str",
                shortcode.start,
            )
        return output

    def fail(
        self,
        shortcode: Shortcode,
        body: Optional[str],
        kind: DiagnosticKind,
        message: str,
        offset: int,
    ) -> str:
        hard = self.policy.for_kind(kind) is ErrorPolicy.HARD
        line, column = self.line_index.locate(offset)
        self.diagnostics.append(
            Diagnostic(
                kind,
                message,
                self.document_id,
                line,
                column,
                severity="error" if hard else "warning",
            )
        )
        if hard:
            self.failed = True

        # Fail-soft: keep the markers exactly as written.
        return shortcode.opening + (body or "") + (shortcode.closing or "")


def process(
    text: str,
    registry: ShortcodeRegistry,
    document_id: Optional[str] = None,
    policy: Optional[SubstitutionPolicy] = None,
) -> ProcessResult:
    """
    Substitute every shortcode in a document.

    Args:
        text: Raw markdown of one document
        registry: Handlers for this build; frozen by this call
        document_id: Path or title used in diagnostics
        policy: Error policy (default: SubstitutionPolicy())

    Returns:
        ProcessResult with the output text and all diagnostics, ordered by
        position

    Raises:
        ShortcodeProcessingError: a diagnostic under a hard policy was found;
            it carries every diagnostic of the document
    """
    policy = policy or SubstitutionPolicy()
    registry.freeze()

    line_index = LineIndex(text)
    scanner = Scanner(
        text, registry.block_names(), document_id=document_id, line_index=line_index
    )
    segments = list(scanner)

    substitution = _Pass(registry, policy, document_id, line_index)
    output = substitution.render(segments)

    diagnostics = sorted(
        scanner.diagnostics + substitution.diagnostics,
        key=lambda d: (d.line, d.column),
    )
    logger.debug(
        "Processed %s: %d segment(s), %d diagnostic(s)",
        document_id or "<document>",
        len(segments),
        len(diagnostics),
    )

    if substitution.failed:
        raise ShortcodeProcessingError(document_id, diagnostics)
    return ProcessResult(output, diagnostics)


class ShortcodeProcessor:
    """A registry and policy bundled for hosts that process many documents."""

    def __init__(self, registry: ShortcodeRegistry, policy: Optional[SubstitutionPolicy] = None):
        self.registry = registry.freeze()
        self.policy = policy or SubstitutionPolicy()

    def process(self, text: str, document_id: Optional[str] = None) -> ProcessResult:
        return process(text, self.registry, document_id=document_id, policy=self.policy)
