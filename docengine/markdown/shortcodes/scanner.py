# docengine/markdown/shortcodes/scanner.py
"""
Context-aware scanner that splits markdown text into segments.

A segment is either a Literal span or a Shortcode invocation. Shortcode
markers look like

    {{% name arg key=value %}}          inline shortcode
    {{% name %}}body{{% /name %}}       block shortcode
    {{< columns >}}...{{< /columns >}}  same, with the angle-bracket delimiters

Markers are only recognized in normal text. Fenced code blocks (``` or ~~~)
and inline code spans are copied through untouched, so documentation that
shows shortcode syntax inside code keeps working. A backslash in front of an
opening delimiter escapes it; the backslash is dropped from the output.

The scanner is a hand-written state machine rather than a set of regular
expressions so that scanning stays linear in the length of the text.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Iterator, List, Optional, Tuple, Union

from .arguments import QUOTES
from .diagnostics import Diagnostic, DiagnosticKind, LineIndex

logger = logging.getLogger(__name__)

DELIMITERS = (("{{%", "%}}"), ("{{<", ">}}"))
ESCAPE = "\\"
NAME_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_.:-]*")
FENCE_CHARS = "`~"


@dataclass(frozen=True)
class Literal:
    """Literal text; `text` is what gets emitted for source[start:end]."""

    text: str
    start: int
    end: int


@dataclass(frozen=True)
class Shortcode:
    name: str
    arguments: str
    start: int
    end: int
    arguments_start: int
    line: int
    column: int
    opening: str
    closing: Optional[str] = None
    body: Optional[str] = None
    body_start: Optional[int] = None
    children: Tuple["Segment", ...] = ()

    @property
    def is_block(self) -> bool:
        return self.closing is not None


Segment = Union[Literal, Shortcode]


@dataclass(frozen=True)
class _Marker:
    start: int
    end: int
    name: str
    closing: bool
    arguments_start: int
    arguments_end: int
    delimiter: Tuple[str, str]


@dataclass
class _Frame:
    marker: Optional[_Marker]
    segments: List[Segment] = field(default_factory=list)
    pending: Optional[list] = None

    def add_literal(self, text: str, start: int, end: int) -> None:
        if self.pending is not None and self.pending[1] == start:
            self.pending[1] = end
            self.pending[2].append(text)
        else:
            self.flush()
            self.pending = [start, end, [text]]

    def add_segment(self, segment: Segment) -> None:
        if isinstance(segment, Literal):
            self.add_literal(segment.text, segment.start, segment.end)
        else:
            self.flush()
            self.segments.append(segment)

    def flush(self) -> None:
        if self.pending is not None:
            start, end, parts = self.pending
            self.segments.append(Literal("".join(parts), start, end))
            self.pending = None


# --------------------------------------------------------------------------
# Fenced code blocks
# --------------------------------------------------------------------------


def _line_bounds(text: str, pos: int, end: int) -> Tuple[int, int]:
    """Return (end of line content, start of next line) for the line at pos."""
    nl = text.find("\n", pos, end)
    if nl == -1:
        return end, end
    return nl, nl + 1


def fence_opening(text: str, pos: int, end: Optional[int] = None):
    """
    Check whether the line starting at pos opens a fenced code block.

    Returns:
        (fence character, run length) or None
    """
    end = len(text) if end is None else end
    i = pos
    while i < end and text[i] in " \t":
        i += 1
    if i >= end or text[i] not in FENCE_CHARS:
        return None
    char = text[i]
    j = i
    while j < end and text[j] == char:
        j += 1
    if j - i < 3:
        return None
    line_end, _ = _line_bounds(text, j, end)
    # A backtick fence's info string may not contain backticks.
    if char == "`" and text.find("`", j, line_end) != -1:
        return None
    return char, j - i


def fence_end(text: str, pos: int, char: str, run: int, end: Optional[int] = None) -> int:
    """Offset just past the fenced block whose opening line starts at pos."""
    end = len(text) if end is None else end
    _, line = _line_bounds(text, pos, end)
    while line < end:
        line_end, next_line = _line_bounds(text, line, end)
        i = line
        while i < line_end and text[i] in " \t":
            i += 1
        j = i
        while j < line_end and text[j] == char:
            j += 1
        if j - i >= run and not text[j:line_end].strip():
            return next_line
        line = next_line
    return end


def fenced_blocks(text: str) -> Iterator[Tuple[int, int]]:
    """Yield (start, end) offsets of every fenced code block in text."""
    pos = 0
    end = len(text)
    while pos < end:
        fence = fence_opening(text, pos, end)
        if fence:
            block_end = fence_end(text, pos, fence[0], fence[1], end)
            yield pos, block_end
            pos = block_end
        else:
            pos = _line_bounds(text, pos, end)[1]


# --------------------------------------------------------------------------
# Scanner
# --------------------------------------------------------------------------


class Scanner:
    """
    Lazy, restartable segment sequence over text[start:end].

    Iterating yields top-level segments in document order. Block shortcodes
    carry their inner segments in `children`. Diagnostics found during the
    most recent iteration are in `diagnostics`.

    Args:
        text: Whole document text
        block_names: Names that take a body and need a closing marker
        document_id: Identifier used in diagnostics
        start, end: Window of text to scan (default: all of it)
    """

    def __init__(
        self,
        text: str,
        block_names: Iterable[str] = (),
        document_id: Optional[str] = None,
        start: int = 0,
        end: Optional[int] = None,
        line_index: Optional[LineIndex] = None,
    ):
        self.text = text
        self.block_names: FrozenSet[str] = frozenset(block_names)
        self.document_id = document_id
        self.start = start
        self.end = len(text) if end is None else end
        self.line_index = line_index or LineIndex(text)
        self.diagnostics: List[Diagnostic] = []

    def __iter__(self) -> Iterator[Segment]:
        self.diagnostics = []
        self._span_misses = {}
        self._unclosed_from = {}

        root = _Frame(None)
        stack = [root]

        for event in self._events():
            if isinstance(event, Literal):
                stack[-1].add_segment(event)
            elif event.closing:
                self._close_block(stack, event)
            elif event.name and event.name in self.block_names:
                stack.append(_Frame(event))
            else:
                stack[-1].add_segment(self._shortcode(event))

            if len(stack) == 1 and root.segments:
                yield from root.segments
                root.segments = []

        while len(stack) > 1:
            self._abandon(stack)
        root.flush()
        yield from root.segments

    def segments(self) -> List[Segment]:
        return list(self)

    # -- diagnostics -------------------------------------------------------

    def _report(self, kind: DiagnosticKind, message: str, offset: int) -> None:
        line, column = self.line_index.locate(offset)
        diagnostic = Diagnostic(kind, message, self.document_id, line, column)
        logger.debug("scanner: %s", diagnostic)
        self.diagnostics.append(diagnostic)

    # -- frames ------------------------------------------------------------

    def _shortcode(self, marker: _Marker, **block) -> Shortcode:
        line, column = self.line_index.locate(marker.start)
        end = block.pop("end", marker.end)
        return Shortcode(
            name=marker.name,
            arguments=self.text[marker.arguments_start:marker.arguments_end],
            start=marker.start,
            end=end,
            arguments_start=marker.arguments_start,
            line=line,
            column=column,
            opening=self.text[marker.start:marker.end],
            **block,
        )

    def _abandon(self, stack: List[_Frame]) -> None:
        """Pop an unterminated frame, turning its opening marker into text."""
        frame = stack.pop()
        marker = frame.marker
        self._report(
            DiagnosticKind.UNTERMINATED_SHORTCODE,
            f"'{marker.name}' has no closing marker "
            f"{marker.delimiter[0]} /{marker.name} {marker.delimiter[1]}",
            marker.start,
        )
        frame.flush()
        parent = stack[-1]
        parent.add_literal(self.text[marker.start:marker.end], marker.start, marker.end)
        for segment in frame.segments:
            parent.add_segment(segment)

    def _close_block(self, stack: List[_Frame], closer: _Marker) -> None:
        depth = None
        for index in range(len(stack) - 1, 0, -1):
            opener = stack[index].marker
            if opener.name == closer.name and opener.delimiter == closer.delimiter:
                depth = index
                break

        if depth is None:
            self._report(
                DiagnosticKind.UNMATCHED_CLOSING_MARKER,
                f"closing marker for '{closer.name}' without an opening marker",
                closer.start,
            )
            stack[-1].add_literal(
                self.text[closer.start:closer.end], closer.start, closer.end
            )
            return

        while len(stack) - 1 > depth:
            self._abandon(stack)

        frame = stack.pop()
        frame.flush()
        opener = frame.marker
        stack[-1].add_segment(
            self._shortcode(
                opener,
                end=closer.end,
                closing=self.text[closer.start:closer.end],
                body=self.text[opener.end:closer.start],
                body_start=opener.end,
                children=tuple(frame.segments),
            )
        )

    # -- lexing ------------------------------------------------------------

    def _events(self) -> Iterator[Union[Literal, _Marker]]:
        text = self.text
        end = self.end
        pos = self.start
        chunk = pos

        while pos < end:
            if pos == 0 or text[pos - 1] == "\n":
                fence = fence_opening(text, pos, end)
                if fence:
                    pos = fence_end(text, pos, fence[0], fence[1], end)
                    continue

            char = text[pos]

            if char == ESCAPE:
                delimiter = self._delimiter_at(pos + 1)
                if delimiter:
                    if chunk < pos:
                        yield Literal(text[chunk:pos], chunk, pos)
                    chunk = pos + 1 + len(delimiter[0])
                    yield Literal(delimiter[0], pos, chunk)
                    pos = chunk
                else:
                    pos = min(pos + 2, end)
                continue

            if char == "`":
                run = 1
                while pos + run < end and text[pos + run] == "`":
                    run += 1
                span_end = self._code_span_end(pos + run, run)
                pos = span_end if span_end is not None else pos + run
                continue

            if char == "{":
                delimiter = self._delimiter_at(pos)
                if delimiter:
                    marker = self._marker(pos, delimiter)
                    if marker is None:
                        self._report(
                            DiagnosticKind.UNTERMINATED_SHORTCODE,
                            f"'{delimiter[0]}' is never closed by '{delimiter[1]}'",
                            pos,
                        )
                        pos += len(delimiter[0])
                        continue
                    if chunk < pos:
                        yield Literal(text[chunk:pos], chunk, pos)
                    yield marker
                    pos = chunk = marker.end
                    continue

            pos += 1

        if chunk < end:
            yield Literal(text[chunk:end], chunk, end)

    def _delimiter_at(self, pos: int):
        for delimiter in DELIMITERS:
            if self.text.startswith(delimiter[0], pos, self.end):
                return delimiter
        return None

    def _code_span_end(self, pos: int, run: int) -> Optional[int]:
        """Find the end of a code span opened by `run` backticks, or None."""
        miss = self._span_misses.get(run)
        if miss is not None and pos < miss:
            return None

        text = self.text
        end = self.end
        i = pos
        while i < end:
            char = text[i]
            if char == "`":
                j = i
                while j < end and text[j] == "`":
                    j += 1
                if j - i == run:
                    return j
                i = j
                continue
            if char == "\n":
                # Code spans do not continue past a blank line or into a fence.
                j = i + 1
                while j < end and text[j] in " \t":
                    j += 1
                if (j < end and text[j] == "\n") or fence_opening(text, i + 1, end):
                    self._span_misses[run] = i
                    return None
            i += 1
        self._span_misses[run] = end
        return None

    def _find_closing(self, pos: int, closing: str) -> Optional[int]:
        unclosed = self._unclosed_from.get(closing)
        if unclosed is not None and pos >= unclosed:
            return None

        found = self._find_closing_quoted(pos, closing)
        if found is not None:
            return found

        # Unbalanced quotes: the argument parser reports them.
        found = self.text.find(closing, pos, self.end)
        if found == -1:
            self._unclosed_from[closing] = pos
            return None
        if self._crosses_fence(pos, found):
            return None
        return found

    def _find_closing_quoted(self, pos: int, closing: str) -> Optional[int]:
        """
        Quote-aware search for the closing delimiter.

        Gives up (returns None) on unbalanced quotes, and when the span would
        run into another opening delimiter or into a fenced code block.
        """
        text = self.text
        end = self.end
        i = pos
        boundary = True
        quote = None
        while i < end:
            char = text[i]
            if quote is None:
                if text.startswith(closing, i, end):
                    return i
                if self._delimiter_at(i):
                    return None
            if char == ESCAPE:
                i += 2
                boundary = False
                continue
            if char == "\n" and fence_opening(text, i + 1, end):
                return None
            if quote is not None:
                if char == quote:
                    quote = None
                i += 1
                continue
            # Only quotes that open a value protect delimiters; an apostrophe
            # inside a word does not.
            if char in QUOTES and boundary:
                quote = char
                boundary = False
                i += 1
                continue
            boundary = char.isspace() or char == "="
            i += 1
        return None

    def _crosses_fence(self, start: int, stop: int) -> bool:
        """Whether a line inside text[start:stop] opens a fenced code block."""
        nl = self.text.find("\n", start, stop)
        while nl != -1:
            if fence_opening(self.text, nl + 1, self.end):
                return True
            nl = self.text.find("\n", nl + 1, stop)
        return False

    def _marker(self, pos: int, delimiter: Tuple[str, str]) -> Optional[_Marker]:
        text = self.text
        inner = pos + len(delimiter[0])
        close = self._find_closing(inner, delimiter[1])
        if close is None:
            return None

        i = inner
        while i < close and text[i].isspace():
            i += 1
        closing = i < close and text[i] == "/"
        if closing:
            i += 1
            while i < close and text[i].isspace():
                i += 1

        match = NAME_PATTERN.match(text, i, close)
        if match:
            name = match.group()
            arguments_start = match.end()
        else:
            name, closing, arguments_start = "", False, inner

        return _Marker(
            start=pos,
            end=close + len(delimiter[1]),
            name=name,
            closing=closing,
            arguments_start=arguments_start,
            arguments_end=close,
            delimiter=delimiter,
        )


def scan(text: str, block_names: Iterable[str] = (), document_id: Optional[str] = None) -> List[Segment]:
    """Scan text eagerly and return its top-level segments."""
    return Scanner(text, block_names, document_id).segments()
