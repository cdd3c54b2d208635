# docengine/markdown/shortcodes/arguments.py
"""
Argument parser for the text inside a shortcode marker.

    {{% figure "img/a b.png" caption='A "quoted" caption' width=400 %}}

parses to positional ["img/a b.png"] and named
{"caption": 'A "quoted" caption', "width": "400"}.

Tokens are separated by whitespace. Quoted and unquoted parts of one token
join together, so key="a b" is the named argument key -> "a b". The first
unquoted "=" of a token makes it a named argument. Inside quotes a backslash
escapes the quote character or another backslash; elsewhere it is kept.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Tuple

from .diagnostics import ArgumentError

QUOTES = "\"'"


@dataclass(frozen=True)
class Arguments:
    positional: Tuple[str, ...] = ()
    named: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def __bool__(self) -> bool:
        return bool(self.positional or self.named)


def _read_quoted(raw: str, pos: int):
    """Read a quoted run starting at the quote at raw[pos]; return (value, end)."""
    quote = raw[pos]
    chars = []
    i = pos + 1
    n = len(raw)
    while i < n:
        ch = raw[i]
        if ch == "\\" and i + 1 < n and raw[i + 1] in (quote, "\\"):
            chars.append(raw[i + 1])
            i += 2
            continue
        if ch == quote:
            return "".join(chars), i + 1
        chars.append(ch)
        i += 1
    raise ArgumentError(f"unmatched {quote} quote", pos)


def parse_arguments(raw: str) -> Arguments:
    """
    Parse a raw argument span into positional and named values.

    Args:
        raw: Text between the shortcode name and the closing delimiter

    Returns:
        Arguments with positional values in source order and a read-only
        mapping of named values

    Raises:
        ArgumentError: unmatched quote, empty or quoted key, duplicate key
    """
    positional = []
    named = {}
    i = 0
    n = len(raw)

    while i < n:
        if raw[i].isspace():
            i += 1
            continue

        token_start = i
        parts = []
        key = None
        key_offset = token_start
        key_quoted = False
        while i < n and not raw[i].isspace():
            ch = raw[i]
            if ch in QUOTES:
                value, i = _read_quoted(raw, i)
                parts.append(value)
                if key is None:
                    key_quoted = True
                continue
            if ch == "=" and key is None:
                key = "".join(parts)
                if not key:
                    raise ArgumentError("named argument without a key", i)
                if key_quoted:
                    raise ArgumentError("named argument key must not be quoted", key_offset)
                parts = []
                i += 1
                continue
            parts.append(ch)
            i += 1

        value = "".join(parts)
        if key is None:
            positional.append(value)
        elif key in named:
            raise ArgumentError(f"duplicate argument '{key}'", key_offset)
        else:
            named[key] = value

    return Arguments(tuple(positional), MappingProxyType(named))
