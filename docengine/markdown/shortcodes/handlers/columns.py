# docengine/markdown/shortcodes/handlers/columns.py
"""
Multi-column layout shortcode.

Input:
    {{< columns >}}
    Left column

    <--->

    Right column
    {{< /columns >}}

Output:
    :::: {.columns}
    ::: {.column}
    Left column
    :::
    ::: {.column}
    Right column
    :::
    ::::

Separator lines inside fenced code blocks do not split the body.
"""

from typing import List

from ..scanner import fenced_blocks
from .utils import fenced_div, strip_body

COLUMN_SEPARATOR = "<--->"


def split_columns(body: str) -> List[str]:
    """Split a body on separator lines that sit outside code fences."""
    fences = list(fenced_blocks(body))
    parts = []
    start = 0
    line = 0
    fence_index = 0

    while line < len(body):
        newline = body.find("\n", line)
        next_line = len(body) if newline == -1 else newline + 1

        while fence_index < len(fences) and fences[fence_index][1] <= line:
            fence_index += 1
        in_fence = fence_index < len(fences) and fences[fence_index][0] <= line

        if not in_fence and body[line:next_line].strip() == COLUMN_SEPARATOR:
            parts.append(body[start:line])
            start = next_line
        line = next_line

    parts.append(body[start:])
    return parts


def columns(invocation) -> str:
    parts = [strip_body(part) for part in split_columns(invocation.body or "")]
    inner = "\n".join(fenced_div(["column"], part) for part in parts)
    return fenced_div(["columns"], inner)
