"""
Placeholder tokenizer.

Finds non-greedy {{...}} spans in a string. Placeholders do not nest: when
an opening {{ appears before the closing }}, scanning restarts at the
innermost opening brace pair. An unterminated {{ is left as literal text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List


OPEN = "{{"
CLOSE = "}}"


@dataclass(frozen=True)
class Placeholder:
    """A single {{...}} span."""
    start: int
    end: int
    expression: str

    @property
    def length(self) -> int:
        return self.end - self.start


def scan_placeholders(text: str) -> List[Placeholder]:
    """
    Scan text for placeholders.

    Args:
        text: Template text

    Returns:
        Placeholders in order of appearance. ``expression`` is the
        whitespace-stripped inner text; ``end`` is exclusive.
    """
    placeholders: List[Placeholder] = []
    pos = 0

    while True:
        start = text.find(OPEN, pos)
        if start == -1:
            break

        close = text.find(CLOSE, start + len(OPEN))
        if close == -1:
            break

        inner_start = start + len(OPEN)
        nested = text.rfind(OPEN, inner_start, close)
        if nested != -1:
            start = nested
            inner_start = nested + len(OPEN)

        expression = text[inner_start:close].strip()
        end = close + len(CLOSE)

        # Empty braces and single closing braces stay literal
        if expression and "}" not in expression:
            placeholders.append(Placeholder(start=start, end=end, expression=expression))

        pos = end

    return placeholders


__all__ = ["OPEN", "CLOSE", "Placeholder", "scan_placeholders"]
