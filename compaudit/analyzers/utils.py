"""Shared helper utilities for analyzer implementations."""

from __future__ import annotations

import re
from typing import Iterator, List, Pattern, Tuple

from ..scoring import round_half_up

_COMMENT_PREFIXES = ("//", "/*", "*")


def clamp_score(value: float) -> int:
    return int(max(0, min(100, round_half_up(value))))


def line_number(text: str, index: int) -> int:
    """Return the 1-based line containing character ``index``."""
    return text.count("\n", 0, index) + 1


def line_at(text: str, line: int) -> str:
    lines = text.splitlines()
    if 1 <= line <= len(lines):
        return lines[line - 1].strip()
    return ""


def is_comment_line(line: str) -> bool:
    return line.lstrip().startswith(_COMMENT_PREFIXES)


def iter_lines(text: str, *, skip_comments: bool = False) -> Iterator[Tuple[int, str]]:
    for index, line in enumerate(text.splitlines(), start=1):
        if skip_comments and is_comment_line(line):
            continue
        yield index, line


def find_all(text: str, pattern: Pattern[str]) -> List[Tuple[int, str]]:
    """Return ``(line, matched text)`` for each regex match in ``text``."""
    return [(line_number(text, match.start()), match.group(0)) for match in pattern.finditer(text)]


def count(text: str, pattern: Pattern[str] | str) -> int:
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    return sum(1 for _ in compiled.finditer(text))


__all__ = [
    "clamp_score",
    "count",
    "find_all",
    "is_comment_line",
    "iter_lines",
    "line_at",
    "line_number",
]
