from __future__ import annotations
import re
from typing import Iterator, List, Tuple


def split_lines(content: str) -> List[str]:
    # Split on "\n" only so indices agree with line_of(); "\r" is removed by strip().
    return content.split("\n")


def line_of(content: str, offset: int) -> int:
    """1-based line number of a character offset."""
    return content.count("\n", 0, offset) + 1


def iter_hits(regex: re.Pattern, content: str, lines: List[str]) -> Iterator[Tuple[int, str]]:
    """
    Every occurrence of ``regex`` in ``content``, left to right, as (lineno, stripped line).
    Each call walks a fresh finditer, so nothing carries over between files.
    """
    for m in regex.finditer(content):
        lineno = line_of(content, m.start())
        yield lineno, lines[lineno - 1].strip()


def has_match(regex: re.Pattern, content: str) -> bool:
    return regex.search(content) is not None
