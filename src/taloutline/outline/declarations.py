"""Line-level recognizers for procedure headers, markers and directives.

All recognizers are case-insensitive and purely syntactic: they look at a
single line and know nothing about the lines around it.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

ESCAPE_CHAR = "^"

_IDENT = r"[A-Za-z^_][A-Za-z0-9^_]*"

# Optional data type, e.g. int, int(16), fixed(*), int(foo)
_RETURN_TYPE = (
    r"(?:string|int|unsigned|fixed|real)"
    r"(?:\s*\(\s*(?:[0-9]{1,2}|\*|" + _IDENT + r")\s*\))?"
)


def _header_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(
        r"^\s*(?:(?P<type>" + _RETURN_TYPE + r")\s*)?"
        r"\b(?P<keyword>" + keyword + r")\s+"
        r"(?P<name>" + _IDENT + r")",
        re.IGNORECASE,
    )


PROC_RE = _header_pattern("proc")
SUBPROC_RE = _header_pattern("subproc")

# "?section name" - only one per line, must open the line
SECTION_RE = re.compile(r"^\?\s*section\s+(?P<name>" + _IDENT + r")", re.IGNORECASE)

# '?page "heading"' - a page without a heading has no outline entry
PAGE_RE = re.compile(r'^\?\s*page\s*"(?P<heading>[^"]*)"', re.IGNORECASE)

FORWARD_KEYWORDS = ("forward", "external")

_WORD_RE = re.compile(r"[A-Za-z0-9_]+")


@dataclass(frozen=True, slots=True)
class DeclarationMatch:
    """Captured groups of a procedure or sub-procedure header."""

    keyword: str
    name: str
    return_type: str | None = None


def _match_header(pattern: re.Pattern[str], line: str) -> DeclarationMatch | None:
    m = pattern.match(line)
    if m is None:
        return None
    return DeclarationMatch(
        keyword=m.group("keyword").lower(),
        name=m.group("name"),
        return_type=m.group("type"),
    )


def match_proc(line: str) -> DeclarationMatch | None:
    """Match a ``[type] proc name`` header."""
    return _match_header(PROC_RE, line)


def match_subproc(line: str) -> DeclarationMatch | None:
    """Match a ``[type] subproc name`` header."""
    return _match_header(SUBPROC_RE, line)


def match_section(line: str) -> str | None:
    """Return the section name of a ``?section`` directive."""
    m = SECTION_RE.match(line)
    return m.group("name") if m else None


def match_page(line: str) -> str | None:
    """Return the heading of a ``?page "heading"`` directive, if it has one."""
    m = PAGE_RE.match(line)
    if m is None or not m.group("heading"):
        return None
    return m.group("heading")


def iter_keywords(line: str, keywords: Iterable[str]) -> Iterator[str]:
    """Yield each keyword occurrence in ``line``, lower-cased.

    An occurrence is a whole word equal (case-insensitively) to one of
    ``keywords`` that is not touching the escape character on either side
    and is not inside a double-quoted string. A word is inside a string when
    an odd number of quotes follow it on the line.
    """
    wanted = {k.lower() for k in keywords}
    for m in _WORD_RE.finditer(line):
        word = m.group().lower()
        if word not in wanted:
            continue
        start, end = m.span()
        if start > 0 and line[start - 1] == ESCAPE_CHAR:
            continue
        if end < len(line) and line[end] == ESCAPE_CHAR:
            continue
        if line.count('"', end) % 2:
            continue
        yield word


def count_keyword(line: str, keyword: str) -> int:
    return sum(1 for _ in iter_keywords(line, (keyword,)))


def match_forward(line: str) -> str | None:
    """Return ``"forward"`` or ``"external"`` if the line carries that marker."""
    return next(iter_keywords(line, FORWARD_KEYWORDS), None)
