"""Comment removal for single source lines.

TAL has two comment forms: ``--`` runs to end of line, and ``!`` opens a
comment closed by the next ``!`` on the same line (or by end of line).
Comments spanning several lines are not tracked.
"""

import re

_LINE_COMMENT_RE = re.compile(r"--.*")
_BANG_COMMENT_RE = re.compile(r"![^!]*(?:!|$)")


def strip_comments(line: str) -> str:
    """Return ``line`` with its comments removed."""
    line = _LINE_COMMENT_RE.sub("", line)
    return _BANG_COMMENT_RE.sub("", line)
