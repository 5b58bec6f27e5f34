"""Line-addressable text sources for the outline scanner."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

from taloutline.core.errors import DocumentError
from taloutline.outline.models import SourcePosition, SourceRange

# Editors break lines on CRLF, CR and LF only; form feeds stay in the text.
_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


@runtime_checkable
class TextDocument(Protocol):
    """Read-only, line-indexed view of a source document."""

    @property
    def line_count(self) -> int: ...

    def line_text(self, index: int) -> str: ...

    def line_range(self, index: int) -> SourceRange: ...

    def line_end(self, index: int) -> SourcePosition: ...


@dataclass(frozen=True, slots=True)
class LinesDocument:
    """Immutable in-memory document snapshot."""

    lines: tuple[str, ...]

    @classmethod
    def from_text(cls, text: str) -> LinesDocument:
        """Split text the way an editor does; ``"a\\n"`` has two lines."""
        return cls(tuple(_LINE_BREAK_RE.split(text)))

    @classmethod
    def from_path(
        cls,
        path: Path,
        *,
        encoding: str = "utf-8",
        max_size_mb: int | None = None,
    ) -> LinesDocument:
        """Read a document from disk.

        Raises:
            DocumentError: If the file is unreadable, too large, or undecodable.
        """
        try:
            size = path.stat().st_size
            if max_size_mb is not None and size > max_size_mb * 1024 * 1024:
                raise DocumentError.too_large(str(path), size / (1024 * 1024), max_size_mb)
            raw = path.read_bytes()
        except OSError as e:
            raise DocumentError.unreadable(str(path), e.strerror or str(e)) from e
        try:
            text = raw.decode(encoding)
        except (UnicodeDecodeError, LookupError) as e:
            raise DocumentError.decode_failed(str(path), encoding) from e
        return cls.from_text(text)

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def line_text(self, index: int) -> str:
        return self.lines[index]

    def line_end(self, index: int) -> SourcePosition:
        return SourcePosition(index, len(self.lines[index]))

    def line_range(self, index: int) -> SourceRange:
        return SourceRange(SourcePosition(index, 0), self.line_end(index))
