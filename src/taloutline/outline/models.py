"""Outline data model.

Positions are zero-based (line, column) pairs. Every node is immutable;
the builder assembles new nodes instead of patching ranges in place.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

ScanStatus = Literal["completed", "cancelled"]


class SymbolKind(Enum):
    """Kind of an outline entry."""

    PROCEDURE = "procedure"
    FORWARD_PROCEDURE = "forward_procedure"
    SUBPROCEDURE = "subprocedure"
    MAIN_BODY = "main_body"
    SECTION = "section"
    PAGE = "page"

    @property
    def lsp_kind(self) -> int:
        """LSP ``SymbolKind`` number used when rendering for an editor."""
        return _LSP_KINDS[self]


# LSP SymbolKind: Package=4, Class=5, Method=6, Interface=11, Function=12, String=15
_LSP_KINDS = {
    SymbolKind.PROCEDURE: 5,
    SymbolKind.FORWARD_PROCEDURE: 11,
    SymbolKind.SUBPROCEDURE: 6,
    SymbolKind.MAIN_BODY: 12,
    SymbolKind.SECTION: 4,
    SymbolKind.PAGE: 15,
}


@dataclass(frozen=True, slots=True, order=True)
class SourcePosition:
    """A (line, column) position, ordered by line then column."""

    line: int
    column: int

    def __post_init__(self) -> None:
        if self.line < 0 or self.column < 0:
            raise ValueError(f"Negative position: ({self.line}, {self.column})")

    def to_dict(self) -> dict[str, int]:
        return {"line": self.line, "column": self.column}

    def to_lsp(self) -> dict[str, int]:
        return {"line": self.line, "character": self.column}


@dataclass(frozen=True, slots=True)
class SourceRange:
    """A closed range between two positions, start <= end."""

    start: SourcePosition
    end: SourcePosition

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"Range end {self.end} precedes start {self.start}")

    @property
    def lines(self) -> tuple[int, int]:
        """First and last line covered."""
        return self.start.line, self.end.line

    def contains(self, other: SourceRange) -> bool:
        return self.start <= other.start and other.end <= self.end

    def with_end(self, end: SourcePosition) -> SourceRange:
        return SourceRange(self.start, end)

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}

    def to_lsp(self) -> dict[str, Any]:
        return {"start": self.start.to_lsp(), "end": self.end.to_lsp()}


@dataclass(frozen=True, slots=True)
class OutlineNode:
    """One entry of the outline tree.

    ``range`` spans the whole symbol including its body; ``selection_range``
    covers the header line only.
    """

    name: str
    kind: SymbolKind
    range: SourceRange
    selection_range: SourceRange
    detail: str | None = None
    children: tuple[OutlineNode, ...] = ()

    def walk(self) -> list[OutlineNode]:
        """This node followed by its descendants, depth first."""
        nodes = [self]
        for child in self.children:
            nodes.extend(child.walk())
        return nodes

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind.value,
            "detail": self.detail,
            "range": self.range.to_dict(),
            "selection_range": self.selection_range.to_dict(),
            "children": [child.to_dict() for child in self.children],
        }

    def to_lsp(self) -> dict[str, Any]:
        """Serialize as an LSP ``DocumentSymbol``."""
        return {
            "name": self.name,
            "detail": self.detail or "",
            "kind": self.kind.lsp_kind,
            "range": self.range.to_lsp(),
            "selectionRange": self.selection_range.to_lsp(),
            "children": [child.to_lsp() for child in self.children],
        }


@dataclass(frozen=True, slots=True)
class OutlineResult:
    """Outcome of one outline scan.

    A cancelled scan still carries whatever symbols were gathered before the
    cancellation was noticed.
    """

    symbols: tuple[OutlineNode, ...] = ()
    status: ScanStatus = "completed"
    lines_scanned: int = 0
    line_count: int = 0

    @property
    def cancelled(self) -> bool:
        return self.status == "cancelled"

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "lines_scanned": self.lines_scanned,
            "line_count": self.line_count,
            "symbols": [node.to_dict() for node in self.symbols],
        }

    def to_lsp(self) -> list[dict[str, Any]]:
        return [node.to_lsp() for node in self.symbols]
