"""Outline construction for TAL source documents.

One linear, top-to-bottom pass over the document:

- A ``proc`` header hands off to a body scan that tracks ``begin``/``end``
  depth, collects ``subproc`` children, and returns the finished node
  together with the last line it consumed. The outer scan resumes on the
  line after it.
- Lines outside procedures are checked for ``?section`` and ``?page``
  directives. Sections are only reported for documents without procedures.

The scan never fails on malformed input. Unterminated bodies are clamped to
the last line of the document.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from taloutline.core.logging import get_logger
from taloutline.outline.cancellation import NEVER_CANCELLED, CancellationToken
from taloutline.outline.comments import strip_comments
from taloutline.outline.declarations import (
    DeclarationMatch,
    match_forward,
    match_page,
    match_proc,
    match_section,
    match_subproc,
)
from taloutline.outline.depth import BlockDepthTracker
from taloutline.outline.document import LinesDocument, TextDocument
from taloutline.outline.models import (
    OutlineNode,
    OutlineResult,
    ScanStatus,
    SourcePosition,
    SourceRange,
    SymbolKind,
)

log = get_logger("outline.builder")

DEFAULT_MAIN_PREFIX = "main: "


@dataclass(frozen=True, slots=True)
class _BodyScan:
    """A scanned procedure or sub-procedure and the last line it consumed."""

    node: OutlineNode
    last_line: int
    cancelled: bool = False


class OutlineBuilder:
    """Builds the outline of one document snapshot.

    Instances are single-use and hold no state beyond the document, the
    cancellation token and naming options.
    """

    def __init__(
        self,
        document: TextDocument,
        cancel: CancellationToken | None = None,
        *,
        main_prefix: str = DEFAULT_MAIN_PREFIX,
    ) -> None:
        self._document = document
        self._cancel = cancel or NEVER_CANCELLED
        self._main_prefix = main_prefix

    def build(self) -> OutlineResult:
        doc = self._document
        line_count = doc.line_count
        log.debug("outline_scan_started", line_count=line_count)

        procs: list[OutlineNode] = []
        sections: list[OutlineNode] = []
        open_section: int | None = None
        status: ScanStatus = "completed"

        line_no = 0
        while line_no < line_count:
            if self._cancel.is_set():
                status = "cancelled"
                break

            line = doc.line_text(line_no)
            header = match_proc(line)
            if header is not None:
                scan = self._scan_procedure(line_no, header)
                procs.append(scan.node)
                line_no = scan.last_line + 1
                if scan.cancelled:
                    status = "cancelled"
                    break
                continue

            section_name = match_section(line)
            if section_name is not None:
                if open_section is not None:
                    sections[open_section] = self._close(
                        sections[open_section], doc.line_end(line_no - 1)
                    )
                header_range = doc.line_range(line_no)
                sections.append(
                    OutlineNode(
                        name=section_name,
                        kind=SymbolKind.SECTION,
                        range=header_range,
                        selection_range=header_range,
                    )
                )
                open_section = len(sections) - 1
            else:
                heading = match_page(line)
                if heading is not None:
                    page_range = doc.line_range(line_no)
                    page = OutlineNode(
                        name=heading,
                        kind=SymbolKind.PAGE,
                        range=page_range,
                        selection_range=page_range,
                    )
                    if open_section is not None:
                        section = sections[open_section]
                        sections[open_section] = replace(
                            section, children=(*section.children, page)
                        )
                    else:
                        sections.append(page)
            line_no += 1

        lines_scanned = min(line_no, line_count)

        if procs:
            symbols = tuple(procs)
        else:
            if open_section is not None:
                sections[open_section] = self._close(
                    sections[open_section], doc.line_end(lines_scanned - 1)
                )
            symbols = tuple(sections)

        result = OutlineResult(
            symbols=symbols,
            status=status,
            lines_scanned=lines_scanned,
            line_count=line_count,
        )
        if result.cancelled:
            log.debug("outline_scan_cancelled", lines_scanned=lines_scanned, line_count=line_count)
        else:
            log.debug(
                "outline_scan_completed",
                line_count=line_count,
                symbols=len(symbols),
                procedures=len(procs),
            )
        return result

    @staticmethod
    def _close(node: OutlineNode, end: SourcePosition) -> OutlineNode:
        return replace(node, range=node.range.with_end(end))

    def _scan_procedure(self, line_no: int, header: DeclarationMatch) -> _BodyScan:
        doc = self._document
        header_range = doc.line_range(line_no)
        header_line = strip_comments(doc.line_text(line_no))
        node = OutlineNode(
            name=header.name,
            kind=SymbolKind.PROCEDURE,
            range=header_range,
            selection_range=header_range,
        )

        # forward/external procs have no body
        marker = match_forward(header_line)
        if marker is not None:
            return _BodyScan(
                replace(node, kind=SymbolKind.FORWARD_PROCEDURE, detail=marker), line_no
            )

        tracker = BlockDepthTracker()
        children: list[OutlineNode] = []
        last_line = line_no
        cancelled = False

        if not tracker.feed(header_line):
            current = line_no + 1
            while current < doc.line_count:
                if self._cancel.is_set():
                    cancelled = True
                    break

                line = strip_comments(doc.line_text(current))

                # Once a block is open, forward/external is a compile error, not a marker
                if not tracker.opened:
                    marker = match_forward(line)
                    if marker is not None:
                        node = replace(node, kind=SymbolKind.FORWARD_PROCEDURE, detail=marker)
                        last_line = current
                        break

                sub_header = match_subproc(line)
                if sub_header is not None:
                    scan = self._scan_subprocedure(current, sub_header, line)
                    children.append(scan.node)
                    last_line = scan.last_line
                    if scan.cancelled:
                        cancelled = True
                        break
                    current = scan.last_line + 1
                    continue

                last_line = current
                if tracker.feed(line):
                    break
                current += 1

        end = doc.line_end(last_line)
        if children and children[-1].range.end.line < last_line:
            body_start = children[-1].range.end.line + 1
            children.append(
                OutlineNode(
                    name=f"{self._main_prefix}{node.name}",
                    kind=SymbolKind.MAIN_BODY,
                    range=SourceRange(SourcePosition(body_start, 0), end),
                    selection_range=doc.line_range(body_start),
                )
            )

        node = replace(node, range=node.range.with_end(end), children=tuple(children))
        return _BodyScan(node, last_line, cancelled)

    def _scan_subprocedure(
        self, line_no: int, header: DeclarationMatch, header_line: str
    ) -> _BodyScan:
        doc = self._document
        header_range = doc.line_range(line_no)
        tracker = BlockDepthTracker()
        last_line = line_no
        cancelled = False

        if not tracker.feed(header_line):
            current = line_no + 1
            while current < doc.line_count:
                if self._cancel.is_set():
                    cancelled = True
                    break
                last_line = current
                if tracker.feed(strip_comments(doc.line_text(current))):
                    break
                current += 1

        node = OutlineNode(
            name=header.name,
            kind=SymbolKind.SUBPROCEDURE,
            range=header_range.with_end(doc.line_end(last_line)),
            selection_range=header_range,
        )
        return _BodyScan(node, last_line, cancelled)


def build_outline(
    document: TextDocument,
    cancel: CancellationToken | None = None,
    *,
    main_prefix: str = DEFAULT_MAIN_PREFIX,
) -> OutlineResult:
    """Scan ``document`` and return its outline.

    Args:
        document: Line-indexed document snapshot.
        cancel: Polled at every line loop head; when set, the scan stops and
            returns the symbols gathered so far with status ``"cancelled"``.
        main_prefix: Name prefix of synthesized main-body entries.
    """
    return OutlineBuilder(document, cancel, main_prefix=main_prefix).build()


def outline_text(
    text: str,
    cancel: CancellationToken | None = None,
    *,
    main_prefix: str = DEFAULT_MAIN_PREFIX,
) -> OutlineResult:
    """Convenience wrapper: outline a source string."""
    return build_outline(LinesDocument.from_text(text), cancel, main_prefix=main_prefix)
