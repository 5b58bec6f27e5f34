"""Lexical outline scanner for TAL source documents.

Usage::

    from taloutline.outline import outline_text

    result = outline_text(source)
    for node in result.symbols:
        print(node.name, node.kind, node.range.lines)
"""

from taloutline.outline.builder import OutlineBuilder, build_outline, outline_text
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
    SourcePosition,
    SourceRange,
    SymbolKind,
)
from taloutline.outline.service import OutlineService

__all__ = [
    "BlockDepthTracker",
    "CancellationToken",
    "DeclarationMatch",
    "LinesDocument",
    "NEVER_CANCELLED",
    "OutlineBuilder",
    "OutlineNode",
    "OutlineResult",
    "OutlineService",
    "SourcePosition",
    "SourceRange",
    "SymbolKind",
    "TextDocument",
    "build_outline",
    "match_forward",
    "match_page",
    "match_proc",
    "match_section",
    "match_subproc",
    "outline_text",
    "strip_comments",
]
