"""Terminal rendering of outlines with rich."""

from pathlib import Path

from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from taloutline.outline.models import OutlineNode, OutlineResult, SymbolKind

_KIND_STYLES = {
    SymbolKind.PROCEDURE: "bold cyan",
    SymbolKind.FORWARD_PROCEDURE: "cyan",
    SymbolKind.SUBPROCEDURE: "green",
    SymbolKind.MAIN_BODY: "yellow",
    SymbolKind.SECTION: "bold magenta",
    SymbolKind.PAGE: "magenta",
}


def _label(node: OutlineNode) -> Text:
    first, last = node.range.lines
    span = f"{first + 1}" if first == last else f"{first + 1}-{last + 1}"
    label = Text(node.name, style=_KIND_STYLES[node.kind])
    label.append(f"  {node.kind.value}", style="dim")
    if node.detail:
        label.append(f" ({node.detail})", style="dim italic")
    label.append(f"  {span}", style="dim")
    return label


def _add_nodes(tree: Tree, nodes: tuple[OutlineNode, ...]) -> None:
    for node in nodes:
        branch = tree.add(_label(node))
        _add_nodes(branch, node.children)


def build_tree(path: Path, result: OutlineResult) -> Tree:
    """Build a rich Tree for one file's outline (line numbers are 1-based)."""
    root = Tree(Text(str(path), style="bold"))
    if not result.symbols:
        root.add(Text("no symbols", style="dim"))
    _add_nodes(root, result.symbols)
    return root


def render_outline(console: Console, path: Path, result: OutlineResult) -> None:
    console.print(build_tree(path, result))
