"""tal-outline outline command - print the outline of TAL sources."""

import json
from pathlib import Path
from typing import Any

import click
from rich.console import Console

from taloutline.cli.render import render_outline
from taloutline.cli.utils import collect_sources
from taloutline.config.models import TalOutlineConfig
from taloutline.core.errors import DocumentError, ErrorCode
from taloutline.core.logging import get_logger
from taloutline.core.progress import pluralize, spinner, status
from taloutline.outline.builder import build_outline
from taloutline.outline.document import LinesDocument
from taloutline.outline.models import OutlineResult

log = get_logger("cli.outline")


def load_document(path: Path, config: TalOutlineConfig) -> LinesDocument:
    return LinesDocument.from_path(
        path,
        encoding=config.scan.encoding,
        max_size_mb=config.scan.max_file_size_mb,
    )


@click.command()
@click.argument(
    "paths",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, path_type=Path),
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["tree", "json", "lsp"]),
    default="tree",
    show_default=True,
    help="Output format. lsp emits LSP DocumentSymbol JSON.",
)
@click.pass_context
def outline_command(ctx: click.Context, paths: tuple[Path, ...], fmt: str) -> None:
    """Print the outline of TAL source files.

    PATHS are files or directories; directories are searched for files with
    a configured extension.
    """
    config: TalOutlineConfig = ctx.obj["config"]
    sources = collect_sources(paths, config.scan.extensions)
    if not sources:
        raise click.ClickException(
            f"No sources found (extensions: {', '.join(config.scan.extensions)})"
        )

    results: dict[Path, OutlineResult] = {}
    with spinner(f"Outlining {pluralize(len(sources), 'file')}"):
        for source in sources:
            try:
                document = load_document(source, config)
            except DocumentError as e:
                if e.code is ErrorCode.DOCUMENT_TOO_LARGE:
                    log.warning("source_skipped", **e.details)
                    status(f"Skipped {e.message}", style="warning")
                    continue
                raise click.ClickException(str(e)) from e
            results[source] = build_outline(document, main_prefix=config.scan.main_prefix)

    if fmt == "tree":
        console = Console()
        for source, result in results.items():
            render_outline(console, source, result)
        return

    payload: dict[str, Any] = {}
    for source, result in results.items():
        payload[str(source)] = result.to_lsp() if fmt == "lsp" else result.to_dict()

    single_file = len(paths) == 1 and paths[0].is_file()
    if single_file and payload:
        click.echo(json.dumps(next(iter(payload.values())), indent=2))
    else:
        click.echo(json.dumps(payload, indent=2))
