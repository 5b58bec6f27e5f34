"""tal-outline watch command - re-outline sources as they change."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from pathlib import Path

import click
from rich.console import Console
from watchfiles import Change, awatch

from taloutline.cli.outline import load_document
from taloutline.cli.render import render_outline
from taloutline.cli.utils import collect_sources
from taloutline.config.models import TalOutlineConfig
from taloutline.core.errors import DocumentError, InternalError
from taloutline.core.logging import get_logger
from taloutline.core.progress import status
from taloutline.outline.service import OutlineService

log = get_logger("cli.watch")


def changed_sources(
    changes: Iterable[tuple[Change, str]],
    extensions: Iterable[str],
    *,
    watched_file: Path | None = None,
) -> list[Path]:
    """Pick the TAL sources worth re-outlining from a watchfiles change batch."""
    suffixes = {ext.lower() for ext in extensions}
    picked: dict[str, Path] = {}
    for change, raw_path in changes:
        if change == Change.deleted:
            continue
        path = Path(raw_path)
        if path.suffix.lower() in suffixes or (
            watched_file is not None and path.resolve() == watched_file.resolve()
        ):
            picked.setdefault(str(path), path)
    return [picked[key] for key in sorted(picked)]


async def _rescan(
    service: OutlineService,
    source: Path,
    config: TalOutlineConfig,
    console: Console,
) -> None:
    try:
        document = load_document(source, config)
    except DocumentError as e:
        status(e.message, style="warning")
        return
    try:
        result = await service.outline(str(source.resolve()), document)
    except InternalError as e:
        status(str(e), style="error")
        return
    if result.cancelled:
        log.debug("stale_outline_dropped", path=str(source))
        return
    render_outline(console, source, result)


async def _watch(path: Path, config: TalOutlineConfig, service: OutlineService) -> None:
    console = Console()
    watched_file = path if path.is_file() else None
    tasks: set[asyncio.Task[None]] = set()

    def schedule(sources: list[Path]) -> None:
        for source in sources:
            task = asyncio.create_task(_rescan(service, source, config, console))
            tasks.add(task)
            task.add_done_callback(tasks.discard)

    schedule(collect_sources([path], config.scan.extensions))

    async for changes in awatch(path, debounce=config.watch.debounce_ms):
        sources = changed_sources(changes, config.scan.extensions, watched_file=watched_file)
        log.debug("sources_changed", count=len(sources))
        schedule(sources)


@click.command()
@click.argument("path", type=click.Path(exists=True, path_type=Path))
@click.pass_context
def watch_command(ctx: click.Context, path: Path) -> None:
    """Watch PATH and print a fresh outline whenever a source changes.

    A newer save of a file cancels a scan of that file still in progress.
    """
    config: TalOutlineConfig = ctx.obj["config"]
    service = OutlineService(main_prefix=config.scan.main_prefix)
    service.start()
    status(f"Watching {path} (Ctrl-C to stop)")
    try:
        asyncio.run(_watch(path, config, service))
    except KeyboardInterrupt:
        status("Stopped", style="success")
    finally:
        service.stop()
