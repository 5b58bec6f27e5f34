"""tal-outline CLI."""

from pathlib import Path

import click

from taloutline import __version__
from taloutline.cli.outline import outline_command
from taloutline.cli.watch import watch_command
from taloutline.config.loader import load_config
from taloutline.core.errors import TalOutlineError
from taloutline.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="tal-outline")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file to use instead of ./.tal-outline.yaml",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """tal-outline - outline TAL procedures, sections and pages."""
    ctx.ensure_object(dict)
    try:
        config = load_config(config_path=config_path)
    except TalOutlineError as e:
        raise click.ClickException(str(e)) from e
    if verbose:
        config.logging.level = "DEBUG"
    configure_logging(config=config.logging)
    ctx.obj["config"] = config


cli.add_command(outline_command, name="outline")
cli.add_command(watch_command, name="watch")


if __name__ == "__main__":
    cli()
