"""Main callback: global options, config and logging."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from ..exceptions import AttributionError
from ..logging_config import setup_logging
from . import app
from ._common import console, resolve_config


def _version_callback(value: bool) -> None:
    if value:
        from .. import __version__

        console.print(f"[bold cyan]Commit Attribution[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    db: Optional[Path] = typer.Option(
        None,
        "--db",
        help="Stats database (default: commit-attribution.db)",
        dir_okay=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only log errors",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """
    Attribute commits to humans, AI assistants and automation bots.

    [bold cyan]Examples:[/bold cyan]

      commit-attribution attribute signals.json

      commit-attribution week 2024-12-30T12:00:00Z

      commit-attribution --db stats.db recompute
    """
    try:
        cfg = resolve_config(config=config, db=db, verbose=verbose, quiet=quiet)
    except AttributionError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(1)

    setup_logging(verbose=cfg.verbose, quiet=cfg.quiet, log_file=cfg.log_file)
    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg
