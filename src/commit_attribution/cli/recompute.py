"""Recompute CLI command -- rebuild global stats from synced repos."""

import typer

from ..persistence import StatsDB
from ..persistence.reader import get_global_weekly_stats
from ..persistence.recompute import recompute_global_stats
from . import app
from ._common import console, exit_on_error, get_config, print_json


@app.command()
def recompute(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    Rebuild the global weekly and daily stats from every synced repository.

    The old global rows are replaced in one transaction.

    [bold cyan]Examples:[/bold cyan]

      commit-attribution recompute

      commit-attribution --db stats.db recompute --json
    """
    cfg = get_config(ctx)
    with exit_on_error():
        with StatsDB(cfg.db_path) as db:
            result = recompute_global_stats(db.conn, cfg.synced_status)
            latest = get_global_weekly_stats(db.conn)[-1:]

    if json_output:
        print_json(result.to_dict())
        return

    console.print(
        f"[green]Recomputed[/green] global stats from [bold]{result.repos}[/bold] repos: "
        f"{result.weekly_buckets} weekly, {result.daily_buckets} daily buckets"
    )
    if latest:
        week = latest[0]
        console.print(
            f"[dim]Latest week {week['weekLabel']}: {week['total']} commits "
            f"across {week['repoCount']} repos[/dim]"
        )
