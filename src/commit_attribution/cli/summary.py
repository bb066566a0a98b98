"""Summary CLI command -- human / AI / automation shares from stored weekly stats."""

from typing import Optional

import typer
from rich.table import Table

from ..persistence import StatsDB
from ..persistence.reader import get_global_weekly_stats, get_repo, get_repo_weekly_stats
from ..ranks import format_percentage, get_rank
from ..temporal.summary import summarize_weekly_stats
from . import app
from ._common import console, exit_on_error, get_config, print_json


@app.command()
def summary(
    ctx: typer.Context,
    repo_id: Optional[int] = typer.Option(
        None,
        "--repo",
        help="Summarise one repository by id instead of the global stats",
        min=1,
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    Summarise weekly stats: commit shares, line shares, AI trend and rank.

    Global stats come from the last [bold]recompute[/bold].

    [bold cyan]Examples:[/bold cyan]

      commit-attribution summary

      commit-attribution summary --repo 3 --json
    """
    cfg = get_config(ctx)
    with exit_on_error():
        with StatsDB(cfg.db_path) as db:
            if repo_id is None:
                name = "all repositories"
                rows = get_global_weekly_stats(db.conn)
            else:
                name = get_repo(db.conn, repo_id)["fullName"]
                rows = get_repo_weekly_stats(db.conn, repo_id)

    result = summarize_weekly_stats(rows)
    tier = get_rank(result.human_percentage)

    if json_output:
        print_json({"weeks": len({r["weekStart"] for r in rows}), "rank": tier.title, **result.to_dict()})
        return

    if result.total == 0:
        console.print(f"[yellow]No commits recorded for {name}.[/yellow]")
        return

    console.print(f"[bold]{name}[/bold]: {result.total} commits")
    table = Table(show_header=True, header_style="bold")
    table.add_column("Author")
    table.add_column("Commits", justify="right")
    table.add_column("Share", justify="right")
    table.add_column("Lines", justify="right")
    rows_out = (
        ("Human", result.human, result.human_percentage, result.loc_human_percentage),
        ("AI", result.ai, result.ai_percentage, result.loc_ai_percentage),
        ("Automation", result.automation, result.automation_percentage, result.loc_automation_percentage),
    )
    for label, commits, share, loc in rows_out:
        table.add_row(
            label,
            str(commits),
            f"{format_percentage(share)}%",
            "-" if loc is None else f"{format_percentage(loc)}%",
        )
    console.print(table)

    console.print(f"AI trend (last 4 weeks vs previous 4): {result.trend:+d}%")
    console.print(f"[bold {tier.hex}]{tier.icon} {tier.title}[/bold {tier.hex}]")
