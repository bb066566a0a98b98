"""Unspecified CLI command -- repos that need a resync."""

import typer
from rich.markup import escape

from ..diagnostics import UnspecifiedEntry, UnspecifiedReport, find_unspecified
from ..persistence import StatsDB
from . import app
from ._common import console, exit_on_error, get_config, print_json


@app.command()
def unspecified(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    List synced repos with unspecified AI/bot entries or no breakdowns.

    [bold cyan]Examples:[/bold cyan]

      commit-attribution unspecified

      commit-attribution unspecified --json
    """
    cfg = get_config(ctx)
    with exit_on_error():
        with StatsDB(cfg.db_path) as db:
            report = find_unspecified(db.conn, cfg.synced_status)

    if json_output:
        print_json(report.to_dict())
        return
    _output_rich(report)


def _section(title: str, entries: list[UnspecifiedEntry], with_additions: bool) -> None:
    console.print(f"[bold]{title}[/bold]")
    if not entries:
        console.print("  [green]None found[/green]")
        return
    commits = sum(e.commits for e in entries)
    summary = f"  {len(entries)} repo(s), {commits} commit(s)"
    if with_additions:
        summary += f", {sum(e.additions for e in entries)} additions"
    console.print(summary)
    for e in entries:
        line = f"  - {escape(e.full_name)}: {e.commits} commit(s)"
        if with_additions:
            line += f", {e.additions} additions"
        console.print(line)


def _output_rich(report: UnspecifiedReport) -> None:
    """Human-readable report."""
    _section("Unspecified AI Assistant (ai-unspecified)", report.unspecified_ai, with_additions=True)
    console.print()
    _section("Unspecified Bot (bot-unspecified)", report.unspecified_bot, with_additions=False)
    console.print()

    console.print("[bold]Missing breakdowns[/bold]")
    if not report.missing_breakdown:
        console.print("  [green]None found[/green]")
    for name in report.missing_breakdown:
        console.print(f"  - {escape(name)}")

    if report.resync_candidates:
        console.print()
        console.print(f"[yellow]{len(report.resync_candidates)} repo(s) to resync[/yellow]")
