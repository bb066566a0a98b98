"""Attribute CLI command -- aggregate PR/commit signals into a summary."""

from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from ..classification.attribution import aggregate
from ..classification.models import AggregateInput, AttributionSummary
from ..ranks import format_percentage
from . import app
from ._common import as_records, console, exit_on_error, get_config, print_json, read_json


@app.command()
def attribute(
    ctx: typer.Context,
    source: str = typer.Argument(
        ...,
        help="JSON file of signals ('-' for stdin)",
    ),
    computed_at: Optional[int] = typer.Option(
        None,
        "--computed-at",
        help="Timestamp (epoch ms) to stamp on the summary (default: now)",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    Aggregate attribution signals into per-tool and per-bot commit counts.

    Input is a list of objects with [bold]classification[/bold],
    [bold]commitCount[/bold] and optional login, branch, body and labels
    (or an object with an [bold]inputs[/bold] list).

    [bold cyan]Examples:[/bold cyan]

      commit-attribution attribute signals.json

      cat signals.json | commit-attribution attribute - --json
    """
    cfg = get_config(ctx)
    with exit_on_error():
        records = as_records(read_json(source), source, "inputs")
        summary = aggregate((AggregateInput.from_dict(r) for r in records), computed_at=computed_at)

    if json_output:
        print_json(summary.to_dict())
    else:
        _output_rich(summary, cfg.max_breakdown_rows)


def _output_rich(summary: AttributionSummary, max_rows: int) -> None:
    """Human-readable Rich table output."""
    if summary.total_commits == 0:
        console.print("[yellow]No AI or automation commits attributed.[/yellow]")
        return

    table = Table(title="Attribution", show_lines=False, pad_edge=True)
    table.add_column("Tool", style="bold")
    table.add_column("Key", style="dim")
    table.add_column("Lane", style="cyan")
    table.add_column("Commits", justify="right", style="green")
    table.add_column("Share", justify="right")

    for item in summary.breakdown[:max_rows]:
        share = item.commits / summary.total_commits * 100
        table.add_row(
            escape(item.label), item.key, item.lane, f"{item.commits:g}", f"{format_percentage(share)}%"
        )

    console.print()
    console.print(table)
    hidden = len(summary.breakdown) - max_rows
    if hidden > 0:
        console.print(f"[dim]... and {hidden} more (use --json for all)[/dim]")
    console.print(
        f"Total [bold]{summary.total_commits:g}[/bold]  "
        f"AI [magenta]{summary.ai_commits:g}[/magenta]  "
        f"Automation [cyan]{summary.automation_commits:g}[/cyan]"
    )
