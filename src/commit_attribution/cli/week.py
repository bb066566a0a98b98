"""Week CLI command -- ISO week bucket of a timestamp."""

import typer

from ..exceptions import InvalidInputError
from ..temporal.weeks import day_start, format_ms, parse_timestamp, week_label, week_start
from . import app
from ._common import console, exit_on_error, print_json


@app.command()
def week(
    timestamp: str = typer.Argument(
        ...,
        help="ISO-8601 date/time or epoch milliseconds",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    Show the ISO week (Monday 00:00 UTC) a timestamp falls into.

    [bold cyan]Examples:[/bold cyan]

      commit-attribution week 2024-12-30T12:00:00Z

      commit-attribution week 1735560000000 --json
    """
    with exit_on_error():
        try:
            ts = parse_timestamp(timestamp)
        except ValueError as e:
            raise InvalidInputError(timestamp, str(e))

    start = week_start(ts)
    result = {
        "timestamp": ts,
        "weekStart": start,
        "weekLabel": week_label(start),
        "dayStart": day_start(ts),
    }

    if json_output:
        print_json(result)
        return

    console.print(f"[bold]{result['weekLabel']}[/bold]")
    console.print(f"  Week start  [cyan]{format_ms(start)}[/cyan]  ({start})")
    console.print(f"  Day start   [cyan]{format_ms(result['dayStart'])}[/cyan]")
