"""Rank CLI command -- human-percentage tier."""

from typing import Optional

import typer

from ..ranks import RANKS, format_percentage, get_rank, human_percentage
from . import app
from ._common import console, print_json


@app.command()
def rank(
    percentage: Optional[float] = typer.Argument(
        None,
        help="Human share of commits in percent (0-100)",
        min=0.0,
        max=100.0,
    ),
    human: Optional[int] = typer.Option(
        None,
        "--human",
        help="Human commit count (use with --total instead of a percentage)",
        min=0,
    ),
    total: Optional[int] = typer.Option(
        None,
        "--total",
        help="Total commit count",
        min=0,
    ),
    show_all: bool = typer.Option(
        False,
        "--all",
        help="List every tier",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    Show the rank tier for a human-commit percentage.

    [bold cyan]Examples:[/bold cyan]

      commit-attribution rank 87.5

      commit-attribution rank --human 120 --total 400
    """
    if show_all:
        for tier in RANKS:
            console.print(
                f"[{tier.hex}]{tier.icon} {tier.title}[/{tier.hex}]  "
                f"[dim]>= {tier.min_human_percentage:g}%[/dim]  {tier.description}"
            )
        return

    if percentage is None:
        if human is None or total is None:
            console.print("[red]Error:[/red] give a percentage or both --human and --total")
            raise typer.Exit(1)
        if human > total:
            console.print("[red]Error:[/red] --human cannot exceed --total")
            raise typer.Exit(1)
        percentage = human_percentage(human, total)

    tier = get_rank(percentage)
    if json_output:
        print_json(
            {
                "humanPercentage": percentage,
                "title": tier.title,
                "description": tier.description,
                "minHumanPercentage": tier.min_human_percentage,
                "hex": tier.hex,
                "icon": tier.icon,
            }
        )
        return

    console.print(f"{format_percentage(percentage)}% human")
    console.print(f"[bold {tier.hex}]{tier.icon} {tier.title}[/bold {tier.hex}]")
    console.print(f"[dim]{tier.description}[/dim]")
