"""Classify CLI command -- first-pass classification of commit payloads."""

import typer
from rich.markup import escape
from rich.table import Table

from ..classification.detector import ClassificationResult, CommitPayload, classify_commit
from ..exceptions import InvalidInputError
from . import app
from ._common import as_records, console, exit_on_error, print_json, read_json


@app.command()
def classify(
    source: str = typer.Argument(
        ...,
        help="JSON file of GitHub commit objects ('-' for stdin)",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    Classify commits from GitHub REST commit objects.

    Accepts one commit object, a list of them, or an object with a
    [bold]commits[/bold] list, in the shape returned by
    [dim]GET /repos/{owner}/{repo}/commits[/dim].

    [bold cyan]Examples:[/bold cyan]

      commit-attribution classify commits.json

      gh api repos/OWNER/REPO/commits | commit-attribution classify - --json
    """
    with exit_on_error():
        records = as_records(read_json(source), source, "commits")
        try:
            payloads = [CommitPayload.from_api(r) for r in records]
        except (TypeError, ValueError, AttributeError) as e:
            raise InvalidInputError(source, f"malformed commit object: {e}")
        results = [(p, classify_commit(p)) for p in payloads]

    if json_output:
        print_json(
            [
                {
                    "sha": p.sha,
                    "classification": r.classification.value,
                    "coAuthors": list(r.co_authors),
                }
                for p, r in results
            ]
        )
    else:
        _output_rich(results)


def _output_rich(results: list[tuple[CommitPayload, ClassificationResult]]) -> None:
    """Human-readable Rich table output."""
    table = Table(title="Commit Classification", show_lines=False, pad_edge=True)
    table.add_column("Commit", style="cyan")
    table.add_column("Subject")
    table.add_column("Classification", style="bold")
    table.add_column("Co-authors", style="dim")

    for payload, result in results:
        subject = payload.message.splitlines()[0] if payload.message else ""
        if len(subject) > 60:
            subject = subject[:57] + "..."
        table.add_row(
            payload.sha[:8] or "-",
            escape(subject),
            result.classification.value,
            escape(", ".join(result.co_authors)),
        )

    console.print()
    console.print(table)
