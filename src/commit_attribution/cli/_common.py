"""Shared CLI helpers."""

import json
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..config import AttributionConfig, load_config
from ..exceptions import AttributionError, InvalidInputError
from ..logging_config import get_logger

console = Console()

logger = get_logger(__name__)


def resolve_config(
    config: Optional[Path] = None,
    db: Optional[Path] = None,
    verbose: bool = False,
    quiet: bool = False,
) -> AttributionConfig:
    """Build the config from CLI options."""
    overrides: dict[str, Any] = {}
    if db is not None:
        overrides["db_path"] = str(db)
    if verbose:
        overrides["verbose"] = True
    if quiet:
        overrides["quiet"] = True
    return load_config(config_file=config, **overrides)


def get_config(ctx: typer.Context) -> AttributionConfig:
    """Config stored by the main callback, or defaults when run standalone."""
    obj = ctx.find_root().obj or {}
    cfg = obj.get("config")
    if cfg is None:
        cfg = load_config()
    return cfg


def read_json(source: str) -> Any:
    """Parse a JSON document from a file path, or stdin when *source* is ``-``."""
    try:
        if source == "-":
            return json.load(sys.stdin)
        with open(source, encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise InvalidInputError(source, e.strerror or str(e))
    except json.JSONDecodeError as e:
        raise InvalidInputError(source, f"not valid JSON: {e}")


def as_records(data: Any, source: str, key: str) -> list[dict[str, Any]]:
    """Accept a list of objects, a single object, or ``{key: [...]}``."""
    if isinstance(data, dict) and isinstance(data.get(key), list):
        data = data[key]
    elif isinstance(data, dict):
        data = [data]
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise InvalidInputError(source, f"expected an object, a list of objects or {{'{key}': [...]}}")
    return data


def print_json(payload: Any) -> None:
    """Machine-readable output on stdout."""
    print(json.dumps(payload, indent=2))


@contextmanager
def exit_on_error() -> Iterator[None]:
    """Report AttributionError in red and exit with status 1."""
    try:
        yield
    except AttributionError as e:
        logger.debug("%s: %s", e.__class__.__name__, e)
        console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(1)
