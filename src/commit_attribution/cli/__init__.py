"""CLI entry point: registers all subcommands."""

import typer

from ._common import console

app = typer.Typer(
    name="commit-attribution",
    help="Commit Attribution - human, AI and bot authorship of commits",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


# Import subcommands to register them
from .main import main as _main_callback  # noqa: F401, E402
from .attribute import attribute as _attribute  # noqa: F401, E402
from .classify import classify as _classify  # noqa: F401, E402
from .week import week as _week  # noqa: F401, E402
from .rank import rank as _rank  # noqa: F401, E402
from .recompute import recompute as _recompute  # noqa: F401, E402
from .unspecified import unspecified as _unspecified  # noqa: F401, E402
from .summary import summary as _summary  # noqa: F401, E402

__all__ = ["app", "console"]
