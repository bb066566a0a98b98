"""Log routing for commit-attribution.

Everything goes to stderr through rich, leaving stdout free for ``--json``
output. An optional log file receives the same records as plain text.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

_ROOT_LOGGER = "commit_attribution"
_FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _level(verbose: bool, quiet: bool) -> int:
    # quiet wins when both flags are given
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """Install the stderr handler (and *log_file*, if given) on the root logger.

    Replaces any handlers already installed, so repeated CLI invocations in
    one process do not stack them. Returns the package logger.
    """
    level = _level(verbose, quiet)

    # Messages carry repo names and commit text; never parse them as markup.
    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_time=True,
            show_path=verbose,
        )
    ]
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True)

    package_logger = logging.getLogger(_ROOT_LOGGER)
    package_logger.setLevel(level)
    return package_logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``commit_attribution`` namespace.

    ``get_logger(__name__)`` inside the package returns the module logger
    unchanged; a bare name such as ``"sync"`` is prefixed.
    """
    if name is None:
        return logging.getLogger(_ROOT_LOGGER)
    if not name.startswith(_ROOT_LOGGER):
        name = f"{_ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
