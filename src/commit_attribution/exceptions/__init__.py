"""Exception hierarchy for commit-attribution."""

from .base import AttributionError
from .config import (
    ConfigFileError,
    ConfigurationError,
    InvalidConfigError,
)
from .input import InvalidInputError
from .persistence import (
    RecomputeError,
    RepoNotFoundError,
    StoreError,
)

__all__ = [
    "AttributionError",
    "ConfigurationError",
    "ConfigFileError",
    "InvalidConfigError",
    "InvalidInputError",
    "StoreError",
    "RecomputeError",
    "RepoNotFoundError",
]
