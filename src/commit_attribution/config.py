"""Configuration loading and management for commit-attribution.

Configuration sources are merged in priority order:
    1. Defaults (defined in AttributionConfig)
    2. Global config (~/.commit-attribution.toml)
    3. Project config (./commit-attribution.toml)
    4. Explicit config file
    5. Environment variables (ATTRIBUTION_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(db_path="stats.db", verbose=True)
    >>> config.verbosity
    'verbose'
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigFileError, ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

_VERBOSITY_LEVELS = ("quiet", "normal", "verbose")
_ENV_PREFIX = "ATTRIBUTION_"
GLOBAL_CONFIG_NAME = ".commit-attribution.toml"
PROJECT_CONFIG_NAME = "commit-attribution.toml"


@dataclass(frozen=True)
class AttributionConfig:
    """Runtime settings for the store, the recompute job and the CLI.

    Attributes:
        db_path: SQLite stats database file.
        synced_status: Repo sync status that marks a repo as eligible for
            global recomputation.
        verbosity: Logging verbosity level.
        log_file: Optional file that receives a plain-text copy of the logs.
        max_breakdown_rows: Rows shown in CLI breakdown tables (JSON output
            is never truncated).
    """

    db_path: str = "commit-attribution.db"
    synced_status: str = "synced"
    verbosity: Verbosity = "normal"
    log_file: Optional[str] = None
    max_breakdown_rows: int = 20

    def __post_init__(self) -> None:
        if not self.db_path:
            raise InvalidConfigError("db_path", self.db_path, "must not be empty")
        if not self.synced_status:
            raise InvalidConfigError("synced_status", self.synced_status, "must not be empty")
        if self.verbosity not in _VERBOSITY_LEVELS:
            raise InvalidConfigError(
                "verbosity", self.verbosity, f"expected one of {', '.join(_VERBOSITY_LEVELS)}"
            )
        if self.max_breakdown_rows < 1:
            raise InvalidConfigError("max_breakdown_rows", self.max_breakdown_rows, "must be at least 1")

    @property
    def verbose(self) -> bool:
        return self.verbosity == "verbose"

    @property
    def quiet(self) -> bool:
        return self.verbosity == "quiet"


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> AttributionConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options fall through.

    Returns:
        Validated AttributionConfig instance

    Raises:
        ConfigurationError: If a config file or environment value is invalid
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / GLOBAL_CONFIG_NAME
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / PROJECT_CONFIG_NAME
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigFileError(config_file, "file not found")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"
    merged.update(overrides)

    try:
        return AttributionConfig(**merged)
    except TypeError as e:
        # Unknown key in a config file or override
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from ATTRIBUTION_* environment variables.

    Supported environment variables:
        ATTRIBUTION_DB_PATH: str
        ATTRIBUTION_SYNCED_STATUS: str
        ATTRIBUTION_VERBOSITY: quiet/normal/verbose
        ATTRIBUTION_LOG_FILE: str
        ATTRIBUTION_MAX_BREAKDOWN_ROWS: int
    """
    type_hints = get_type_hints(AttributionConfig)
    result: dict[str, Any] = {}

    for field_name in AttributionConfig.__dataclass_fields__:
        env_key = f"{_ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type."""
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        if lower in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load a TOML file and return the parsed dict."""
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigFileError(path, str(e))
