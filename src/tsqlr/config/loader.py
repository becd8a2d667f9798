#
# config/loader.py
#
"""
Builds a TsqlrConfig from an optional TOML file plus CLI/env overrides.

Precedence: CLI options > environment variables > config file > defaults.
Environment variables reach this module through click's `envvar` support, so
they arrive here as overrides.
"""

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog

from tsqlr.exceptions import ConfigurationError

from .models import DatabaseConfig, GlobalConfig, RunnerConfig, TsqlrConfig

log = structlog.get_logger("config.loader")

# Required database fields and how the operator supplies them
REQUIRED_DATABASE_FIELDS: dict[str, str] = {
    "server": "-s server (or $TSQLR_SERVER)",
    "database": "-d database (or $TSQLR_DATABASE)",
    "user": "-u user (or $TSQLR_USER)",
    "password": "-p password (or $TSQLR_PASSWORD)",
}
DATABASE_FIELDS = (*REQUIRED_DATABASE_FIELDS, "port")
RUNNER_FIELDS = ("query_timeout", "login_timeout", "redraw_interval")


def _read_toml(config_path: Path) -> dict[str, Any]:
    try:
        with config_path.open("rb") as handle:
            data = tomllib.load(handle)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Config file not found: '{config_path}'") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in '{config_path}': {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to read config file '{config_path}': {e}") from e
    log.debug("Config file read", path=str(config_path), sections=list(data.keys()))
    return data


def _section(data: Mapping[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, Mapping):
        raise ConfigurationError(f"Config section [{name}] must be a table")
    return dict(section)


def load_config(
    config_path: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> TsqlrConfig:
    """
    Load and validate configuration.

    Args:
        config_path: Optional TOML file with [database], [runner] and [global]
            tables.
        overrides: Flat mapping of field name to value (from CLI options or
            env vars). `None` values are ignored.

    Raises:
        ConfigurationError: the file cannot be read, a required database field
            is missing, or a value fails validation.
    """
    data = _read_toml(config_path) if config_path else {}
    database = _section(data, "database")
    runner = _section(data, "runner")
    global_settings = _section(data, "global")

    for key, value in (overrides or {}).items():
        if value is None:
            continue
        if key in DATABASE_FIELDS:
            database[key] = value
        elif key in RUNNER_FIELDS:
            runner[key] = value
        elif key == "log_level":
            global_settings[key] = value
        else:
            log.debug("Ignoring unknown config override", key=key)

    missing = [hint for name, hint in REQUIRED_DATABASE_FIELDS.items() if not database.get(name)]
    if missing:
        raise ConfigurationError(f"missing {', '.join(missing)}")

    try:
        config = TsqlrConfig(
            database=DatabaseConfig(**database),
            runner=RunnerConfig(**runner),
            global_config=GlobalConfig(**global_settings),
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    log.debug(
        "Configuration loaded",
        server=config.database.server,
        database=config.database.database,
        query_timeout=config.runner.query_timeout,
    )
    return config

# 🔼⚙️
