#
# config/models.py
#
"""
Attrs-based data models for tsqlr configuration structure.
"""

import logging
from typing import Any

from attrs import define, field


# --- Validators ---
def _validate_log_level(inst: Any, attr: Any, value: str) -> None:
    """Validator for standard logging level names."""
    valid = logging._nameToLevel.keys()
    if value.upper() not in valid:
        raise ValueError(f"Invalid log_level '{value}'. Must be one of {list(valid)}.")


def _validate_positive_int(inst: Any, attr: Any, value: int) -> None:
    """Validator ensures integer is positive."""
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise ValueError(f"Field '{attr.name}' must be positive integer, got {value}")


def _validate_positive_number(inst: Any, attr: Any, value: float) -> None:
    if not isinstance(value, int | float) or isinstance(value, bool) or value <= 0:
        raise ValueError(f"Field '{attr.name}' must be a positive number, got {value}")


@define(frozen=True, slots=True)
class DatabaseConfig:
    """Connection details for the SQL Server holding the tSQLt tests."""
    server: str = field()
    database: str = field()
    user: str = field()
    password: str = field(repr=False)
    port: int = field(default=1433, validator=_validate_positive_int)


@define(frozen=True, slots=True)
class RunnerConfig:
    """Execution and display tuning."""
    query_timeout: int = field(default=10, validator=_validate_positive_int)
    login_timeout: int = field(default=5, validator=_validate_positive_int)
    redraw_interval: float = field(default=0.2, validator=_validate_positive_number)


@define(frozen=True, slots=True)
class GlobalConfig:
    """Global default settings for tsqlr."""
    log_level: str = field(default="INFO", validator=_validate_log_level)

    @property
    def numeric_log_level(self) -> int:
        return logging.getLevelName(self.log_level.upper())


@define(frozen=True, slots=True)
class TsqlrConfig:
    """Root configuration object for the tsqlr application."""
    database: DatabaseConfig = field()
    runner: RunnerConfig = field(factory=RunnerConfig)
    global_config: GlobalConfig = field(factory=GlobalConfig, metadata={"toml_name": "global"})


# 🔼⚙️
