# src/tsqlr/cli/utils.py

import logging
import os
import sys
from pathlib import Path
from typing import Any

import click
import structlog

from tsqlr.config import TsqlrConfig, load_config
from tsqlr.state import Test
from tsqlr.telemetry.logger import setup_logging as core_setup_logging
from tsqlr.testlist import load_tests

log = structlog.get_logger("cli.utils")

LOG_LEVEL_CHOICES = click.Choice(list(logging._nameToLevel.keys()), case_sensitive=False)

# CLI option names that feed load_config overrides
CONFIG_OVERRIDE_KEYS = ("server", "database", "user", "password", "port", "query_timeout")


def logging_options(f):
    """Decorator to add logging options to any command."""
    f = click.option(
        "-l",
        "--log-level",
        type=LOG_LEVEL_CHOICES,
        default=None,
        envvar="TSQLR_LOG_LEVEL",
        help="Set the logging level (overrides config file).",
    )(f)
    f = click.option(
        "--log-file",
        type=click.Path(dir_okay=False, writable=True, resolve_path=True),
        default=None,
        envvar="TSQLR_LOG_FILE",
        help="Path to write logs to a file (JSON format).",
    )(f)
    f = click.option(
        "--json-logs",
        is_flag=True,
        default=None,
        envvar="TSQLR_JSON_LOGS",
        help="Output console logs as JSON.",
    )(f)
    return f


def connection_options(f):
    """Decorator adding database connection and config file options."""
    options = [
        click.option("-s", "--server", default=None, envvar="TSQLR_SERVER",
                     show_envvar=True, help="Database server."),
        click.option("-d", "--database", default=None, envvar="TSQLR_DATABASE",
                     show_envvar=True, help="Database name."),
        click.option("-u", "--user", default=None, envvar="TSQLR_USER",
                     show_envvar=True, help="Database username."),
        click.option("-p", "--password", default=None, envvar="TSQLR_PASSWORD",
                     show_envvar=True, help="Database user password."),
        click.option("--port", type=int, default=None, envvar="TSQLR_PORT",
                     show_envvar=True, help="Database server port (default: 1433)."),
        click.option("-t", "--timeout", "query_timeout", type=click.IntRange(min=1), default=None,
                     envvar="TSQLR_TIMEOUT", show_envvar=True,
                     help="Per-test timeout in seconds (default: 10)."),
        click.option(
            "-c",
            "--config-path",
            type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True, path_type=Path),
            default=None,
            envvar="TSQLR_CONF",
            show_envvar=True,
            help="Optional TOML configuration file.",
        ),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def testlist_option(f):
    """Decorator adding the test list option."""
    return click.option(
        "-f",
        "--test-file",
        type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True, path_type=Path),
        default=None,
        help="Test file, one Suite or Suite.Test per line (stdin if not specified).",
    )(f)


def setup_logging_from_context(
    ctx: click.Context,
    local_log_level: str | None = None,
    local_log_file: str | None = None,
    local_json_logs: bool | None = None,
    default_log_level: str = "WARNING",
    tui_mode: bool = False,
    headless_mode: bool = False,
) -> None:
    """
    Setup logging using context values, allowing local overrides.
    """
    ctx.ensure_object(dict)
    log_level_str = local_log_level or ctx.obj.get("LOG_LEVEL") or default_log_level
    log_file_path = local_log_file or ctx.obj.get("LOG_FILE")
    use_json_logs = local_json_logs if local_json_logs is not None else ctx.obj.get("JSON_LOGS", False)

    numeric_level = logging.getLevelName(log_level_str.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
        log_level_str = "INFO"

    core_setup_logging(
        level=numeric_level,
        json_logs=use_json_logs,
        log_file=log_file_path,
        tui_mode=tui_mode,
        headless_mode=headless_mode,
    )

    log.debug(
        "CLI logging initialized via utils",
        level=log_level_str,
        file=log_file_path or "console",
        json=use_json_logs,
        tui=tui_mode,
        headless=headless_mode,
    )


def config_from_options(config_path: Path | None, options: dict[str, Any]) -> TsqlrConfig:
    """Resolve configuration from the config file and CLI/env options."""
    overrides = {key: options.get(key) for key in CONFIG_OVERRIDE_KEYS}
    if options.get("log_level"):
        overrides["log_level"] = options["log_level"]
    return load_config(config_path, overrides)


def apply_config_log_level(
    ctx: click.Context,
    config: TsqlrConfig,
    config_path: Path | None,
    options: dict[str, Any],
    **kwargs: Any,
) -> None:
    """Re-apply logging with the config file level when no CLI level was given."""
    ctx.ensure_object(dict)
    if options.get("log_level") or ctx.obj.get("LOG_LEVEL") or config_path is None:
        return
    setup_logging_from_context(
        ctx,
        local_log_level=config.global_config.log_level,
        local_log_file=options.get("log_file"),
        local_json_logs=options.get("json_logs"),
        **kwargs,
    )


def read_tests(test_file: Path | None) -> list[Test]:
    """Read the test list from `test_file` or stdin."""
    return load_tests(test_file, click.get_text_stream("stdin"))


def reattach_tty() -> bool:
    """
    Point stdin back at the controlling terminal.

    Needed when the test list was piped in: the TUI reads keys from stdin.
    """
    if sys.stdin.isatty():
        return False
    try:
        tty_fd = os.open("/dev/tty", os.O_RDONLY)
    except OSError as e:
        log.warning("No controlling terminal to read keys from", error=str(e))
        return False
    os.dup2(tty_fd, sys.stdin.fileno())
    os.close(tty_fd)
    log.debug("Reattached stdin to the controlling terminal")
    return True

# ⚙️🛠️
