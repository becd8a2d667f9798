# src/tsqlr/cli/config_cmds.py

from pathlib import Path

import click
import structlog
from rich.pretty import pretty_repr

from tsqlr.cli.utils import config_from_options, connection_options, logging_options, setup_logging_from_context
from tsqlr.exceptions import ConfigurationError
from tsqlr.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.config")


@click.group(name="config")
def config_cli():
    """Commands for inspecting and validating configuration."""
    pass


@config_cli.command(name="show")
@connection_options
@logging_options
@click.pass_context
def show_config(ctx: click.Context, config_path: Path | None, **kwargs):
    """Resolve, validate, and display the configuration (password hidden)."""
    setup_logging_from_context(
        ctx,
        local_log_level=kwargs.get("log_level"),
        local_log_file=kwargs.get("log_file"),
        local_json_logs=kwargs.get("json_logs"),
    )
    log.info("Executing 'config show' command", config_path=str(config_path))

    try:
        config = config_from_options(config_path, kwargs)
    except ConfigurationError as e:
        log.error("Failed to load or validate configuration", error=str(e))
        click.echo(f"Error: Configuration problem: {e}", err=True)
        ctx.exit(1)

    log.debug("Configuration loaded successfully by 'show' command.")
    # Generate a rich-formatted string and echo it for testability.
    click.echo(pretty_repr(config, expand_all=True))

# 🔼⚙️
