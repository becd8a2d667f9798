# src/tsqlr/cli/main.py

"""
Main CLI entry point for tsqlr using Click.
Handles global options like logging level.
"""

import click
import structlog

from tsqlr import __version__
from tsqlr.cli.batch_cmds import batch_cli
from tsqlr.cli.config_cmds import config_cli
from tsqlr.cli.run_cmds import run_cli
from tsqlr.cli.utils import logging_options, setup_logging_from_context
from tsqlr.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.main")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-V", "--version", package_name="tsqlr")
@logging_options
@click.pass_context
def cli(
    ctx: click.Context,
    log_level: str | None,
    log_file: str | None,
    json_logs: bool | None,
):
    """
    tsqlr: run tSQLt tests against SQL Server.

    Reads tests (Suite or Suite.Test, one per line) from a file or stdin and
    runs them one at a time.
    Configuration precedence: CLI options > Environment Variables > Config File > Defaults.
    """
    ctx.ensure_object(dict)

    ctx.obj["LOG_LEVEL"] = log_level
    ctx.obj["LOG_FILE"] = log_file
    ctx.obj["JSON_LOGS"] = json_logs if json_logs is not None else False

    setup_logging_from_context(ctx, default_log_level="WARNING")
    log.debug(
        "Main CLI group initialized",
        log_level=log_level,
        log_file=log_file,
        json_logs=json_logs,
    )


cli.add_command(batch_cli)
cli.add_command(config_cli)
cli.add_command(run_cli)

if __name__ == "__main__":
    cli()

# 🖥️⚙️
