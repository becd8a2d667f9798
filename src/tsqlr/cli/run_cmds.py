# src/tsqlr/cli/run_cmds.py
#

import asyncio
import signal
from pathlib import Path

import click
import structlog

from tsqlr.capture import DiagnosticCapture
from tsqlr.cli.utils import (
    apply_config_log_level,
    config_from_options,
    connection_options,
    logging_options,
    read_tests,
    reattach_tty,
    setup_logging_from_context,
    testlist_option,
)
from tsqlr.db import MssqlExecutor
from tsqlr.exceptions import ConnectionSetupError, TsqlrError
from tsqlr.telemetry import StructLogger

# --- Try importing TUI App Class ---
try:
    from tsqlr.tui.app import TsqlrTuiApp

    TEXTUAL_AVAILABLE = True
    log_tui = structlog.get_logger("cli.run.tui_check")
    log_tui.debug("Successfully imported tsqlr.tui.app.TsqlrTuiApp.")
except ImportError as e:
    TEXTUAL_AVAILABLE = False
    TsqlrTuiApp = None
    log_tui = structlog.get_logger("cli.run.tui_check")
    log_tui.debug("Failed to import tsqlr.tui.app.", error=str(e))


log: StructLogger = structlog.get_logger("cli.run")

_shutdown_requested = asyncio.Event()


def _handle_signal(sig: int, frame=None) -> None:
    signame = signal.Signals(sig).name
    base_log = structlog.get_logger("cli.run.signal")
    base_log.warning("Received shutdown signal", signal=signame, signal_num=sig)
    if not _shutdown_requested.is_set():
        base_log.info("Setting shutdown requested event.")
        _shutdown_requested.set()
    else:
        base_log.warning("Shutdown already requested, signal ignored.")


@click.command(name="run")
@connection_options
@testlist_option
@logging_options
@click.pass_context
def run_cli(ctx: click.Context, config_path: Path | None, test_file: Path | None, **kwargs):
    """Interactive dashboard for running tSQLt tests."""
    setup_logging_from_context(
        ctx,
        local_log_level=kwargs.get("log_level"),
        local_log_file=kwargs.get("log_file"),
        local_json_logs=kwargs.get("json_logs"),
        tui_mode=True,
    )

    if not TEXTUAL_AVAILABLE or TsqlrTuiApp is None:
        click.echo("Error: The 'run' command requires the 'textual' library.", err=True)
        click.echo("Hint: use 'tsqlr batch' to run tests without the dashboard.", err=True)
        ctx.exit(1)

    try:
        config = config_from_options(config_path, kwargs)
        tests = read_tests(test_file)
    except TsqlrError as e:
        log.error("Startup failed", error=str(e))
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    apply_config_log_level(ctx, config, config_path, kwargs, tui_mode=True)

    if test_file is None:
        reattach_tty()

    capture = DiagnosticCapture()
    executor = MssqlExecutor(config.database, config.runner, capture)
    try:
        executor.open()
    except ConnectionSetupError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    previous_handlers = {sig: signal.signal(sig, _handle_signal) for sig in (signal.SIGINT, signal.SIGTERM)}
    log.info("Initializing interactive dashboard...", tests=len(tests))

    return_code = 0
    try:
        app = TsqlrTuiApp(
            tests=tests,
            executor=executor,
            capture=capture,
            cli_shutdown_event=_shutdown_requested,
            redraw_interval=config.runner.redraw_interval,
        )
        app.run()
        return_code = app.return_code or 0
        log.info("Interactive dashboard finished.", return_code=return_code)
    except Exception as e:
        log.critical("The TUI application crashed unexpectedly.", error=str(e), exc_info=True)
        click.echo(f"An unexpected error occurred in the TUI: {e}", err=True)
        return_code = 1
    finally:
        executor.close()
        for sig, handler in previous_handlers.items():
            signal.signal(sig, handler)

    if return_code != 0:
        ctx.exit(return_code)

# 🔼⚙️
