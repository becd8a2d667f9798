# src/tsqlr/cli/batch_cmds.py

import asyncio
import sys
from pathlib import Path

import click
import structlog
from rich.console import Console
from rich.table import Table
from rich.text import Text

from tsqlr.capture import DiagnosticCapture
from tsqlr.cli.utils import (
    apply_config_log_level,
    config_from_options,
    connection_options,
    logging_options,
    read_tests,
    setup_logging_from_context,
    testlist_option,
)
from tsqlr.db import MssqlExecutor
from tsqlr.db.protocols import TestExecutor
from tsqlr.exceptions import TsqlrError
from tsqlr.runtime import TestRunner, TUIInterface
from tsqlr.state import Test, TestStatus, status_style
from tsqlr.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.batch")


async def run_all_tests(tests: list[Test], executor: TestExecutor, capture: DiagnosticCapture) -> None:
    """Run every test once, in order, through a headless TestRunner."""
    shutdown_event = asyncio.Event()
    runner = TestRunner(executor, capture, TUIInterface(None))
    runner_task = asyncio.create_task(runner.run(shutdown_event), name="TestRunner")

    async def feed() -> None:
        await runner.submit_all(tests)
        await runner.queue.join()

    for test in tests:
        test.mark_running()
    feed_task = asyncio.create_task(feed(), name="submit_all")
    try:
        # A crashed runner would leave the feeder waiting forever.
        await asyncio.wait({feed_task, runner_task}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        feed_task.cancel()
        shutdown_event.set()
    await runner_task


def _run_headless(tests: list[Test], executor: TestExecutor, capture: DiagnosticCapture) -> int:
    try:
        asyncio.run(run_all_tests(tests, executor, capture))
        return 0
    except KeyboardInterrupt:
        log.warning("Shutdown initiated by KeyboardInterrupt (CTRL-C).")
        return 130
    except Exception:
        log.critical("Test run exited with an unhandled exception.", exc_info=True)
        return 1


def render_report(tests: list[Test], console: Console) -> None:
    """Print a status table, then the retained lines of every non-passing test."""
    table = Table(title="tSQLt results", show_lines=False)
    table.add_column("Status", no_wrap=True)
    table.add_column("Test/Suite")
    for test in tests:
        table.add_row(Text(test.status.label, style=status_style(test.status)), test.identity)
    console.print(table)

    for test in tests:
        if test.status == TestStatus.PASS or not test.results:
            continue
        console.print(Text.assemble((test.status.label, status_style(test.status)), " | ", test.identity))
        for line in test.results:
            console.print(Text(line))
        console.print()


@click.command(name="batch")
@connection_options
@testlist_option
@logging_options
@click.pass_context
def batch_cli(ctx: click.Context, config_path: Path | None, test_file: Path | None, **kwargs):
    """Run every test once and print a report (non-interactive mode)."""
    setup_logging_from_context(
        ctx,
        local_log_level=kwargs.get("log_level"),
        local_log_file=kwargs.get("log_file"),
        local_json_logs=kwargs.get("json_logs"),
        headless_mode=True,
    )

    try:
        config = config_from_options(config_path, kwargs)
        tests = read_tests(test_file)
    except TsqlrError as e:
        log.error("Startup failed", error=str(e))
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    apply_config_log_level(ctx, config, config_path, kwargs, headless_mode=True)

    log.info("Initializing batch run...", tests=len(tests))

    capture = DiagnosticCapture()
    executor = MssqlExecutor(config.database, config.runner, capture)
    try:
        executor.open()
    except TsqlrError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    try:
        exit_code = _run_headless(tests, executor, capture)
    finally:
        executor.close()

    render_report(tests, Console(file=sys.stdout))

    if exit_code == 0 and any(test.status != TestStatus.PASS for test in tests):
        exit_code = 1
    log.info("'batch' command finished.", exit_code=exit_code)
    if exit_code != 0:
        ctx.exit(exit_code)

# 🔼⚙️
