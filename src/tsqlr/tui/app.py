#
# src/tsqlr/tui/app.py
#
"""
Interactive test runner view: a table of tests and a detail pane per test.
"""

import asyncio
from collections.abc import Callable
from typing import Any, ClassVar

import structlog
from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.timer import Timer
from textual.widgets import DataTable, Footer, Header, Static, TextArea
from textual.widgets import Log as TextualLog
from textual.worker import Worker, WorkerState

from tsqlr.capture import DiagnosticCapture
from tsqlr.db.protocols import TestExecutor
from tsqlr.runtime.runner import TestRunner
from tsqlr.runtime.tui_interface import TUIInterface
from tsqlr.state import Test, status_style
from tsqlr.tui.messages import RedrawTick, TestUpdated
from tsqlr.tui.view_state import ViewMode, ViewState

log = structlog.get_logger("tui.app")

DEFAULT_REDRAW_INTERVAL = 0.2
SHUTDOWN_CHECK_INTERVAL = 0.5

# Actions and the modes they are enabled in
MODE_ACTIONS: dict[str, tuple[ViewMode, ...]] = {
    "open_detail": (ViewMode.LIST,),
    "remove_test": (ViewMode.LIST,),
    "close_detail": (ViewMode.DETAIL,),
    "next_test": (ViewMode.DETAIL,),
    "previous_test": (ViewMode.DETAIL,),
    "rerun": (ViewMode.LIST, ViewMode.DETAIL),
    "rerun_all": (ViewMode.LIST, ViewMode.DETAIL),
}


class TimerManager:
    """Manages application timers with proper lifecycle handling."""

    def __init__(self, app: "TsqlrTuiApp") -> None:
        self.app = app
        self._timers: dict[str, Timer] = {}
        self._logger = log.bind(component="TimerManager")

    def create_timer(
        self, name: str, interval: float, callback: Callable[[], Any], repeat: bool = True
    ) -> Timer:
        """Create a new timer, replacing any timer with the same name."""
        if name in self._timers:
            self.stop_timer(name)

        if repeat:
            timer = self.app.set_interval(interval, callback, name=name)
        else:
            timer = self.app.set_timer(interval, callback, name=name)
        self._timers[name] = timer
        self._logger.debug("Timer created", name=name, interval=interval, repeat=repeat)
        return timer

    def stop_timer(self, name: str) -> bool:
        """Stop a specific timer."""
        timer = self._timers.pop(name, None)
        if timer is None:
            return False

        try:
            timer.stop()
        except Exception as e:
            self._logger.error("Error stopping timer", name=name, error=str(e))
            return False
        self._logger.debug("Timer stopped", name=name)
        return True

    def stop_all_timers(self) -> None:
        """Stop all managed timers."""
        timer_names = list(self._timers.keys())
        for name in timer_names:
            self.stop_timer(name)
        self._logger.debug("All timers stopped", count=len(timer_names))


class TsqlrTuiApp(App):
    """A Textual app that runs tSQLt tests and shows their outcomes."""

    TITLE = "tsqlr"
    SUB_TITLE = "tSQLt test runner"
    BINDINGS: ClassVar[list] = [
        Binding("ctrl+c", "quit", "Quit", priority=True),
        ("space", "open_detail", "View Output"),
        ("escape,q", "close_detail", "Back"),
        Binding("down,j", "next_test", "Next Test", priority=True),
        Binding("up,k", "previous_test", "Previous Test", priority=True),
        ("r", "rerun", "Rerun"),
        ("R", "rerun_all", "Rerun All"),
        ("d,x", "remove_test", "Remove"),
    ]

    CSS = """
    Screen {
        layout: vertical;
        overflow: hidden;
    }

    #list_pane, #detail_pane, #input_pane {
        height: 1fr;
        border: round $accent;
        padding: 0 1;
    }

    #detail_pane, #input_pane {
        display: none;
    }

    #detail_title {
        height: 1;
        text-style: bold;
    }

    DataTable > .datatable--header {
        background: $accent-darken-2;
        color: $text;
    }
    """

    def __init__(
        self,
        tests: list[Test],
        executor: TestExecutor,
        capture: DiagnosticCapture,
        cli_shutdown_event: asyncio.Event,
        redraw_interval: float = DEFAULT_REDRAW_INTERVAL,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.view_state = ViewState(tests=tests)
        self._test_runner = TestRunner(executor, capture, TUIInterface(self))
        self._redraw_interval = redraw_interval
        self._shutdown_event = asyncio.Event()
        self._cli_shutdown_event = cli_shutdown_event
        self._worker: Worker | None = None
        self._timer_manager = TimerManager(self)
        self._is_shutting_down = False

    @property
    def runner(self) -> TestRunner:
        return self._test_runner

    def compose(self) -> ComposeResult:
        yield Header()

        with Container(id="list_pane"):
            yield DataTable(id="test-table", cursor_type="row", zebra_stripes=True)

        with Container(id="detail_pane"):
            yield Static(id="detail_title")
            yield TextualLog(id="detail_log", highlight=False)

        # Reserved for free-text input; no binding enters this mode yet.
        with Container(id="input_pane"):
            yield TextArea(id="input_area")

        yield Footer()

    def on_mount(self) -> None:
        """Build the table and start the runner worker."""
        log.info("TUI Mounted. Initializing UI components.", tests=len(self.view_state.tests))
        table = self.query_one("#test-table", DataTable)
        table.add_column("Status", width=8, key="status")
        table.add_column("Test/Suite", key="test")
        self._render_list()
        table.focus()

        self._worker = self.run_worker(
            self._run_tests, name="TestRunner", group="runner", exit_on_error=False
        )
        self._timer_manager.create_timer(
            "shutdown_check", SHUTDOWN_CHECK_INTERVAL, self._check_external_shutdown
        )

    async def _run_tests(self) -> None:
        log.info("Test runner worker started.")
        try:
            await self._test_runner.run(self._shutdown_event)
        finally:
            log.info("Test runner worker finished.")

    def _check_external_shutdown(self) -> None:
        """Check for external shutdown signals and quit if detected."""
        if self._cli_shutdown_event.is_set() and not self._is_shutting_down:
            log.warning("External shutdown detected (CLI signal). Triggering quit.")
            self.action_quit()

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        """Exit with an error if the runner worker stops on its own."""
        if event.worker != self._worker or event.state not in (WorkerState.SUCCESS, WorkerState.ERROR):
            return
        log.info(f"Test runner worker has finished with state: {event.state!r}.")
        if self._is_shutting_down:
            return

        error = getattr(event.worker, "error", None)
        log.error("Test runner stopped unexpectedly. Exiting.", error=str(error))
        self._is_shutting_down = True
        self._timer_manager.stop_all_timers()
        self.exit(return_code=1, message=f"Test runner stopped unexpectedly: {error}")

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        """Enable each action only in the modes it applies to."""
        modes = MODE_ACTIONS.get(action)
        if modes is None:
            return True
        return self.view_state.mode in modes

    # Action Methods
    def action_open_detail(self) -> None:
        """Show the output of the highlighted test."""
        self._sync_cursor()
        if self.view_state.open():
            self._apply_mode()
            self._render_detail()

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        if self.view_state.mode == ViewMode.LIST:
            self.action_open_detail()

    def action_close_detail(self) -> None:
        """Return to the test table."""
        if self.view_state.close():
            self._apply_mode()
            self._render_list()

    def action_next_test(self) -> None:
        self._move_detail(1)

    def action_previous_test(self) -> None:
        self._move_detail(-1)

    def _move_detail(self, delta: int) -> None:
        if self.view_state.move(delta):
            try:
                self.query_one("#test-table", DataTable).move_cursor(row=self.view_state.cursor)
            except Exception as e:
                log.error("Failed to move table cursor", error=str(e))
            self._render_detail()

    async def action_rerun(self) -> None:
        """Rerun the highlighted (or open) test."""
        self._sync_cursor()
        test = self.view_state.prepare_rerun(self.view_state.cursor)
        if test is None:
            return
        self._request_redraw()
        # Blocks while the runner is busy: at most one test executes at a time.
        await self._test_runner.submit(test)

    def action_rerun_all(self) -> None:
        """Rerun every test in list order without blocking input."""
        self._sync_cursor()
        tests = self.view_state.prepare_rerun_all()
        if not tests:
            return
        log.info("Rerunning all tests", count=len(tests))
        self._request_redraw()
        self.run_worker(self._test_runner.submit_all(tests), name="submit_all", group="submit")

    def action_remove_test(self) -> None:
        """Remove the highlighted test from the list."""
        self._sync_cursor()
        if self.view_state.remove():
            self._render_list()

    def action_quit(self) -> None:
        """Initiates a graceful shutdown of the application."""
        if self._is_shutting_down:
            return

        self._is_shutting_down = True
        log.info("Quit action triggered. Closing connection and exiting.")
        self._timer_manager.stop_all_timers()

        # Closing the connection makes any in-flight test call fail.
        try:
            self._test_runner.close()
        except Exception as e:
            log.error("Failed to close test executor", error=str(e))

        if not self._shutdown_event.is_set():
            self._shutdown_event.set()
        if not self._cli_shutdown_event.is_set():
            self._cli_shutdown_event.set()

        self.exit(0)

    # Message Handlers
    def on_test_updated(self, message: TestUpdated) -> None:
        log.debug("TUI on_test_updated received", test=message.identity)
        self._request_redraw()

    def on_redraw_tick(self, message: RedrawTick) -> None:
        self.view_state.end_redraw()
        self._redraw()

    # Helper Methods
    def _request_redraw(self) -> None:
        """Redraw now unless a redraw is already pending for this interval."""
        if not self.view_state.begin_redraw():
            return
        self._redraw()
        self._timer_manager.create_timer(
            "redraw",
            self._redraw_interval,
            lambda: self.post_message(RedrawTick()),
            repeat=False,
        )

    def _redraw(self) -> None:
        if self.view_state.mode == ViewMode.LIST:
            self._sync_cursor()
            self._render_list()
        elif self.view_state.mode == ViewMode.DETAIL:
            self._render_detail()

    def _sync_cursor(self) -> None:
        """Pick up cursor moves the table handled on its own."""
        if self.view_state.mode != ViewMode.LIST:
            return
        try:
            self.view_state.cursor = self.query_one("#test-table", DataTable).cursor_row
        except Exception as e:
            log.error("Failed to read table cursor", error=str(e))

    def _render_list(self) -> None:
        try:
            table = self.query_one("#test-table", DataTable)
            table.clear()
            for status, identity in self.view_state.rows():
                table.add_row(Text(status.label, style=status_style(status)), identity)
            if table.row_count:
                table.move_cursor(row=min(self.view_state.cursor, table.row_count - 1))
        except Exception as e:
            log.error("Failed to update test table", error=str(e))

    def _render_detail(self) -> None:
        detail = self.view_state.detail()
        if detail is None:
            return
        identity, status, content = detail
        try:
            title = Text.assemble((status.label, status_style(status)), " | ", identity)
            self.query_one("#detail_title", Static).update(title)
            detail_log = self.query_one("#detail_log", TextualLog)
            detail_log.clear()
            detail_log.write_lines(content.split("\n"))
        except Exception as e:
            log.error("Error updating test detail", error=str(e))

    def _apply_mode(self) -> None:
        """Show the pane for the current mode and focus its widget."""
        panes = {
            ViewMode.LIST: ("#list_pane", "#test-table"),
            ViewMode.DETAIL: ("#detail_pane", "#detail_log"),
            ViewMode.INPUT: ("#input_pane", "#input_area"),
        }
        try:
            for mode, (pane_id, _) in panes.items():
                pane = self.query_one(pane_id, Container)
                pane.styles.display = "block" if mode == self.view_state.mode else "none"
            self.query_one(panes[self.view_state.mode][1]).focus()
        except Exception as e:
            log.error("Error switching view mode", error=str(e))

# 🖥️✨
