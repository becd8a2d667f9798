# src/tsqlr/runtime/runner.py
"""
Serializes test execution: one tSQLt call in flight at any time.

The view submits test references into a single-slot queue. Submitting blocks
while the runner is busy, which bounds the load on the database no matter how
many reruns the operator requests.
"""
import asyncio

import structlog

from tsqlr.capture import DiagnosticCapture
from tsqlr.classifier import SUMMARY_MARKER, classify
from tsqlr.db.protocols import TestExecutor
from tsqlr.exceptions import ClassificationError, ExecutionError
from tsqlr.runtime.tui_interface import TUIInterface
from tsqlr.state import Test, TestStatus
from tsqlr.telemetry import StructLogger

log: StructLogger = structlog.get_logger("runtime.runner")


class TestRunner:
    """Consumes queued tests, runs them and records their outcomes."""

    __test__ = False

    def __init__(
        self,
        executor: TestExecutor,
        capture: DiagnosticCapture,
        tui: TUIInterface,
    ):
        self.executor = executor
        self.capture = capture
        self.tui = tui
        self.queue: asyncio.Queue[Test] = asyncio.Queue(maxsize=1)
        log.debug("TestRunner initialized.")

    async def submit(self, test: Test) -> None:
        """Queue `test` for execution, waiting while the queue is full."""
        log.debug("Submitting test", test=test.identity)
        await self.queue.put(test)

    async def submit_all(self, tests: list[Test]) -> None:
        """Queue every test in order."""
        for test in tests:
            await self.submit(test)

    async def run(self, shutdown_event: asyncio.Event) -> None:
        """Main consumption loop; exits when `shutdown_event` is set."""
        log.info("Test runner is running.")

        while not shutdown_event.is_set():
            # Gracefully wait for either a test or a shutdown signal
            get_task = asyncio.create_task(self.queue.get())
            shutdown_task = asyncio.create_task(shutdown_event.wait())
            try:
                done, _ = await asyncio.wait(
                    {get_task, shutdown_task}, return_when=asyncio.FIRST_COMPLETED
                )
            except asyncio.CancelledError:
                get_task.cancel()
                shutdown_task.cancel()
                raise

            if get_task not in done:
                get_task.cancel()
                break
            shutdown_task.cancel()

            test = get_task.result()
            try:
                await self.run_one(test)
            finally:
                self.queue.task_done()
            self.tui.post_test_update(test)

        log.info("Test runner stopped.", abandoned=self.queue.qsize())

    async def run_one(self, test: Test) -> None:
        """Execute `test` once and store its classified outcome on it."""
        identity = test.identity
        run_log = log.bind(test=identity)
        run_log.info("Running test", emoji_key="run")

        self.capture.clear(identity)

        call_error: ExecutionError | None = None
        try:
            with self.capture.attach(identity):
                await asyncio.to_thread(self.executor.execute, identity)
        except ExecutionError as e:
            call_error = e

        lines, found = self.capture.retrieve(identity)
        if not found:
            run_log.warning("No results captured")
            test.set_outcome(TestStatus.ERROR, [f"no results for test `{identity}`"])
            return

        if call_error is not None:
            if SUMMARY_MARKER not in call_error.message:
                run_log.warning("Test call failed", error=str(call_error))
                test.set_outcome(TestStatus.ERROR, [str(call_error)])
                return
            # tSQLt reports failing runs by raising the summary as an error.
            lines.append(call_error.message)

        try:
            classification = classify(test, lines)
        except ClassificationError as e:
            run_log.warning("Failed to classify test output", error=e.message, status=e.status.name)
            test.set_outcome(TestStatus.ERROR, [e.message, *lines])
            return

        test.set_outcome(classification.status, classification.lines)

    def close(self) -> None:
        """Close the executor so any in-flight call fails."""
        log.info("Closing test executor.")
        self.executor.close()

# 🔼⚙️
