# tests/conftest.py

from collections.abc import Callable

import pytest

from tsqlr.capture import DiagnosticCapture
from tsqlr.exceptions import ExecutionError
from tsqlr.state import Test

PASS_OUTPUT = [
    "+----------------------+",
    "|Test Execution Summary|",
    "+----------------------+",
    "|No|Test Case Name|Dur(ms)|Result |",
    "|1 |[S].[T]       |      3|Success|",
    "-----------------------------------------------------------------------------",
    "Test Case Summary: 1 test case(s) executed, 1 succeeded, 0 skipped, 0 failed, 0 errored.",
    "-----------------------------------------------------------------------------",
]

FAIL_SUMMARY = "Test Case Summary: 1 test case(s) executed, 0 succeeded, 0 skipped, 1 failed, 0 errored."

FAIL_OUTPUT = [
    "[S].[T] failed: (Failure) Expected: <1> but was: <2>",
    "+----------------------+",
    "|Test Execution Summary|",
    "+----------------------+",
    "|No|Test Case Name|Dur(ms)|Result |",
    "|1 |[S].[T]       |      7|Failure|",
]


class FakeExecutor:
    """
    In-memory TestExecutor.

    `script` maps an identity to the lines it emits and, optionally, the
    error it raises afterwards. Messages go through `capture.record_current`
    exactly like the pymssql message handler.
    """

    def __init__(self, capture: DiagnosticCapture, script: dict | None = None):
        self.capture = capture
        self.script: dict[str, tuple[list[str], Exception | None]] = script or {}
        self.calls: list[str] = []
        self.closed = False
        self.before_execute: Callable[[str], None] | None = None

    def execute(self, identity: str) -> None:
        self.calls.append(identity)
        if self.before_execute is not None:
            self.before_execute(identity)
        lines, error = self.script.get(identity, ([], None))
        for line in lines:
            self.capture.record_current(line)
        if error is not None:
            raise error

    def open(self) -> None:
        self.closed = False

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def capture() -> DiagnosticCapture:
    return DiagnosticCapture()


@pytest.fixture
def fake_executor(capture: DiagnosticCapture) -> FakeExecutor:
    return FakeExecutor(capture)


@pytest.fixture
def sample_tests() -> list[Test]:
    return [Test("S", "T"), Test("S", "U"), Test("Other")]


@pytest.fixture
def pass_output() -> list[str]:
    return list(PASS_OUTPUT)


@pytest.fixture
def fail_output() -> list[str]:
    return list(FAIL_OUTPUT)


@pytest.fixture
def summary_error() -> ExecutionError:
    """The error tSQLt.Run raises when a test fails."""
    return ExecutionError(FAIL_SUMMARY, transport="mssql", number=50000)

# 🔼⚙️
