# src/tsqlr/state.py
#
"""
Defines the outcome model for tests run by tsqlr.
"""

from enum import Enum, auto

import structlog
from attrs import field, mutable

# Logger specific to state management
log: structlog.stdlib.BoundLogger = structlog.get_logger("state")


class TestStatus(Enum):
    """Enumeration of possible outcomes for a test or suite."""

    __test__ = False

    PENDING = auto()  # Loaded, never run.
    RUNNING = auto()  # Queued or executing.
    PASS = auto()
    FAIL = auto()
    ERROR = auto()  # Execution or classification failed.
    MISSING = auto()  # Zero test cases executed, or all were skipped.
    UNKNOWN = auto()  # Output did not match any recognized shape.

    @property
    def label(self) -> str:
        return self.name

    @property
    def is_terminal(self) -> bool:
        return self not in (TestStatus.PENDING, TestStatus.RUNNING)


# Rich styles used when rendering a status label
STATUS_STYLE_MAP = {
    TestStatus.RUNNING: "bold #FFF000",
    TestStatus.PASS: "bold #00FF00",
    TestStatus.FAIL: "bold #FF0000",
    TestStatus.ERROR: "bold #FF8000",
}


def status_style(status: TestStatus) -> str:
    """Return the rich style for a status label."""
    return STATUS_STYLE_MAP.get(status, "")


@mutable(slots=True, eq=False)
class Test:
    """
    A single tSQLt test case, or a whole suite when `name` is empty.

    Instances are shared by reference between the view and the runner and
    compare by identity.
    """

    __test__ = False

    suite: str = field()
    name: str = field(default="")
    status: TestStatus = field(default=TestStatus.PENDING)
    results: list[str] = field(factory=list)

    @suite.validator
    def _check_suite(self, attribute, value: str) -> None:
        if not value:
            raise ValueError("Test suite must be a non-empty string")

    @property
    def is_suite(self) -> bool:
        return self.name == ""

    @property
    def identity(self) -> str:
        if self.is_suite:
            return self.suite
        return f"{self.suite}.{self.name}"

    def __str__(self) -> str:
        return self.identity

    def mark_running(self) -> None:
        """Move the test into RUNNING for a (re)run."""
        old_status = self.status
        self.status = TestStatus.RUNNING
        log.debug(
            "Test status changed",
            test=self.identity,
            old_status=old_status.name,
            new_status=self.status.name,
        )

    def set_outcome(self, status: TestStatus, results: list[str]) -> None:
        """Store a terminal outcome and its retained lines."""
        self.status = status
        self.results = list(results)
        passed = status == TestStatus.PASS
        log_func = log.debug if passed else log.info
        log_func(
            "Test finished",
            emoji_key="pass" if passed else "fail",
            test=self.identity,
            status=status.name,
            result_lines=len(self.results),
        )

# 🔼⚙️
