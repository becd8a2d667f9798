#
# src/tsqlr/tui/view_state.py
#
"""
Navigation state of the tsqlr TUI, independent of any widget.

The app translates key presses and runner notifications into calls on
ViewState and then renders whatever it reports.
"""

from enum import Enum, auto

import structlog
from attrs import field, mutable

from tsqlr.state import Test, TestStatus

log = structlog.get_logger("tui.view_state")

RUNNING_PLACEHOLDER = "Test running..."


class ViewMode(Enum):
    """Which pane the TUI is showing."""

    LIST = auto()  # Table of every test and its status.
    DETAIL = auto()  # Retained lines of one test.
    INPUT = auto()  # Reserved for free-text input; ignores all actions.


@mutable(slots=True)
class ViewState:
    """The test list plus cursor, mode and redraw bookkeeping."""

    tests: list[Test] = field(factory=list)
    cursor: int = field(default=0)
    mode: ViewMode = field(default=ViewMode.LIST)
    chosen: Test | None = field(default=None)
    updating: bool = field(default=False)

    @property
    def highlighted(self) -> Test | None:
        if 0 <= self.cursor < len(self.tests):
            return self.tests[self.cursor]
        return None

    def open(self) -> bool:
        """LIST -> DETAIL for the highlighted test."""
        if self.mode != ViewMode.LIST:
            return False
        test = self.highlighted
        if test is None:
            return False
        self.chosen = test
        self.mode = ViewMode.DETAIL
        log.debug("Opened test detail", test=test.identity)
        return True

    def close(self) -> bool:
        """DETAIL -> LIST."""
        if self.mode != ViewMode.DETAIL:
            return False
        self.mode = ViewMode.LIST
        self.chosen = None
        return True

    def move(self, delta: int) -> bool:
        """Move to a neighbouring test while staying in DETAIL."""
        if self.mode != ViewMode.DETAIL:
            return False
        target = self.cursor + delta
        if 0 <= target < len(self.tests):
            self.cursor = target
            self.chosen = self.tests[target]
        return True

    def prepare_rerun(self, index: int) -> Test | None:
        """
        Mark the test at `index` RUNNING and return it for submission.

        Returns None when there is nothing to submit: the index is out of
        range or the test is already RUNNING.
        """
        if self.mode == ViewMode.INPUT or not 0 <= index < len(self.tests):
            return None
        test = self.tests[index]
        if test.status == TestStatus.RUNNING:
            log.debug("Rerun ignored, test already running", test=test.identity)
            return None
        test.mark_running()
        return test

    def prepare_rerun_all(self) -> list[Test]:
        """Mark every test that is not running RUNNING, in list order."""
        if self.mode == ViewMode.INPUT:
            return []
        return [
            test for index in range(len(self.tests))
            if (test := self.prepare_rerun(index)) is not None
        ]

    def remove(self) -> bool:
        """Delete the highlighted row; the highlight moves up one row."""
        if self.mode != ViewMode.LIST or self.highlighted is None:
            return False
        removed = self.tests.pop(self.cursor)
        if self.cursor > 0:
            self.cursor -= 1
        log.debug("Removed test", test=removed.identity, remaining=len(self.tests))
        return True

    def begin_redraw(self) -> bool:
        """
        Claim the redraw slot for this interval.

        Returns False while a redraw is already pending; the pending redraw
        will pick up the newer state.
        """
        if self.updating:
            return False
        self.updating = True
        return True

    def end_redraw(self) -> None:
        self.updating = False

    def rows(self) -> list[tuple[TestStatus, str]]:
        """(status, identity) for every test, in list order."""
        return [(test.status, test.identity) for test in self.tests]

    def detail(self) -> tuple[str, TestStatus, str] | None:
        """(identity, status, content) for the open test."""
        test = self.chosen
        if test is None:
            return None
        if test.status == TestStatus.RUNNING:
            content = RUNNING_PLACEHOLDER
        else:
            content = "\n".join(test.results)
        return test.identity, test.status, content

# 🔼⚙️
