# src/tsqlr/runtime/tui_interface.py

"""
Provides a safe interface for notifying the Textual TUI about test updates.
"""

from typing import TYPE_CHECKING, Optional

import structlog

from tsqlr.state import Test
from tsqlr.telemetry import StructLogger

# Conditional imports for TUI components to avoid hard dependency
try:
    if TYPE_CHECKING:
        from tsqlr.tui.app import TsqlrTuiApp
    from tsqlr.tui.messages import TestUpdated
    TEXTUAL_AVAILABLE = True
except ImportError:
    TEXTUAL_AVAILABLE = False
    TsqlrTuiApp = None  # type: ignore
    TestUpdated = None  # type: ignore

log: StructLogger = structlog.get_logger("runtime.tui_interface")


class TUIInterface:
    """A bridge for posting runner notifications to the Textual UI."""

    def __init__(self, app: Optional["TsqlrTuiApp"]):
        self.app = app
        self.is_active = app is not None and TEXTUAL_AVAILABLE
        if self.is_active:
            log.debug("TUI Interface initialized and active.")

    def post_test_update(self, test: Test) -> None:
        """Tell the TUI that `test` changed; it reads the new state itself."""
        if not self.is_active or not self.app or not TestUpdated:
            return

        try:
            self.app.post_message(TestUpdated(test.identity))
        except Exception as e:
            # This log won't go to the TUI to prevent loops, but will go to file if configured.
            log.warning("Failed to post test update to TUI", error=str(e), exc_info=False)

# 🔼⚙️
