#
# src/tsqlr/tui/messages.py
#
"""
Messages posted to the tsqlr TUI.
"""

from textual.message import Message


class TestUpdated(Message):
    """A test's status or results changed."""

    __test__ = False

    def __init__(self, identity: str | None = None) -> None:
        self.identity = identity
        super().__init__()


class RedrawTick(Message):
    """The redraw coalescing interval elapsed."""

    pass

# 🔼⚙️
