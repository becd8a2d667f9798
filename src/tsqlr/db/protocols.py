#
# src/tsqlr/db/protocols.py
#
"""
Defines the protocol for the call that executes a single test.
"""
from typing import Protocol, runtime_checkable


@runtime_checkable
class TestExecutor(Protocol):
    """
    Protocol for the blocking call that runs one test against the database.

    Implementations deliver diagnostic messages to a DiagnosticCapture while
    `execute` runs, from the thread that called it.
    """

    def execute(self, identity: str) -> None:
        """
        Runs the test or suite named `identity`.

        Raises:
            ExecutionError: the call failed. The message may itself carry the
                final summary text.
        """
        ...

    def close(self) -> None:
        """Closes the underlying connection; in-flight calls fail."""
        ...

# 🔼⚙️
