#
# src/tsqlr/exceptions.py
#
"""
Custom exceptions for tsqlr.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tsqlr.state import TestStatus


class TsqlrError(Exception):
    """Base class for all tsqlr errors."""

    pass


class ConfigurationError(TsqlrError):
    """Raised when configuration is missing or invalid."""

    pass


class TestListError(TsqlrError):
    """Raised when the input test list cannot be read or parsed."""

    __test__ = False

    def __init__(self, message: str, line: str | None = None):
        self.line = line
        full_message = message if line is None else f"{message}: {line}"
        super().__init__(full_message)


class ConnectionSetupError(TsqlrError):
    """Raised when the database connection cannot be established."""

    def __init__(self, message: str, server: str | None = None, details: Exception | None = None):
        self.server = server
        self.details = details
        full_message = message
        if server:
            full_message += f" (Server: '{server}')"
        super().__init__(full_message)
        if details and hasattr(self, "add_note"):
            self.add_note(f"Original error: {type(details).__name__}: {details}")


class ExecutionError(TsqlrError):
    """
    Raised by an executor when the underlying test call fails.

    `message` is the bare text reported by the server. The string form carries
    the transport prefix, e.g. ``mssql: Test Case Summary: ...``.
    """

    def __init__(self, message: str, transport: str | None = None, number: int | None = None):
        self.message = message
        self.transport = transport
        self.number = number
        super().__init__(f"{transport}: {message}" if transport else message)


class ClassificationError(TsqlrError):
    """Raised when captured output cannot be turned into an outcome."""

    def __init__(self, message: str, status: "TestStatus"):
        self.message = message
        self.status = status
        super().__init__(message)

# 🔼⚙️
