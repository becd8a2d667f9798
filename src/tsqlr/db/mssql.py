#
# src/tsqlr/db/mssql.py
#
"""
Runs tSQLt tests on SQL Server through pymssql.

tSQLt reports through informational messages (PRINT / low-severity RAISERROR),
which pymssql hands to a connection-level message handler. When any test fails,
tSQLt.Run additionally raises an error whose text is the final summary line.
"""
import pymssql
import structlog

from tsqlr.capture import DiagnosticCapture
from tsqlr.config.models import DatabaseConfig, RunnerConfig
from tsqlr.db.protocols import TestExecutor
from tsqlr.exceptions import ConnectionSetupError, ExecutionError

log = structlog.get_logger("db.mssql")

TRANSPORT = "mssql"
RUN_STATEMENT = "EXEC tSQLt.Run %s"
SESSION_INIT_SQL = "SET NOCOUNT ON;"
# pymssql appends this DB-Lib trailer to every server error message
DBLIB_TRAILER = "DB-Lib error message"


def _decode(value: bytes | str) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def error_text(exc: BaseException) -> tuple[str, int | None]:
    """
    Extract the server message (and number) from a pymssql error.

    pymssql errors usually carry ``(number, message_bytes)`` in ``args``.
    """
    number = None
    if len(exc.args) == 2 and isinstance(exc.args[1], bytes | str):
        raw_number, raw_text = exc.args
        number = raw_number if isinstance(raw_number, int) else None
        text = _decode(raw_text)
    else:
        text = str(exc)
    text, _, _ = text.partition(DBLIB_TRAILER)
    return text.strip(), number


class MssqlExecutor(TestExecutor):
    """Implements the TestExecutor protocol against a pymssql connection."""

    def __init__(
        self,
        db_config: DatabaseConfig,
        runner_config: RunnerConfig,
        capture: DiagnosticCapture,
    ):
        self._db_config = db_config
        self._runner_config = runner_config
        self._capture = capture
        self._conn: pymssql.Connection | None = None
        self._log = log.bind(server=db_config.server, database=db_config.database)

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def open(self) -> None:
        """Connect, install the message handler and verify the session."""
        self._log.info("Connecting to database server")
        try:
            conn = pymssql.connect(
                server=self._db_config.server,
                user=self._db_config.user,
                password=self._db_config.password,
                database=self._db_config.database,
                port=str(self._db_config.port),
                login_timeout=self._runner_config.login_timeout,
                timeout=self._runner_config.query_timeout,
                autocommit=True,
            )
        except pymssql.Error as e:
            message, _ = error_text(e)
            self._log.error("Failed to connect", error=message)
            raise ConnectionSetupError(
                f"Failed to connect: {message}", server=self._db_config.server, details=e
            ) from e

        # The message handler lives on the low-level _mssql connection.
        conn._conn.set_msghandler(self._on_message)
        self._conn = conn

        try:
            cursor = conn.cursor()
            cursor.execute(SESSION_INIT_SQL)
            cursor.execute("SELECT 1")
            cursor.fetchall()
        except pymssql.Error as e:
            message, _ = error_text(e)
            self.close()
            raise ConnectionSetupError(
                f"Connection check failed: {message}", server=self._db_config.server, details=e
            ) from e

        self._log.info("Connected to database server", emoji_key="connect")

    def _on_message(self, msgstate, severity, srvname, procname, line, msgtext) -> None:
        """pymssql message handler: forward every message to the capture."""
        self._capture.record_current(_decode(msgtext))

    def execute(self, identity: str) -> None:
        """Runs `EXEC tSQLt.Run` for `identity`."""
        if self._conn is None:
            raise ExecutionError("connection is closed", transport=TRANSPORT)

        self._log.debug("Executing test", test=identity)
        try:
            cursor = self._conn.cursor()
            cursor.execute(RUN_STATEMENT, (identity,))
            # Drain any result sets so every message is delivered.
            while cursor.nextset():
                pass
        except pymssql.Error as e:
            message, number = error_text(e)
            self._log.debug("Test call raised", test=identity, error=message, number=number)
            raise ExecutionError(message, transport=TRANSPORT, number=number) from e

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        conn, self._conn = self._conn, None
        if conn is None:
            return
        try:
            conn.close()
            self._log.info("Database connection closed")
        except pymssql.Error as e:
            self._log.warning("Error closing database connection", error=str(e))

# 🔼⚙️
