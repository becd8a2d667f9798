#
# src/tsqlr/capture.py
#
"""
Collects the diagnostic messages emitted while a test runs.

The database driver delivers informational messages through a single
connection-wide hook with no notion of which test produced them. The runner
attaches the identity of the test it is executing before each call, and every
message delivered in the meantime is filed under that identity.
"""

from collections.abc import Iterator
from contextlib import contextmanager

import structlog

log = structlog.get_logger("capture")

# Characters stripped from both ends of every message
_TRIM_CHARS = " \t\r\n-"


class DiagnosticCapture:
    """Per-identity buckets of captured diagnostic lines."""

    def __init__(self) -> None:
        self._buckets: dict[str, list[str]] = {}
        self._current: str | None = None

    @property
    def current(self) -> str | None:
        """Identity currently attached, if any."""
        return self._current

    @contextmanager
    def attach(self, identity: str) -> Iterator[None]:
        """Attach `identity` so `record_current` files lines under it."""
        if self._current is not None:
            log.warning("Replacing attached identity", previous=self._current, identity=identity)
        self._current = identity
        try:
            yield
        finally:
            self._current = None

    def record(self, identity: str | None, raw_line: str) -> bool:
        """
        Append a line to the bucket for `identity`.

        Returns False when the line was discarded: framing noise (blank after
        trimming, or starting with '+') or no identity to file it under.
        """
        line = raw_line.strip(_TRIM_CHARS)
        if not line or line[0] == "+":
            return False
        if identity is None:
            log.debug("Dropping message outside a test run", message=line)
            return False

        self._buckets.setdefault(identity, []).append(line)
        return True

    def record_current(self, raw_line: str) -> bool:
        """Logging hook entry point: record under the attached identity."""
        return self.record(self._current, raw_line)

    def retrieve(self, identity: str) -> tuple[list[str], bool]:
        """Return a copy of the bucket and whether it exists."""
        bucket = self._buckets.get(identity)
        if bucket is None:
            return [], False
        return list(bucket), True

    def clear(self, identity: str) -> tuple[list[str], bool]:
        """Empty the bucket, keeping it registered, and return what was there."""
        bucket = self._buckets.get(identity)
        if bucket is None:
            return [], False
        self._buckets[identity] = []
        return bucket, True

# 🔼⚙️
