#
# src/tsqlr/testlist.py
#
"""
Reads the list of tests to run.

One test per line, either ``Suite.TestName`` or just ``Suite`` to run a whole
suite. Blank lines are ignored.
"""

from collections.abc import Iterable
from pathlib import Path
from typing import TextIO

import structlog

from tsqlr.exceptions import TestListError
from tsqlr.state import Test

log = structlog.get_logger("testlist")

BOM = "\ufeff"


def parse_test_line(line: str) -> Test | None:
    """Parse a single line; returns None for blank lines."""
    line = line.strip().lstrip(BOM).strip()
    if not line:
        return None

    pieces = line.split(".")
    if len(pieces) == 1:
        return Test(suite=pieces[0])
    if len(pieces) == 2 and pieces[0]:
        return Test(suite=pieces[0], name=pieces[1])
    raise TestListError("invalid test line", line=line)


def parse_test_lines(lines: Iterable[str]) -> list[Test]:
    """Parse every line of a test list, preserving order."""
    tests = []
    for line in lines:
        test = parse_test_line(line)
        if test is not None:
            tests.append(test)

    if not tests:
        raise TestListError("no tests found")

    log.debug("Parsed test list", count=len(tests))
    return tests


def load_tests(test_file: Path | None, stdin: TextIO) -> list[Test]:
    """Load tests from `test_file`, or from `stdin` when no file is given."""
    if test_file is None:
        log.debug("Reading test list from stdin")
        return parse_test_lines(stdin)

    try:
        with test_file.open(encoding="utf-8") as handle:
            return parse_test_lines(handle)
    except FileNotFoundError as e:
        raise TestListError("test file not found", line=str(test_file)) from e
    except OSError as e:
        raise TestListError(f"failed to read test file '{test_file}': {e}") from e

# 🔼⚙️
