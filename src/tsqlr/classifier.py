#
# src/tsqlr/classifier.py
#
"""
Turns the raw output of a tSQLt run into a TestStatus.

tSQLt interleaves free-form output (PRINT statements, failure messages) with a
fixed-format summary section. Everything before the summary section is only
interesting if something went wrong; the final summary line is the single
source of truth for the counts.
"""

import re

import structlog
from attrs import define, field

from tsqlr.exceptions import ClassificationError
from tsqlr.state import Test, TestStatus

log = structlog.get_logger("classifier")

EXECUTION_SUMMARY_MARKER = "|Test Execution Summary|"
SUMMARY_MARKER = "Test Case Summary"
SUMMARY_LINE_MARKER = f"{SUMMARY_MARKER}:"
SUMMARY_PATTERN = re.compile(
    r"^Test Case Summary: (\d+) test case\(s\) executed, (\d+) succeeded, "
    r"(\d+) skipped, (\d+) failed, (\d+) errored\.",
    re.MULTILINE,
)


@define(frozen=True, slots=True)
class Classification:
    """Final status of a run plus the lines worth showing."""

    status: TestStatus
    lines: list[str] = field(factory=list)


@define(frozen=True, slots=True)
class Summary:
    """The five counters of a `Test Case Summary:` line, kept as strings."""

    total: str
    succeeded: str
    skipped: str
    failed: str
    errored: str
    text: str


def lines_before_summary(lines: list[str]) -> list[str]:
    """Return every line preceding the first execution summary marker."""
    collected = []
    for line in lines:
        if EXECUTION_SUMMARY_MARKER in line:
            break
        collected.append(line)
    return collected


def find_summary_line(lines: list[str]) -> str | None:
    """Return the last line carrying the summary marker."""
    summary_line = None
    for line in lines:
        if SUMMARY_LINE_MARKER in line:
            summary_line = line
    return summary_line


def parse_summary(line: str) -> Summary:
    """Parse the counters out of a summary line."""
    match = SUMMARY_PATTERN.search(line)
    if match is None:
        raise ClassificationError(f"Failed to parse summary: {line}", TestStatus.UNKNOWN)
    return Summary(*match.groups(), text=match.group(0))


def classify(test: Test, lines: list[str]) -> Classification:
    """
    Decide the outcome of `test` from its captured `lines`.

    Raises:
        ClassificationError: no lines were captured, the summary is missing
            or malformed, or the counts match no known outcome.
    """
    if test.is_suite:
        return _classify_suite(test, lines)
    return _classify_case(test, lines)


def _classify_suite(test: Test, lines: list[str]) -> Classification:
    if not lines:
        raise ClassificationError(f"no results for suite: {test}", TestStatus.ERROR)

    error_lines = lines_before_summary(lines)
    if error_lines:
        return Classification(TestStatus.FAIL, error_lines)
    return Classification(TestStatus.PASS)


def _classify_case(test: Test, lines: list[str]) -> Classification:
    if not lines:
        raise ClassificationError(f"no results for test: {test}", TestStatus.ERROR)

    output_lines = lines_before_summary(lines)

    # Usually the last line, but confirm rather than assume.
    summary_line = find_summary_line(lines)
    if summary_line is None:
        raise ClassificationError(
            f"Failed to find summary line: {SUMMARY_LINE_MARKER}", TestStatus.ERROR
        )

    summary = parse_summary(summary_line)
    total = summary.total
    log.debug("Parsed test summary", test=str(test), summary=summary.text)

    if total == "0":
        return Classification(TestStatus.MISSING, output_lines)
    if total == summary.succeeded:
        return Classification(TestStatus.PASS)
    if total == summary.skipped:
        return Classification(TestStatus.MISSING, output_lines)
    if total == summary.failed:
        return Classification(TestStatus.FAIL, output_lines)
    if total == summary.errored:
        return Classification(TestStatus.ERROR, output_lines)

    raise ClassificationError(f"Unknown result: {summary.text}", TestStatus.UNKNOWN)

# 🔼⚙️
