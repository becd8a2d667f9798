# tests/unit/test_classifier.py

"""
Tests for the outcome classifier.
"""

import pytest

from tsqlr.classifier import classify, find_summary_line, lines_before_summary, parse_summary
from tsqlr.exceptions import ClassificationError
from tsqlr.state import Test, TestStatus

TABLE = [
    "|Test Execution Summary|",
    "|No|Test Case Name                    |Dur(ms)|Result |",
    "|1 |[DemoSuite].[test that foo passes]|     16|Success|",
]


def summary(total: int, succeeded: int = 0, skipped: int = 0, failed: int = 0, errored: int = 0) -> str:
    return (
        f"Test Case Summary: {total} test case(s) executed, {succeeded} succeeded, "
        f"{skipped} skipped, {failed} failed, {errored} errored."
    )


@pytest.fixture
def case() -> Test:
    return Test("DemoSuite", "[test that foo passes]")


@pytest.fixture
def suite() -> Test:
    return Test("DemoSuite")


class TestNoResults:
    def test_case_without_lines_is_error(self, case: Test) -> None:
        with pytest.raises(ClassificationError) as exc_info:
            classify(case, [])
        assert exc_info.value.status == TestStatus.ERROR
        assert exc_info.value.message == "no results for test: DemoSuite.[test that foo passes]"

    def test_suite_without_lines_is_error(self, suite: Test) -> None:
        with pytest.raises(ClassificationError) as exc_info:
            classify(suite, [])
        assert exc_info.value.status == TestStatus.ERROR
        assert exc_info.value.message == "no results for suite: DemoSuite"


class TestSingleCase:
    def test_pass_retains_nothing(self, case: Test) -> None:
        result = classify(case, [*TABLE, summary(1, succeeded=1)])
        assert result.status == TestStatus.PASS
        assert result.lines == []

    def test_pass_with_many_cases(self, case: Test) -> None:
        result = classify(case, ["noise", *TABLE, summary(3, succeeded=3)])
        assert result.status == TestStatus.PASS
        assert result.lines == []

    def test_fail_retains_lines_before_marker(self, case: Test) -> None:
        output = [
            "[DemoSuite].[test that foo fails] failed: (Failure) Expected: <1> but was: <0>",
            "PRINT output",
        ]
        result = classify(case, [*output, *TABLE, summary(1, failed=1)])
        assert result.status == TestStatus.FAIL
        assert result.lines == output

    def test_error(self, case: Test) -> None:
        output = ["[DemoSuite].[test that bar errors] failed: (Error) Message: Divide by zero error encountered."]
        result = classify(case, [*output, *TABLE, summary(1, errored=1)])
        assert result.status == TestStatus.ERROR
        assert result.lines == output

    def test_all_skipped_is_missing(self, case: Test) -> None:
        result = classify(case, ["skipped because", *TABLE, summary(1, skipped=1)])
        assert result.status == TestStatus.MISSING
        assert result.lines == ["skipped because"]

    @pytest.mark.parametrize(
        "line",
        [summary(0), summary(0, succeeded=0, failed=0), summary(0, skipped=0, errored=0)],
    )
    def test_zero_total_is_missing(self, case: Test, line: str) -> None:
        result = classify(case, ["nothing ran", *TABLE, line])
        assert result.status == TestStatus.MISSING
        assert result.lines == ["nothing ran"]

    def test_missing_summary_is_error(self, case: Test) -> None:
        with pytest.raises(ClassificationError) as exc_info:
            classify(case, ["just some output", *TABLE])
        assert exc_info.value.status == TestStatus.ERROR
        assert "Test Case Summary:" in exc_info.value.message

    def test_malformed_summary_is_unknown(self, case: Test) -> None:
        line = "Test Case Summary: lots of test case(s) executed"
        with pytest.raises(ClassificationError) as exc_info:
            classify(case, [*TABLE, line])
        assert exc_info.value.status == TestStatus.UNKNOWN
        assert line in exc_info.value.message

    def test_mixed_counts_are_unknown(self, case: Test) -> None:
        line = summary(2, succeeded=1, failed=1)
        with pytest.raises(ClassificationError) as exc_info:
            classify(case, [*TABLE, line])
        assert exc_info.value.status == TestStatus.UNKNOWN
        assert exc_info.value.message == f"Unknown result: {line}"

    def test_last_summary_line_wins(self, case: Test) -> None:
        lines = [summary(1, failed=1), *TABLE, summary(1, succeeded=1)]
        assert classify(case, lines).status == TestStatus.PASS


class TestSuite:
    def test_no_lines_before_marker_is_pass(self, suite: Test) -> None:
        result = classify(suite, [*TABLE, summary(2, succeeded=2)])
        assert result.status == TestStatus.PASS
        assert result.lines == []

    def test_lines_before_marker_are_failures(self, suite: Test) -> None:
        failure = "[DemoSuite].[test that foo fails] failed: (Failure) Expected: <1> but was: <0>"
        result = classify(suite, [failure, *TABLE, summary(2, succeeded=1, failed=1)])
        assert result.status == TestStatus.FAIL
        assert result.lines == [failure]

    def test_suite_ignores_summary_counts(self, suite: Test) -> None:
        result = classify(suite, ["|Test Execution Summary|"])
        assert result.status == TestStatus.PASS


class TestHelpers:
    def test_lines_before_summary_without_marker(self) -> None:
        assert lines_before_summary(["a", "b"]) == ["a", "b"]

    def test_find_summary_line_none(self) -> None:
        assert find_summary_line(["a"]) is None

    def test_parse_summary_counters(self) -> None:
        parsed = parse_summary(summary(5, succeeded=1, skipped=1, failed=2, errored=1))
        assert (parsed.total, parsed.succeeded, parsed.skipped, parsed.failed, parsed.errored) == (
            "5", "1", "1", "2", "1",
        )

# 🔼⚙️
