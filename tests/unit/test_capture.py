# tests/unit/test_capture.py

"""
Tests for DiagnosticCapture.
"""

import pytest

from tsqlr.capture import DiagnosticCapture


def test_record_trims_whitespace_and_dashes(capture: DiagnosticCapture) -> None:
    assert capture.record("S.T", "  -- hello world --\r\n")
    assert capture.retrieve("S.T") == (["hello world"], True)


@pytest.mark.parametrize("raw", ["", "   ", "-----------", "+----------+", "  +--+  "])
def test_record_drops_framing_lines(capture: DiagnosticCapture, raw: str) -> None:
    assert not capture.record("S.T", raw)
    assert capture.retrieve("S.T") == ([], False)


def test_record_without_identity_is_dropped(capture: DiagnosticCapture) -> None:
    assert not capture.record(None, "orphan")
    assert not capture.record_current("orphan")


def test_record_keeps_order(capture: DiagnosticCapture) -> None:
    for line in ["one", "two", "three"]:
        capture.record("S", line)
    assert capture.retrieve("S")[0] == ["one", "two", "three"]


def test_attach_routes_record_current(capture: DiagnosticCapture) -> None:
    with capture.attach("S.T"):
        assert capture.current == "S.T"
        capture.record_current("inside")
    capture.record_current("after")

    assert capture.current is None
    assert capture.retrieve("S.T") == (["inside"], True)


def test_attach_clears_identity_on_error(capture: DiagnosticCapture) -> None:
    with pytest.raises(RuntimeError), capture.attach("S.T"):
        raise RuntimeError("call failed")
    assert capture.current is None


def test_retrieve_returns_copy(capture: DiagnosticCapture) -> None:
    capture.record("S", "line")
    lines, _ = capture.retrieve("S")
    lines.append("mutated")
    assert capture.retrieve("S")[0] == ["line"]


def test_clear_keeps_bucket(capture: DiagnosticCapture) -> None:
    capture.record("S", "old")

    previous, found = capture.clear("S")

    assert (previous, found) == (["old"], True)
    assert capture.retrieve("S") == ([], True)


def test_clear_unknown_identity(capture: DiagnosticCapture) -> None:
    assert capture.clear("nope") == ([], False)
    assert capture.retrieve("nope") == ([], False)

# 🔼⚙️
