# tests/unit/test_logging.py

import logging
from pathlib import Path

import structlog

from tsqlr.telemetry import setup_logging
from tsqlr.telemetry.logger.processors import LOG_EMOJIS, add_emoji_processor, remove_extra_keys_processor


def test_emoji_from_key() -> None:
    event = add_emoji_processor(None, "info", {"event": "Connected", "emoji_key": "connect"})
    assert event["event"] == f"{LOG_EMOJIS['connect']} Connected"


def test_emoji_from_level() -> None:
    event = add_emoji_processor(None, "warning", {"event": "careful"})
    assert event["event"] == f"{LOG_EMOJIS[logging.WARNING]} careful"


def test_unknown_emoji_key_falls_back() -> None:
    event = add_emoji_processor(None, "info", {"event": "x", "emoji_key": "nope"})
    assert event["event"].startswith(LOG_EMOJIS["general"])


def test_emoji_key_removed() -> None:
    assert remove_extra_keys_processor(None, "info", {"event": "x", "emoji_key": "run"}) == {"event": "x"}


def test_tui_mode_has_no_console_handler(tmp_path: Path) -> None:
    log_file = tmp_path / "tsqlr.log"

    setup_logging(level=logging.DEBUG, log_file=str(log_file), tui_mode=True)
    structlog.get_logger("tests.logging").info("hello file", emoji_key="run")

    handlers = logging.getLogger().handlers
    assert all(isinstance(h, logging.FileHandler) for h in handlers)
    for handler in handlers:
        handler.flush()
    assert "hello file" in log_file.read_text(encoding="utf-8")

# 🔼⚙️
