# src/tsqlr/telemetry/logger/processors.py

"""
Custom structlog processors for tsqlr.
"""

import logging

from structlog.typing import EventDict, WrappedLogger

LOG_EMOJIS = {
    logging.DEBUG: "🐛",
    logging.INFO: "ℹ️",
    logging.WARNING: "⚠️",
    logging.ERROR: "❌",
    logging.CRITICAL: "💥",
    "connect": "🔌",
    "run": "🧪",
    "pass": "✅",
    "fail": "🚫",
    "general": "➡️",
}


def add_emoji_processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Prefix the event with an emoji chosen by `emoji_key` or by level."""
    emoji_key = event_dict.get("emoji_key")
    if emoji_key is not None:
        emoji = LOG_EMOJIS.get(emoji_key, LOG_EMOJIS["general"])
    else:
        level = logging.getLevelName(method_name.upper())
        emoji = LOG_EMOJIS.get(level, LOG_EMOJIS["general"])

    event = event_dict.get("event")
    if isinstance(event, str):
        event_dict["event"] = f"{emoji} {event}"
    return event_dict


def remove_extra_keys_processor(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Drop processor-only keys before rendering."""
    event_dict.pop("emoji_key", None)
    return event_dict

# 🔼⚙️
