# src/tcrwatch/telemetry/logger/processors.py

"""
Custom structlog processors used by the tcrwatch logging pipeline.
"""

import logging
from typing import Any

from structlog.typing import EventDict, WrappedLogger

LOG_EMOJIS: dict[Any, str] = {
    logging.DEBUG: "🐛",
    logging.INFO: "ℹ️",
    logging.WARNING: "⚠️",
    logging.ERROR: "❌",
    logging.CRITICAL: "💥",
    "watch": "👀",
    "test": "🧪",
    "commit": "✅",
    "revert": "⏪",
    "path": "📁",
    "time": "⏱️",
}


def add_emoji_processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Prefixes the event with an emoji chosen by `emoji_key` or the log level."""
    key = event_dict.get("emoji_key")
    emoji = LOG_EMOJIS.get(key) if key else None
    if emoji is None:
        level_name = str(event_dict.get("level", method_name)).upper()
        emoji = LOG_EMOJIS.get(logging.getLevelName(level_name), "")
    event = event_dict.get("event")
    if emoji and isinstance(event, str) and not event.startswith(emoji):
        event_dict["event"] = f"{emoji} {event}"
    return event_dict


def remove_extra_keys_processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Strips helper keys and empty values added by upstream processors."""
    event_dict.pop("emoji_key", None)
    for key in [k for k, v in event_dict.items() if v is None and k != "event"]:
        event_dict.pop(key)
    return event_dict
