# src/tcrwatch/runtime/debouncer.py
"""
Time-window debounce for accepted change events.
"""
from datetime import UTC, datetime

import structlog

from tcrwatch.telemetry import StructLogger

log: StructLogger = structlog.get_logger("runtime.debouncer")

DEBOUNCE_INTERVAL_SECONDS = 1.0


class Debouncer:
    """
    Rejects events arriving within `interval_seconds` of the last accepted one.

    Not thread-safe; call only from the serialized event-processing path.
    """

    def __init__(self, interval_seconds: float = DEBOUNCE_INTERVAL_SECONDS, start_time: datetime | None = None):
        self.interval_seconds = interval_seconds
        self.last_accepted_time: datetime = start_time or datetime.now(UTC)

    def accept(self, event_time: datetime) -> bool:
        delta = (event_time - self.last_accepted_time).total_seconds()
        if delta < self.interval_seconds:
            log.debug("Event debounced", delta_seconds=round(delta, 3), interval=self.interval_seconds)
            return False
        self.last_accepted_time = event_time
        return True
