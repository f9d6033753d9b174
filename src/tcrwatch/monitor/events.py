# src/tcrwatch/monitor/events.py

"""
Filesystem change event model passed from the watchdog thread to the event loop.
"""

from datetime import UTC, datetime
from enum import Enum
from pathlib import Path

from attrs import define, field


class ChangeKind(Enum):
    CHANGED = "changed"
    CREATED = "created"
    DELETED = "deleted"
    RENAMED = "renamed"


# watchdog event_type -> ChangeKind; other types (opened, closed) are ignored
WATCHDOG_KIND_MAP: dict[str, ChangeKind] = {
    "modified": ChangeKind.CHANGED,
    "created": ChangeKind.CREATED,
    "deleted": ChangeKind.DELETED,
    "moved": ChangeKind.RENAMED,
}


@define(frozen=True, slots=True)
class ChangeEvent:
    """A single tracked-file change, consumed once by the debouncer."""

    full_path: Path = field()
    change_kind: ChangeKind = field()
    timestamp: datetime = field(factory=lambda: datetime.now(UTC))
    previous_path: Path | None = field(default=None)

    @property
    def file_name(self) -> str:
        return self.full_path.name
