# src/tcrwatch/state.py
#
"""
Defines the process-wide run state shared by the watch loop and its UI tickers.
"""

from datetime import UTC, datetime
from enum import Enum, auto

import structlog
from attrs import field, mutable

log: structlog.stdlib.BoundLogger = structlog.get_logger("state")


class RunStatus(Enum):
    """Enumeration of the phases one accepted change event moves through."""

    IDLE = auto()  # Waiting for the next change.
    RESOLVING = auto()  # Locating the owning project and test filter.
    TESTING = auto()  # Test subprocess in flight.
    COMMITTING = auto()  # Prompting for a message, staging, committing, pushing.
    REVERTING = auto()  # Cleaning and restoring the working tree.


STATUS_EMOJI_MAP = {
    RunStatus.IDLE: "👀",
    RunStatus.RESOLVING: "🔎",
    RunStatus.TESTING: "🧪",
    RunStatus.COMMITTING: "💾",
    RunStatus.REVERTING: "⏪",
}

SPINNER_FRAMES = ("|", "/", "-", "\\")


@mutable(slots=True)
class RunState:
    """
    Holds the mutable decision state of one watch session.

    Only the event processor and the orchestrator mutate it, both from the
    event loop thread, so no locking is needed.
    """

    status: RunStatus = field(default=RunStatus.IDLE)
    paused: bool = field(default=False)
    test_run_in_progress: bool = field(default=False)
    last_accepted_event_time: datetime = field(factory=lambda: datetime.now(UTC))
    last_run_finished_at: datetime | None = field(default=None)
    current_file: str | None = field(default=None)
    last_outcome: str | None = field(default=None)
    runs_completed: int = field(default=0)
    spinner_index: int = field(default=0)
    display_status_emoji: str = field(default="❓")

    def __attrs_post_init__(self):
        self._update_display_emoji()
        log.debug("Initialized run state", status=self.status.name, paused=self.paused)

    @property
    def is_idle(self) -> bool:
        return self.status == RunStatus.IDLE and not self.test_run_in_progress

    def update_status(self, new_status: RunStatus) -> None:
        """Moves to a new phase, logging the transition."""
        old_status = self.status
        if old_status == new_status:
            return
        self.status = new_status
        self._update_display_emoji()
        log.debug("Run status changed", old_status=old_status.name, new_status=new_status.name)

    def record_accepted_event(self, event_time: datetime) -> None:
        self.last_accepted_event_time = event_time

    def begin_run(self, file_name: str) -> None:
        """Claims the single run slot for a change to `file_name`."""
        if self.test_run_in_progress:
            raise RuntimeError("A test run is already in progress")
        self.test_run_in_progress = True
        self.current_file = file_name
        self.update_status(RunStatus.RESOLVING)
        log.info("Run started", file=file_name)

    def finish_run(self, outcome: str | None = None) -> None:
        """Releases the run slot and returns to IDLE, whatever the outcome."""
        self.test_run_in_progress = False
        self.last_run_finished_at = datetime.now(UTC)
        self.last_outcome = outcome
        self.current_file = None
        if outcome is not None:
            self.runs_completed += 1
        self.update_status(RunStatus.IDLE)
        log.info("Run finished", outcome=outcome, runs_completed=self.runs_completed)

    def toggle_pause(self) -> bool:
        self.paused = not self.paused
        self._update_display_emoji()
        log.info("Toggled pause", paused=self.paused)
        return self.paused

    def advance_spinner(self) -> str:
        """Returns the next spinner frame."""
        self.spinner_index = (self.spinner_index + 1) % len(SPINNER_FRAMES)
        return SPINNER_FRAMES[self.spinner_index]

    def _update_display_emoji(self) -> None:
        if self.paused:
            self.display_status_emoji = "⏸️"
        else:
            self.display_status_emoji = STATUS_EMOJI_MAP.get(self.status, "❓")

# 🟢🔴
