# src/tcrwatch/runtime/console_interface.py

"""
Operator-facing console output: status line, elapsed time, outcome banners.
"""

from datetime import timedelta

import structlog
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from tcrwatch.telemetry import StructLogger
from tcrwatch.testing import Outcome, TestRunResult

log: StructLogger = structlog.get_logger("runtime.console_interface")

# Outcome -> (emoji, style, label)
OUTCOME_DISPLAY: dict[Outcome, tuple[str, str, str]] = {
    Outcome.NO_RESULTS: ("❔", "yellow", "No test results"),
    Outcome.NO_TESTS_FOUND: ("🔍", "yellow", "No tests matched the filter"),
    Outcome.SINGLE_NOT_IMPLEMENTED_ALLOWED: ("🚧", "bold cyan", "Only a NotImplementedException stub failed"),
    Outcome.TESTS_PASSED: ("✅", "bold green", "Tests passed"),
    Outcome.TESTS_FAILED: ("❌", "bold red", "Tests failed"),
    Outcome.BUILD_FAILED: ("🧱", "bold red", "Build failed"),
    Outcome.UNKNOWN: ("❓", "bold magenta", "Unrecognised test output"),
}

# Outcomes whose transcript is echoed so the operator can see why
ECHO_TRANSCRIPT = frozenset({Outcome.TESTS_FAILED, Outcome.BUILD_FAILED, Outcome.UNKNOWN})
TRANSCRIPT_TAIL_LINES = 40


def format_elapsed(elapsed: timedelta) -> str:
    total = elapsed.total_seconds()
    minutes, seconds = divmod(total, 60)
    if minutes >= 1:
        return f"{int(minutes)}:{seconds:04.1f}"
    return f"{seconds:.1f}s"


def transcript_tail(transcript: str, lines: int = TRANSCRIPT_TAIL_LINES) -> str:
    return "\n".join(transcript.rstrip().splitlines()[-lines:])


class ConsoleInterface:
    """Renders watch-loop feedback on a rich Console."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console(highlight=False)
        self._status_line_active = False

    def _status(self, text: str, style: str = "dim") -> None:
        if not self.console.is_terminal:
            return
        self.console.print(Text(f"\r{text}", style=style), end="")
        self._status_line_active = True

    def clear_status(self) -> None:
        if self._status_line_active:
            self.console.print("\r" + " " * max(self.console.width - 1, 0) + "\r", end="")
            self._status_line_active = False

    def message(self, text: str, style: str = "", emoji: str = "➡️") -> None:
        self.clear_status()
        self.console.print(Text(f"{emoji} {text}", style=style))

    def show_spinner(self, frame: str, watching: str, status_emoji: str = "👀") -> None:
        self._status(f"{status_emoji} {frame} Watching {watching} ...")

    def show_elapsed(self, elapsed: timedelta, status_emoji: str = "🧪") -> None:
        self._status(f"{status_emoji} Running tests... {format_elapsed(elapsed)}", style="cyan")

    def show_paused(self, paused: bool, pause_key: str) -> None:
        if paused:
            self.message(f"Paused. Press '{pause_key}' to resume.", style="bold yellow", emoji="⏸️")
        else:
            self.message("Resumed watching.", style="green", emoji="▶️")

    def announce_change(self, file_name: str, change_kind: str) -> None:
        self.message(f"{file_name} {change_kind}", style="bold", emoji="📝")

    def announce_outcome(self, outcome: Outcome, result: TestRunResult | None = None) -> None:
        emoji, style, label = OUTCOME_DISPLAY[outcome]
        suffix = f" in {format_elapsed(result.elapsed)}" if result and result.launched else ""
        self.message(f"{label}{suffix}", style=style, emoji=emoji)
        if result and outcome in ECHO_TRANSCRIPT and result.transcript.strip():
            self.console.print(
                Panel(Text(transcript_tail(result.transcript)), title="test output (tail)", border_style=style)
            )

    def acknowledge(self) -> None:
        """Audible acknowledgment for the tolerated not-implemented stub."""
        self.console.bell()

    def report_error(self, text: str) -> None:
        log.debug("Reporting error to operator", text=text)
        self.message(text, style="bold red", emoji="🚨")
