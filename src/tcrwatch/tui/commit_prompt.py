#
# src/tcrwatch/tui/commit_prompt.py
#
"""
Modal commit-message prompt shown after a green test run.
"""

from typing import ClassVar

import structlog
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import Footer, Header, Input, Static

log = structlog.get_logger("tui.commit_prompt")

RISK_LEGEND: tuple[tuple[str, str], ...] = (
    (".", "Proven safe"),
    ("^", "Validated"),
    ("!", "Risky"),
    ("@", "Broken / not verified"),
)

INTENT_LEGEND: tuple[tuple[str, str], ...] = (
    ("F", "Feature"),
    ("B", "Bugfix"),
    ("R", "Refactoring"),
    ("D", "Documentation"),
    ("E", "Environment"),
    ("T", "Tests only"),
)

# (key, prefix inserted, footer label)
QUICK_INSERTS: tuple[tuple[str, str, str], ...] = (
    ("f1", ". R ", "Safe refactor"),
    ("f2", ". F ", "Safe feature"),
    ("f3", "^ F ", "Validated feature"),
    ("f4", "^ B ", "Validated bugfix"),
    ("f5", "! F ", "Risky feature"),
    ("f6", ". T ", "Tests"),
    ("f7", ". D ", "Docs"),
    ("f8", ". E ", "Environment"),
)


def render_legend() -> str:
    risk = "   ".join(f"[b]{symbol}[/b] {meaning}" for symbol, meaning in RISK_LEGEND)
    intent = "   ".join(f"[b]{symbol}[/b] {meaning}" for symbol, meaning in INTENT_LEGEND)
    return f"Risk:   {risk}\nIntent: {intent}\n[dim]Lowercase intent = no behaviour change intended.[/dim]"


def apply_prefix(current: str, prefix: str) -> str:
    """Puts `prefix` in front of the message, replacing a prefix inserted earlier."""
    for _, known, _ in QUICK_INSERTS:
        if current.startswith(known):
            current = current[len(known):]
            break
    return f"{prefix}{current}"


class CommitMessageApp(App[str | None]):
    """Asks for a commit message; exits with the text, or None when cancelled."""

    TITLE = "TCR: tests passed"
    SUB_TITLE = "Enter a commit message (Esc to cancel)"
    BINDINGS: ClassVar[list] = [
        Binding("escape", "cancel", "Cancel", priority=True),
        *(Binding(key, f"insert_prefix('{prefix}')", label) for key, prefix, label in QUICK_INSERTS),
    ]

    CSS = """
    #legend {
        border: round $accent;
        padding: 0 1;
        margin: 1;
    }

    #message {
        margin: 0 1;
    }
    """

    def __init__(self, changed_file: str | None = None):
        super().__init__()
        self.changed_file = changed_file

    def compose(self) -> ComposeResult:
        yield Header()
        with Container():
            yield Static(render_legend(), id="legend")
            placeholder = f"Commit message for {self.changed_file}" if self.changed_file else "Commit message"
            yield Input(placeholder=placeholder, id="message")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#message", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        message = event.value.strip()
        self.exit(message or None)

    def action_insert_prefix(self, prefix: str) -> None:
        message_input = self.query_one("#message", Input)
        message_input.value = apply_prefix(message_input.value, prefix)
        message_input.cursor_position = len(message_input.value)

    def action_cancel(self) -> None:
        self.exit(None)


async def prompt_commit_message(changed_file: str | None = None) -> str | None:
    """Shows the modal prompt and returns the entered message, or None if cancelled."""
    app = CommitMessageApp(changed_file=changed_file)
    message = await app.run_async()
    log.debug("Commit prompt closed", cancelled=message is None)
    return message
