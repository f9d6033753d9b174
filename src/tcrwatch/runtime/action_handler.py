# src/tcrwatch/runtime/action_handler.py
"""
Turns a classified test outcome into the commit or revert sequence.
"""
from collections.abc import Awaitable, Callable
from enum import Enum, auto

import structlog

from tcrwatch.config import TcrConfig
from tcrwatch.protocols import CommandResult, CommitResult, RevertResult, VcsEngine
from tcrwatch.runtime.console_interface import ConsoleInterface
from tcrwatch.state import RunState, RunStatus
from tcrwatch.telemetry import StructLogger
from tcrwatch.testing import Outcome

log: StructLogger = structlog.get_logger("runtime.action_handler")

CommitPrompt = Callable[[str | None], Awaitable[str | None]]


class ActionTaken(Enum):
    """What the dispatcher did for one outcome."""

    COMMITTED = auto()
    NOTHING_TO_COMMIT = auto()
    COMMIT_CANCELLED = auto()
    COMMIT_FAILED = auto()
    REVERTED = auto()
    REVERT_FAILED = auto()
    ACKNOWLEDGED = auto()
    REPORTED = auto()


COMMIT_OUTCOMES = frozenset({Outcome.TESTS_PASSED})
REVERT_OUTCOMES = frozenset({Outcome.TESTS_FAILED, Outcome.BUILD_FAILED})


class ActionHandler:
    """Dispatches outcome -> commit | revert | acknowledgment | report."""

    def __init__(
        self,
        config: TcrConfig,
        engine: VcsEngine,
        prompt: CommitPrompt,
        console: ConsoleInterface,
        state: RunState,
    ):
        self.config = config
        self.engine = engine
        self.prompt = prompt
        self.console = console
        self.state = state
        log.debug("ActionHandler initialized.")

    @property
    def workdir(self):
        return self.config.source_root

    async def dispatch(self, outcome: Outcome) -> ActionTaken:
        action_log = log.bind(outcome=outcome.value)
        if outcome in COMMIT_OUTCOMES:
            result = await self.commit()
            if not result.success:
                return ActionTaken.COMMIT_FAILED
            if not result.committed:
                return ActionTaken.COMMIT_CANCELLED if result.cancelled else ActionTaken.NOTHING_TO_COMMIT
            return ActionTaken.COMMITTED

        if outcome in REVERT_OUTCOMES:
            result = await self.revert()
            return ActionTaken.REVERTED if result.success else ActionTaken.REVERT_FAILED

        if outcome == Outcome.SINGLE_NOT_IMPLEMENTED_ALLOWED:
            action_log.info("Tolerating a single not-implemented stub; no VCS action")
            self.console.acknowledge()
            self.console.message(
                "Stub throws NotImplementedException; nothing committed or reverted.",
                style="cyan",
                emoji="🚧",
            )
            return ActionTaken.ACKNOWLEDGED

        action_log.warning("No VCS action for outcome")
        self.console.message(f"No action taken ({outcome.value}). Check the output above.", style="yellow", emoji="🤷")
        return ActionTaken.REPORTED

    async def commit(self) -> CommitResult:
        """status -> prompt -> add -> commit -> pull --rebase -> push."""
        self.state.update_status(RunStatus.COMMITTING)
        patterns = self.config.tracked_patterns

        if not await self.engine.has_changes(self.workdir, patterns):
            log.info("No tracked changes to commit")
            self.console.message("Nothing to commit.", style="dim", emoji="🧼")
            return CommitResult(success=True, committed=False, message="No tracked changes")

        message = await self.prompt(self.state.current_file)
        if not message or not message.strip():
            log.info("Commit cancelled at the prompt")
            self.console.message("Commit cancelled; working tree left as is.", style="yellow", emoji="✋")
            return CommitResult(success=True, committed=False, cancelled=True, message="Cancelled")

        staged = await self.engine.stage(self.workdir, patterns)
        committed = await self.engine.commit(self.workdir, message) if staged.success else None
        failed = next((step for step in (staged, committed) if step is not None and not step.success), None)
        if failed is not None:
            log.error(
                "Commit failed",
                command=" ".join(failed.args),
                exit_code=failed.exit_code,
                stderr=failed.stderr.strip(),
            )
            self.console.report_error(
                f"Commit failed: git {failed.args[0]} exited with {failed.exit_code}: {failed.stderr.strip()}"
            )
            attempted = tuple(step for step in (staged, committed) if step is not None)
            return CommitResult(success=False, committed=False, message=failed.stderr.strip(), steps=attempted)

        steps: list[CommandResult] = [staged, committed]
        if self.config.push_after_commit:
            if self.config.pull_before_push:
                steps.append(await self.engine.pull_rebase(self.workdir))
            steps.append(await self.engine.push(self.workdir))

        for step in steps[2:]:
            if not step.success:
                self.console.message(
                    f"git {step.args[0]} exited with {step.exit_code}: {step.stderr.strip()}",
                    style="yellow",
                    emoji="⚠️",
                )
        log.info("Committed", message=message, emoji_key="commit")
        self.console.message(f"Committed: {message}", style="bold green", emoji="💾")
        return CommitResult(success=True, committed=True, message=message, steps=tuple(steps))

    async def revert(self) -> RevertResult:
        """Drops untracked non-test files, then restores tracked non-test sources from HEAD."""
        self.state.update_status(RunStatus.REVERTING)
        clean = await self.engine.clean(self.workdir, self.config.test_subtree_pattern)
        restore = await self.engine.restore(self.workdir, self.config.tracked_patterns, self.config.test_file_pattern)
        steps = (clean, restore)

        failed = next((step for step in steps if not step.success), None)
        if failed is not None:
            log.error(
                "Revert failed; manual intervention required",
                command=" ".join(failed.args),
                exit_code=failed.exit_code,
                stderr=failed.stderr.strip(),
            )
            self.console.report_error(
                f"Revert failed: git {failed.args[0]} exited with {failed.exit_code}. Fix the working tree manually."
            )
            return RevertResult(
                success=False, exit_code=failed.exit_code, message=failed.stderr.strip(), steps=steps
            )

        log.info("Reverted working tree to HEAD", emoji_key="revert")
        self.console.message("Reverted to last commit.", style="bold red", emoji="⏪")
        return RevertResult(success=True, steps=steps)
