# src/tcrwatch/runtime/event_processor.py
"""
Consumes filesystem change events one at a time and runs the TCR pipeline for each.
"""
import asyncio
from datetime import timedelta

import structlog

from tcrwatch.config import TcrConfig
from tcrwatch.monitor import ChangeEvent
from tcrwatch.projects import PathResolver
from tcrwatch.runtime.action_handler import ActionHandler
from tcrwatch.runtime.console_interface import ConsoleInterface
from tcrwatch.runtime.debouncer import Debouncer
from tcrwatch.state import RunState, RunStatus
from tcrwatch.telemetry import StructLogger
from tcrwatch.testing import Outcome, OutcomeClassifier, TestRunner

log: StructLogger = structlog.get_logger("runtime.event_processor")


class EventProcessor:
    """
    Serialized consumer of the change-event queue.

    Each accepted event runs debounce -> resolve -> test -> classify ->
    dispatch to completion before the next event is dequeued, so test runs
    never overlap. Events stamped before the previous run finished were
    produced while it was in flight and are dropped.
    """

    def __init__(
        self,
        config: TcrConfig,
        event_queue: asyncio.Queue[ChangeEvent],
        shutdown_event: asyncio.Event,
        state: RunState,
        resolver: PathResolver,
        runner: TestRunner,
        classifier: OutcomeClassifier,
        action_handler: ActionHandler,
        console: ConsoleInterface,
    ):
        self.config = config
        self.event_queue = event_queue
        self.shutdown_event = shutdown_event
        self.state = state
        self.resolver = resolver
        self.runner = runner
        self.classifier = classifier
        self.action_handler = action_handler
        self.console = console
        self.debouncer = Debouncer(config.debounce_seconds, start_time=state.last_accepted_event_time)
        log.debug("EventProcessor initialized.")

    async def run(self) -> None:
        """Main event consumption loop; ends on shutdown or cancellation."""
        log.info("Event processor is running.")
        while not self.shutdown_event.is_set():
            try:
                event = await self.event_queue.get()
            except asyncio.CancelledError:
                log.info("Event processor run loop cancelled.")
                raise
            try:
                await self.handle_event(event)
            finally:
                self.event_queue.task_done()
        log.info("Event processor has stopped.")

    def _show_progress(self, elapsed: timedelta) -> None:
        self.console.show_elapsed(elapsed, self.state.display_status_emoji)

    def should_process(self, event: ChangeEvent) -> bool:
        """Gate applied before debounce: pause flag, then in-flight/stale check."""
        if self.state.paused:
            log.debug("Paused, event ignored", path=str(event.full_path))
            return False
        if self.state.test_run_in_progress:
            log.debug("Run in progress, event dropped", path=str(event.full_path))
            return False
        finished = self.state.last_run_finished_at
        if finished is not None and event.timestamp <= finished:
            log.debug("Event raised during previous run, dropped", path=str(event.full_path))
            return False
        return True

    async def handle_event(self, event: ChangeEvent) -> Outcome | None:
        """
        Runs the full pipeline for one event.

        Returns the classified outcome, or None when the event was filtered,
        debounced, or could not be resolved. Per-event failures are reported
        and swallowed so the watch loop keeps going.
        """
        if not self.should_process(event):
            return None
        if not self.debouncer.accept(event.timestamp):
            return None

        self.state.record_accepted_event(event.timestamp)
        self.state.begin_run(event.file_name)
        event_log = log.bind(path=str(event.full_path), kind=event.change_kind.value)
        self.console.announce_change(event.file_name, event.change_kind.value)
        outcome: Outcome | None = None
        try:
            resolved = self.resolver.resolve(event.full_path)
            if not resolved.success:
                event_log.info("Resolution failed, skipping run", reason=resolved.message)
                self.console.report_error(f"Cannot locate tests for {event.file_name}: {resolved.message}")
                return None

            self.state.update_status(RunStatus.TESTING)
            self.console.message(
                f"Testing {resolved.test_class_filter} in {resolved.test_project_path.name}",
                style="cyan",
                emoji="🧪",
            )
            result = await self.runner.run(
                resolved.test_project_path,
                resolved.test_class_filter,
                on_progress=self._show_progress,
            )
            if not result.launched:
                self.console.report_error(f"Test run failed to start: {result.error}")

            outcome = self.classifier.classify(result.transcript)
            event_log.info("Test run classified", outcome=outcome.value, exit_code=result.exit_code)
            self.console.announce_outcome(outcome, result)

            action = await self.action_handler.dispatch(outcome)
            event_log.debug("Dispatch complete", action=action.name)
            return outcome
        except asyncio.CancelledError:
            event_log.warning("Run cancelled")
            raise
        except Exception as e:
            event_log.exception("Unexpected error while handling change event")
            self.console.report_error(f"Unexpected error handling {event.file_name}: {e}")
            return outcome
        finally:
            self.state.finish_run(outcome.value if outcome else None)
