# src/tcrwatch/runtime/orchestrator.py

"""
High-level coordinator for the tcrwatch watch loop.
Manages lifecycle of all runtime components.
"""

import asyncio
import contextlib
import signal

import structlog
from rich.console import Console

from tcrwatch.config import TcrConfig
from tcrwatch.engines.git import GitEngine
from tcrwatch.exceptions import TcrError
from tcrwatch.monitor import ChangeEvent, MonitoringService
from tcrwatch.projects import PathResolver
from tcrwatch.runtime.action_handler import ActionHandler, CommitPrompt
from tcrwatch.runtime.console_interface import ConsoleInterface
from tcrwatch.runtime.event_processor import EventProcessor
from tcrwatch.runtime.keyboard import KeyListener
from tcrwatch.state import RunState
from tcrwatch.telemetry import StructLogger
from tcrwatch.testing import DotnetTestRunner, OutcomeClassifier, TestRunner
from tcrwatch.tui import prompt_commit_message

log: StructLogger = structlog.get_logger("runtime.orchestrator")

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class WatchOrchestrator:
    """Instantiates and coordinates all runtime components for the watch command."""

    def __init__(
        self,
        config: TcrConfig,
        shutdown_event: asyncio.Event,
        console: Console | None = None,
        engine: GitEngine | None = None,
        runner: TestRunner | None = None,
        prompt: CommitPrompt | None = None,
    ):
        self.config = config
        self.shutdown_event = shutdown_event
        self.console = ConsoleInterface(console)
        self.engine = engine or GitEngine()
        self.runner = runner or DotnetTestRunner.from_config(config)
        self._prompt = prompt or prompt_commit_message
        self.event_queue: asyncio.Queue[ChangeEvent] = asyncio.Queue()
        self.state = RunState()
        self.monitor_service: MonitoringService | None = None
        self.event_processor: EventProcessor | None = None
        self.key_listener: KeyListener | None = None
        self.exit_code = 0

    async def run(self) -> None:
        """Main execution method: setup, run, and cleanup."""
        log.info("Orchestrator run sequence starting.")
        loop = asyncio.get_running_loop()
        processor_task: asyncio.Task | None = None
        spinner_task: asyncio.Task | None = None
        self._install_signal_handlers(loop)

        try:
            await self._check_repository()

            action_handler = ActionHandler(self.config, self.engine, self._prompt_with_terminal, self.console, self.state)
            self.event_processor = EventProcessor(
                self.config,
                self.event_queue,
                self.shutdown_event,
                self.state,
                PathResolver(self.config.test_suffix, self.config.manifest_pattern, self.config.source_root),
                self.runner,
                OutcomeClassifier(),
                action_handler,
                self.console,
            )

            self.monitor_service = MonitoringService(self.event_queue)
            self.monitor_service.watch(self.config, loop)
            self.monitor_service.start()

            self.key_listener = KeyListener(self.config.pause_key, self.toggle_pause, loop)
            hint = f"'{self.config.pause_key}' pauses, Ctrl+C exits" if self.key_listener.start() else "Ctrl+C exits"
            self.console.message(f"Watching {self.config.source_root} ({hint})", style="dim", emoji="👀")

            spinner_task = asyncio.create_task(self._spin())
            processor_task = asyncio.create_task(self.event_processor.run())
            shutdown_waiter = asyncio.create_task(self.shutdown_event.wait())
            await asyncio.wait({processor_task, shutdown_waiter}, return_when=asyncio.FIRST_COMPLETED)
            shutdown_waiter.cancel()
            if processor_task.done() and not processor_task.cancelled() and processor_task.exception():
                raise processor_task.exception()

        except TcrError as e:
            log.critical("Watch loop could not start", error=str(e))
            self.console.report_error(str(e))
            self.exit_code = 1
        except asyncio.CancelledError:
            log.warning("Orchestrator task was cancelled.")
        except Exception:
            log.critical("Orchestrator run failed with an unhandled exception.", exc_info=True)
            self.exit_code = 1
        finally:
            log.info("Orchestrator entering cleanup phase.")
            for task in (processor_task, spinner_task):
                if task and not task.done():
                    task.cancel()
                    with contextlib.suppress(asyncio.CancelledError):
                        await task

            if self.key_listener:
                self.key_listener.stop()

            if self.monitor_service and self.monitor_service.is_running:
                await self.monitor_service.stop()

            self._remove_signal_handlers(loop)
            self.console.clear_status()
            self.console.message("TCR stopped.", style="dim", emoji="🛑")
            log.info("Orchestrator cleanup complete.")

    async def _check_repository(self) -> None:
        """Verifies the root is inside a git working tree and reports HEAD."""
        root = self.config.source_root
        workdir = await asyncio.to_thread(self.engine.discover_workdir, root)
        summary = await self.engine.get_summary(workdir)
        if summary.short_hash:
            msg = f"HEAD at {summary.head_ref_name} ({summary.short_hash}) {summary.head_commit_message_summary}"
            log.info(msg, workdir=str(workdir))
            self.console.message(msg, style="dim", emoji="📂")
        elif summary.is_empty or summary.head_ref_name == "UNBORN":
            self.console.message("Repository has no commits yet; reverts will fail until it does.", style="yellow", emoji="⚠️")

        if await self.engine.has_changes(root, self.config.tracked_patterns):
            log.warning("Uncommitted tracked changes at startup", root=str(root))
            self.console.message(
                "You have uncommitted changes; a red run will revert them. Consider committing first.",
                style="yellow",
                emoji="⚠️",
            )

    async def _prompt_with_terminal(self, changed_file: str | None) -> str | None:
        self.console.clear_status()
        if self.key_listener:
            with self.key_listener.suspended():
                return await self._prompt(changed_file)
        return await self._prompt(changed_file)

    def toggle_pause(self) -> None:
        paused = self.state.toggle_pause()
        self.console.show_paused(paused, self.config.pause_key)

    def request_shutdown(self, signame: str = "SIGINT") -> None:
        log.warning("Received shutdown signal", signal=signame)
        if not self.shutdown_event.is_set():
            self.shutdown_event.set()

    async def _spin(self) -> None:
        """Advances the liveness indicator while idle and not paused."""
        watching = self.config.source_root.name or str(self.config.source_root)
        while not self.shutdown_event.is_set():
            await asyncio.sleep(self.config.spinner_interval_seconds)
            if self.state.is_idle and not self.state.paused:
                self.console.show_spinner(self.state.advance_spinner(), watching, self.state.display_status_emoji)

    def _install_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        for sig in SHUTDOWN_SIGNALS:
            try:
                loop.add_signal_handler(sig, self.request_shutdown, sig.name)
            except (NotImplementedError, RuntimeError, ValueError):
                log.debug("Signal handlers unsupported here; relying on KeyboardInterrupt", signal=sig.name)

    def _remove_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        for sig in SHUTDOWN_SIGNALS:
            with contextlib.suppress(NotImplementedError, RuntimeError, ValueError):
                loop.remove_signal_handler(sig)
