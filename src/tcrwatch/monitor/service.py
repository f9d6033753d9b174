# src/tcrwatch/monitor/service.py

"""
Owns the watchdog Observer subscription for the source root.
"""

import asyncio

import structlog
from watchdog.observers import Observer

from tcrwatch.config import TcrConfig
from tcrwatch.exceptions import MonitoringSetupError
from tcrwatch.monitor.events import ChangeEvent
from tcrwatch.monitor.handler import TcrEventHandler
from tcrwatch.telemetry import StructLogger

log: StructLogger = structlog.get_logger("monitor.service")


class MonitoringService:
    """Starts and stops a recursive watch on the configured source root."""

    def __init__(self, event_queue: asyncio.Queue[ChangeEvent]):
        self.event_queue = event_queue
        self._observer: Observer | None = None
        self._handler: TcrEventHandler | None = None

    @property
    def is_running(self) -> bool:
        return bool(self._observer and self._observer.is_alive())

    def watch(self, config: TcrConfig, loop: asyncio.AbstractEventLoop) -> None:
        """Schedules the recursive watch. Must be called before `start()`."""
        root = config.source_root
        if not root.is_dir():
            raise MonitoringSetupError(f"Cannot watch missing directory: {root}")
        try:
            self._observer = Observer()
            self._handler = TcrEventHandler(config, self.event_queue, loop)
            self._observer.schedule(self._handler, str(root), recursive=True)
        except OSError as e:
            self._observer = None
            raise MonitoringSetupError(f"Failed to schedule watch on {root}: {e}") from e
        log.info("Watch scheduled", path=str(root), extensions=sorted(config.tracked_extensions), emoji_key="watch")

    def start(self) -> None:
        if not self._observer:
            raise MonitoringSetupError("No watch scheduled; call watch() first")
        self._observer.start()
        log.debug("Observer thread started")

    async def stop(self) -> None:
        """Stops the observer thread and waits for it to exit."""
        observer = self._observer
        if not observer:
            return
        if observer.is_alive():
            observer.stop()
            await asyncio.to_thread(observer.join)
        self._observer = None
        self._handler = None
        log.debug("Observer thread stopped")
