# src/tcrwatch/monitor/handler.py

"""
Watchdog event handler that filters raw events and hands tracked changes to asyncio.
"""

import asyncio
from pathlib import Path

import structlog
from watchdog.events import FileSystemEvent, FileSystemEventHandler

from tcrwatch.config import TcrConfig
from tcrwatch.monitor.events import WATCHDOG_KIND_MAP, ChangeEvent
from tcrwatch.telemetry import StructLogger

log: StructLogger = structlog.get_logger("monitor.handler")


def is_tracked_path(path: Path, config: TcrConfig) -> bool:
    """
    True for files with a tracked extension that are not under a build-output directory.

    Only the part of the path below the source root is checked for
    build-output directory names.
    """
    if path.suffix not in config.tracked_extensions:
        return False
    try:
        relative_parts = path.relative_to(config.source_root).parts
    except ValueError:
        relative_parts = path.parts
    return not any(part in config.ignored_dirs for part in relative_parts[:-1])


class TcrEventHandler(FileSystemEventHandler):
    """
    Runs on the watchdog observer thread.

    Discards directory, build-output and untracked-extension events, then
    schedules the surviving ChangeEvent onto the asyncio queue thread-safely.
    """

    def __init__(
        self,
        config: TcrConfig,
        event_queue: asyncio.Queue[ChangeEvent],
        loop: asyncio.AbstractEventLoop,
    ):
        super().__init__()
        self.config = config
        self.event_queue = event_queue
        self.loop = loop

    def build_change_event(self, event: FileSystemEvent) -> ChangeEvent | None:
        """Maps a watchdog event onto a ChangeEvent, or None when it should be discarded."""
        kind = WATCHDOG_KIND_MAP.get(event.event_type)
        if kind is None or event.is_directory:
            return None

        src_path = Path(str(event.src_path))
        dest = getattr(event, "dest_path", None)
        if dest:
            dest_path = Path(str(dest))
            if is_tracked_path(dest_path, self.config):
                return ChangeEvent(full_path=dest_path, change_kind=kind, previous_path=src_path)
            if is_tracked_path(src_path, self.config):
                return ChangeEvent(full_path=src_path, change_kind=kind, previous_path=src_path)
            return None

        if not is_tracked_path(src_path, self.config):
            return None
        return ChangeEvent(full_path=src_path, change_kind=kind)

    def on_any_event(self, event: FileSystemEvent) -> None:
        change = self.build_change_event(event)
        if change is None:
            return
        log.debug("Queueing change event", path=str(change.full_path), kind=change.change_kind.value)
        self.loop.call_soon_threadsafe(self.event_queue.put_nowait, change)
