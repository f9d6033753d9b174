# src/tcrwatch/runtime/keyboard.py

"""
Single-key operator control read from a TTY without blocking the event loop.
"""

import asyncio
import contextlib
import os
import sys
from collections.abc import Callable, Iterator
from types import ModuleType
from typing import TextIO

import structlog

from tcrwatch.telemetry import StructLogger

log: StructLogger = structlog.get_logger("runtime.keyboard")


class KeyListener:
    """
    Calls `on_press` whenever `key` is typed on stdin.

    The terminal is switched to cbreak mode (no line buffering, signals still
    delivered) while listening and restored on stop. Disabled when stdin is
    not a TTY or the platform has no termios.
    """

    def __init__(
        self,
        key: str,
        on_press: Callable[[], None],
        loop: asyncio.AbstractEventLoop,
        stream: TextIO | None = None,
    ):
        self.key = key.lower()
        self.on_press = on_press
        self.loop = loop
        self.stream = stream or sys.stdin
        self._fd: int | None = None
        self._saved_attrs: list | None = None
        self._termios: ModuleType | None = None

    @property
    def is_listening(self) -> bool:
        return self._fd is not None

    def start(self) -> bool:
        if self.is_listening:
            return True
        if not self.stream.isatty():
            log.debug("stdin is not a TTY; pause key disabled")
            return False
        try:
            import termios
            import tty
        except ImportError:
            log.debug("Terminal control is unavailable on this platform; pause key disabled")
            return False
        fd = self.stream.fileno()
        self._saved_attrs = termios.tcgetattr(fd)
        tty.setcbreak(fd)
        self.loop.add_reader(fd, self._on_readable)
        self._termios = termios
        self._fd = fd
        log.debug("Key listener started", key=self.key)
        return True

    def stop(self) -> None:
        if self._fd is None:
            return
        self.loop.remove_reader(self._fd)
        if self._saved_attrs is not None and self._termios is not None:
            self._termios.tcsetattr(self._fd, self._termios.TCSADRAIN, self._saved_attrs)
        self._fd = None
        self._saved_attrs = None
        log.debug("Key listener stopped")

    @contextlib.contextmanager
    def suspended(self) -> Iterator[None]:
        """Hands the terminal back while another component (the commit prompt) owns it."""
        was_listening = self.is_listening
        self.stop()
        try:
            yield
        finally:
            if was_listening:
                self.start()

    def handle_input(self, data: str) -> None:
        if any(ch.lower() == self.key for ch in data):
            self.on_press()

    def _on_readable(self) -> None:
        try:
            data = os.read(self._fd, 32).decode("utf-8", errors="ignore")
        except OSError as e:
            log.warning("Failed to read from stdin; pause key disabled", error=str(e))
            self.stop()
            return
        self.handle_input(data)
