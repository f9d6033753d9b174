# src/tcrwatch/telemetry/logger/base.py

"""
structlog configuration. Log records go to stderr (and optionally a JSON file)
so they never interleave with the operator status line on stdout.
"""

import logging
import sys

import structlog
from rich.console import Console
from structlog.typing import FilteringBoundLogger

from tcrwatch.telemetry.logger.processors import (
    add_emoji_processor,
    remove_extra_keys_processor,
)

BASE_LOGGER_NAME = "tcrwatch"

# Third-party loggers that are chatty at DEBUG while a watch is running
NOISY_LOGGERS = ("watchdog", "asyncio", "textual")


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_emoji_processor,
        remove_extra_keys_processor,
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]


def _console_renderer(json_logs: bool) -> structlog.types.Processor:
    if json_logs:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=Console(file=sys.stderr).is_terminal)


def _reset_root_handlers(root_logger: logging.Logger) -> None:
    for handler in list(root_logger.handlers):
        handler.close()
        root_logger.removeHandler(handler)


def setup_logging(
    level: int = logging.INFO,
    json_logs: bool = False,
    log_file: str | None = None,
    file_only: bool = False,
) -> None:
    """
    Configures structlog and the stdlib root logger for the whole process.

    Args:
        level: Numeric level for the root logger and every handler.
        json_logs: Render console records as JSON instead of key=value text.
        log_file: Optional path; records are appended to it as JSON lines.
        file_only: Skip the stderr handler (the file handler still applies).
    """
    structlog.configure(
        processors=_shared_processors(),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    _reset_root_handlers(root_logger)
    root_logger.setLevel(level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))

    slog = structlog.get_logger(BASE_LOGGER_NAME)

    if not file_only:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=_console_renderer(json_logs)))
        root_logger.addHandler(stderr_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
        except OSError as e:
            slog.error("Cannot open log file; continuing without it", log_file=log_file, error=str(e))
        else:
            file_handler.setFormatter(
                structlog.stdlib.ProcessorFormatter(processor=structlog.processors.JSONRenderer(sort_keys=True))
            )
            file_handler.setLevel(level)
            root_logger.addHandler(file_handler)

    slog.debug(
        "Logging configured",
        level=logging.getLevelName(level),
        json_console=json_logs,
        console=not file_only,
        log_file=log_file,
    )


StructLogger = FilteringBoundLogger

# 🟢🔴
