# src/tcrwatch/cli/watch_cmds.py

import asyncio
import logging
import sys
from pathlib import Path

import click
import structlog

from tcrwatch.cli.utils import (
    apply_config_log_level,
    logging_options,
    session_options,
    setup_logging_from_context,
)
from tcrwatch.config import load_config
from tcrwatch.exceptions import ConfigurationError
from tcrwatch.runtime.orchestrator import WatchOrchestrator
from tcrwatch.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.watch")


def _run_orchestrator(orchestrator: WatchOrchestrator) -> int:
    """
    Runs the orchestrator on a fresh event loop and maps the result to an exit code.
    """
    try:
        asyncio.run(orchestrator.run())
        return orchestrator.exit_code
    except KeyboardInterrupt:
        log.warning("Shutdown initiated by KeyboardInterrupt (CTRL-C).")
        return 130
    except Exception:
        log.critical("Orchestrator exited with an unhandled exception.", exc_info=True)
        return 1
    finally:
        logging.shutdown()


@click.command(name="watch")
@session_options
@logging_options
@click.pass_context
def watch_cli(ctx: click.Context, root: Path, test_suffix: str | None, config_path: Path | None, **kwargs):
    """Watch ROOT and test, then commit or revert, on every change."""
    setup_logging_from_context(
        ctx,
        local_log_level=kwargs.get("log_level"),
        local_log_file=kwargs.get("log_file"),
        local_json_logs=kwargs.get("json_logs"),
    )

    try:
        config = load_config(root, config_path, test_suffix=test_suffix)
    except ConfigurationError as e:
        log.error("Failed to load or validate configuration", error=str(e))
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    apply_config_log_level(ctx, config, kwargs.get("log_level"))

    log.info("Initializing watch command...", root=str(config.source_root))
    orchestrator = WatchOrchestrator(config=config, shutdown_event=asyncio.Event())

    exit_code = _run_orchestrator(orchestrator)

    log.info("'watch' command finished.", exit_code=exit_code)
    if exit_code != 0:
        sys.exit(exit_code)
