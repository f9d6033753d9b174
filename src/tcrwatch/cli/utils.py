# src/tcrwatch/cli/utils.py

"""
Option decorators and logging bootstrap shared by every tcrwatch command.
"""

import logging
from pathlib import Path

import click
import structlog

from tcrwatch.config import TcrConfig
from tcrwatch.telemetry import setup_logging as core_setup_logging

log = structlog.get_logger("cli.utils")

ENV_PREFIX = "TCRWATCH"
LOG_LEVEL_CHOICES = click.Choice(list(logging._nameToLevel.keys()), case_sensitive=False)


def logging_options(f):
    """Adds --log-level, --log-file and --json-logs (each also read from TCRWATCH_*)."""
    f = click.option(
        "-l",
        "--log-level",
        type=LOG_LEVEL_CHOICES,
        default=None,
        envvar=f"{ENV_PREFIX}_LOG_LEVEL",
        help="Logging level; overrides log_level from the config file.",
    )(f)
    f = click.option(
        "--log-file",
        type=click.Path(dir_okay=False, writable=True, resolve_path=True),
        default=None,
        envvar=f"{ENV_PREFIX}_LOG_FILE",
        help="Also append logs to this file as JSON lines.",
    )(f)
    f = click.option(
        "--json-logs",
        is_flag=True,
        default=None,
        envvar=f"{ENV_PREFIX}_JSON_LOGS",
        help="Render stderr logs as JSON.",
    )(f)
    return f


def session_options(f):
    """Adds the ROOT argument plus --suffix and -c/--config-path."""
    f = click.option(
        "-c",
        "--config-path",
        type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True, path_type=Path),
        default=None,
        envvar=f"{ENV_PREFIX}_CONF",
        show_envvar=True,
        help="TOML file with a [tcr] table.",
    )(f)
    f = click.option(
        "-s",
        "--suffix",
        "test_suffix",
        default=None,
        help="Test project suffix  [default: .Tests]",
    )(f)
    f = click.argument(
        "root",
        type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
    )(f)
    return f


def _resolve_level(name: str) -> tuple[str, int]:
    numeric = logging.getLevelName(name.upper())
    if not isinstance(numeric, int):
        return "INFO", logging.INFO
    return name.upper(), numeric


def setup_logging_from_context(
    ctx: click.Context,
    local_log_level: str | None = None,
    local_log_file: str | None = None,
    local_json_logs: bool | None = None,
    default_log_level: str = "WARNING",
) -> None:
    """
    Configures logging from the group options stored on `ctx.obj`.

    Options given on a subcommand win over the same option on the group.
    """
    obj = ctx.obj or {}
    level_name, level = _resolve_level(local_log_level or obj.get("LOG_LEVEL") or default_log_level)
    log_file = local_log_file or obj.get("LOG_FILE")
    json_logs = local_json_logs if local_json_logs is not None else bool(obj.get("JSON_LOGS"))

    core_setup_logging(level=level, json_logs=json_logs, log_file=log_file)
    log.debug("CLI logging initialized", level=level_name, log_file=log_file, json_logs=json_logs)


def apply_config_log_level(ctx: click.Context, config: TcrConfig, local_log_level: str | None = None) -> None:
    """Re-applies logging with the file's log_level when no CLI or env level was given."""
    obj = ctx.obj or {}
    if local_log_level or obj.get("LOG_LEVEL"):
        return
    setup_logging_from_context(ctx, local_log_level=config.log_level)
