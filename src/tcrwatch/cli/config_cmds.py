# src/tcrwatch/cli/config_cmds.py

from pathlib import Path

import click
import structlog
from rich.pretty import pretty_repr

from tcrwatch.cli.utils import (
    apply_config_log_level,
    logging_options,
    session_options,
    setup_logging_from_context,
)
from tcrwatch.config import load_config
from tcrwatch.exceptions import ConfigurationError
from tcrwatch.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.config")


@click.group(name="config")
def config_cli():
    """Commands for inspecting and validating configuration."""
    pass


@config_cli.command(name="show")
@session_options
@logging_options
@click.pass_context
def show_config(ctx: click.Context, root: Path, test_suffix: str | None, config_path: Path | None, **kwargs):
    """Load, validate, and display the effective configuration for ROOT."""
    setup_logging_from_context(
        ctx,
        local_log_level=kwargs.get("log_level"),
        local_log_file=kwargs.get("log_file"),
        local_json_logs=kwargs.get("json_logs"),
    )
    log.info("Executing 'config show' command", root=str(root))

    try:
        config = load_config(root, config_path, test_suffix=test_suffix)
    except ConfigurationError as e:
        log.error("Failed to load or validate configuration", error=str(e))
        click.echo(f"Error: Configuration problem:\n{e}", err=True)
        ctx.exit(1)

    apply_config_log_level(ctx, config, kwargs.get("log_level"))

    click.echo(pretty_repr(config, expand_all=True))
    click.echo(f"test files:       {config.test_file_pattern}")
    click.echo(f"clean exclusion:  {config.test_subtree_pattern}")
    click.echo(f"tracked patterns: {' '.join(config.tracked_patterns)}")
