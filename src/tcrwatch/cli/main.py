# src/tcrwatch/cli/main.py

"""
`tcrwatch` console script: a click group holding the global logging options.
"""

import click
import structlog

from tcrwatch import __version__
from tcrwatch.cli.config_cmds import config_cli
from tcrwatch.cli.utils import logging_options, setup_logging_from_context
from tcrwatch.cli.watch_cmds import watch_cli
from tcrwatch.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.main")

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"], "max_content_width": 100}


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, "-V", "--version", package_name="tcrwatch")
@logging_options
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, log_file: str | None, json_logs: bool | None):
    """
    Test && Commit || Revert for .NET solutions.

    Watches C# sources under ROOT. Each save runs the matching test class;
    green asks for a commit message and commits, red reverts non-test sources.

    Precedence: command line > environment > config file > defaults.
    """
    ctx.ensure_object(dict)
    ctx.obj.update(LOG_LEVEL=log_level, LOG_FILE=log_file, JSON_LOGS=bool(json_logs))

    setup_logging_from_context(ctx)
    log.debug("CLI group ready", subcommand=ctx.invoked_subcommand)


for command in (watch_cli, config_cli):
    cli.add_command(command)

if __name__ == "__main__":
    cli()
