"""
Reusable Typer Options Module

Global option definitions for the main callback. Each is a ``typer.Option``
meant to be used as ``Annotated[<type>, <option>]`` with the default on the
parameter itself.
"""

from __future__ import annotations

import typer

from pondus.shared.constants import CLIHelp

# Output format - validated by OutputFormat.from_str so bad values exit 2
format_option = typer.Option(
    "--format",
    "-f",
    help=CLIHelp.FORMAT_HELP,
)

refresh_option = typer.Option(
    "--refresh",
    help=CLIHelp.REFRESH_HELP,
)

config_option = typer.Option(
    "--config",
    "-c",
    dir_okay=False,
    help=CLIHelp.CONFIG_HELP,
)

# Verbose option - count-based for multiple -v flags
verbose_option = typer.Option(
    "--verbose",
    "-v",
    count=True,
    help="Enable verbose output (equivalent to --log-level DEBUG).",
)

log_level_option = typer.Option(
    "--log-level",
    case_sensitive=False,
    help="Set the logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Default: WARNING.",
)

version_option = typer.Option(
    "--version",
    "-V",
    help="Show version information and exit.",
    is_eager=True,
)

top_option = typer.Option(
    "--top",
    "-n",
    min=1,
    help=CLIHelp.RANK_TOP_HELP,
)
