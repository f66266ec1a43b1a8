"""
pondus Typer CLI Application

Global options are parsed once by the main callback into a ``CliContext``;
each command builds an ``Aggregator`` from the loaded settings, runs one
query, and prints the rendered output to stdout.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Annotated

import typer

from pondus.cli.context import CliContext, LogLevel, get_cli_context, set_cli_context
from pondus.cli.error_handler import handle_cli_error
from pondus.cli.options import (
    config_option,
    format_option,
    log_level_option,
    refresh_option,
    top_option,
    verbose_option,
    version_option,
)
from pondus.cli.output import OutputFormat, render
from pondus.config import load_settings
from pondus.core.models import PondusOutput
from pondus.services import Aggregator, AliasResolver, FreshnessCache
from pondus.shared.constants import CLIDefaults, CLIHelp, CLIMessages
from pondus.shared.logging import setup_structured_logger
from pondus.sources import all_sources

__version__ = CLIDefaults.VERSION


def version_callback(value: bool) -> None:
    """Print version information and exit."""
    if value:
        typer.echo(CLIHelp.VERSION_TEXT.format(version=__version__))
        raise typer.Exit


def build_aggregator(context: CliContext) -> Aggregator:
    """Wire settings, aliases, cache and sources for one invocation."""
    settings = load_settings(context.config_path)
    resolver = AliasResolver.load(settings.alias.path)
    cache = FreshnessCache(
        settings.cache.resolved_dir(),
        settings.cache.ttl_hours,
        bypass=context.refresh,
    )
    return Aggregator(settings, cache, resolver, all_sources(settings))


def run_query(command: str, query: Callable[[Aggregator], PondusOutput]) -> None:
    """Run ``query`` against a fresh aggregator and print the rendered result."""
    context = get_cli_context()
    try:
        output = query(build_aggregator(context))
        rendered = render(output, context.output_format)
    except (Exception, KeyboardInterrupt) as e:
        raise typer.Exit(handle_cli_error(e, command)) from e
    typer.echo(rendered, nl=not rendered.endswith("\n"))


app = typer.Typer(
    name=CLIDefaults.APP_NAME,
    help=CLIHelp.APP_DESCRIPTION,
    add_completion=False,
    no_args_is_help=False,
)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    output_format: Annotated[str, format_option] = CLIDefaults.DEFAULT_FORMAT,
    refresh: Annotated[bool, refresh_option] = False,
    config: Annotated[Path | None, config_option] = None,
    verbose: Annotated[int, verbose_option] = 0,
    log_level: Annotated[LogLevel, log_level_option] = LogLevel.WARNING,
    version: Annotated[bool, version_option] = False,
) -> None:
    """Opinionated AI model benchmark aggregator. Runs ``rank`` when no command is given."""
    if version:
        version_callback(value=True)

    try:
        context = CliContext(
            verbose=verbose,
            log_level=log_level,
            output_format=OutputFormat.from_str(output_format),
            refresh=refresh,
            config_path=config,
        )
    except Exception as e:
        raise typer.Exit(handle_cli_error(e, "main-callback")) from e

    set_cli_context(context)
    setup_structured_logger(level=context.get_effective_log_level())

    if ctx.invoked_subcommand is None:
        run_query("rank", lambda aggregator: aggregator.rank())


@app.command("rank", help=CLIHelp.RANK_HELP)
def rank_command(
    top: Annotated[int | None, top_option] = None,
) -> None:
    run_query("rank", lambda aggregator: aggregator.rank(top))


@app.command("check", help=CLIHelp.CHECK_HELP)
def check_command(
    model: Annotated[str, typer.Argument(help=CLIHelp.CHECK_MODEL_HELP)],
) -> None:
    run_query("check", lambda aggregator: aggregator.check(model))


@app.command("compare", help=CLIHelp.COMPARE_HELP)
def compare_command(
    model1: Annotated[str, typer.Argument(help=CLIHelp.COMPARE_MODEL1_HELP)],
    model2: Annotated[str, typer.Argument(help=CLIHelp.COMPARE_MODEL2_HELP)],
) -> None:
    run_query("compare", lambda aggregator: aggregator.compare(model1, model2))


@app.command("sources", help=CLIHelp.SOURCES_HELP)
def sources_command() -> None:
    run_query("sources", lambda aggregator: aggregator.sources())


def _refresh(aggregator: Aggregator) -> PondusOutput:
    return aggregator.refresh(on_cleared=lambda _removed: typer.echo(CLIMessages.CACHE_CLEARED, err=True))


@app.command("refresh", help=CLIHelp.REFRESH_COMMAND_HELP)
def refresh_command() -> None:
    run_query("refresh", _refresh)


if __name__ == "__main__":
    app()
