"""
CLI Context Management Module

Holds the options parsed by the main callback in a pydantic model stored in
a ContextVar, so every command reads the same validated state.
"""

from __future__ import annotations

import contextvars
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from pondus.cli.output import OutputFormat


class LogLevel(str, Enum):
    """Log level enumeration for type safety."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class CliContext(BaseModel):
    """
    Global CLI state.

    Attributes:
        verbose: Verbosity level (0 = normal, 1+ = DEBUG logging)
        log_level: Logging level when not verbose
        output_format: Renderer for command output
        refresh: Skip cache reads for this invocation
        config_path: Explicit config.toml path, if given
    """

    verbose: int = Field(default=0, ge=0)
    log_level: LogLevel = Field(default=LogLevel.WARNING)
    output_format: OutputFormat = Field(default=OutputFormat.JSON)
    refresh: bool = Field(default=False)
    config_path: Path | None = Field(default=None)

    def is_verbose(self) -> bool:
        return self.verbose > 0

    def get_effective_log_level(self) -> str:
        """Return DEBUG when verbose, otherwise the configured level."""
        if self.is_verbose():
            return LogLevel.DEBUG.value
        return self.log_level.value


cli_context_var: contextvars.ContextVar[CliContext | None] = contextvars.ContextVar(
    "cli_context",
    default=None,
)


def get_cli_context() -> CliContext:
    """
    Get the current CLI context.

    Raises:
        RuntimeError: If the main callback has not run yet
    """
    context = cli_context_var.get()
    if context is None:
        raise RuntimeError(
            "CLI context has not been initialized. "
            "Make sure to call the main callback before accessing context.",
        )
    return context


def set_cli_context(context: CliContext) -> None:
    cli_context_var.set(context)


def clear_cli_context() -> None:
    cli_context_var.set(None)
