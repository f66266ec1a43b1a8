"""Error types for pondus.

Every failure pondus raises on purpose is a ``PondusError`` carrying an
``ErrorCode`` and an ``ErrorContext``. The layer an error comes from decides
its base class:

- ``DomainError``: data that cannot be interpreted (alias datasets, payloads)
- ``InfrastructureError``: disk, network and subprocess failures
- ``ApplicationError``: configuration and command-line problems
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Union

# Values allowed in ErrorContext.additional_data; anything else cannot go
# into a structured log record
PrimitiveContextValue = Union[str, int, float, bool]


class ErrorCode(str, Enum):
    """Stable identifiers logged with every error."""

    # Input data
    VALIDATION_ERROR = "VALIDATION_ERROR"
    PARSING_ERROR = "PARSING_ERROR"

    # Freshness cache
    CACHE_WRITE_FAILED = "CACHE_WRITE_FAILED"
    CACHE_SERIALIZATION_ERROR = "CACHE_SERIALIZATION_ERROR"

    # Sources and the tools they drive
    SOURCE_FETCH_FAILED = "SOURCE_FETCH_FAILED"
    EXTERNAL_TOOL_MISSING = "EXTERNAL_TOOL_MISSING"
    EXTERNAL_TOOL_FAILED = "EXTERNAL_TOOL_FAILED"

    # Startup and command line
    CONFIG_INVALID = "CONFIG_INVALID"
    CLI_INVALID_ARGUMENTS = "CLI_INVALID_ARGUMENTS"
    CLI_OUTPUT_ERROR = "CLI_OUTPUT_ERROR"
    CLI_UNEXPECTED_ERROR = "CLI_UNEXPECTED_ERROR"


def _to_primitives(data: Any) -> dict[str, PrimitiveContextValue]:
    """Normalize ``additional_data``: paths become strings, enums their values.

    ``None`` values are dropped.

    Raises:
        TypeError: If ``data`` is not a dict or holds a non-primitive value
    """
    if not isinstance(data, dict):
        msg = f"additional_data must be a dict, not {type(data).__name__}"
        raise TypeError(msg)

    result: dict[str, PrimitiveContextValue] = {}
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, Path):
            value = str(value)
        elif isinstance(value, Enum):
            value = value.value
        if not isinstance(value, (str, int, float, bool)):
            msg = f"additional_data['{key}'] has unsupported type {type(value).__name__}"
            raise TypeError(msg)
        result[key] = value
    return result


@dataclass(frozen=True)
class ErrorContext:
    """Where an error happened.

    Attributes:
        file_path: File involved, if any (config, alias dataset, cache entry)
        operation: Name of the failing operation, e.g. ``cache_set``
        additional_data: Extra primitive fields such as the source name
    """

    file_path: str | None = None
    operation: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        if self.additional_data is not None:
            object.__setattr__(self, "additional_data", _to_primitives(self.additional_data))

    def safe_dict(self) -> dict[str, Any]:
        """Context as a plain dict for log records."""
        exported: dict[str, Any] = {}
        if self.file_path is not None:
            exported["file_path"] = self.file_path
        if self.operation is not None:
            exported["operation"] = self.operation
        exported["additional_data"] = dict(self.additional_data or {})
        return exported


class PondusError(Exception):
    """Base class for errors raised by pondus.

    ``str(error)`` is the bare message, so it can be shown to users and
    stored as a source's error reason unchanged.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.context = context if context is not None else ErrorContext()
        self.original_error = original_error

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": None if self.original_error is None else str(self.original_error),
        }


class DomainError(PondusError):
    """Input data violates an expectation (malformed dataset, bad cache key)."""


class InfrastructureError(PondusError):
    """The file system, the network or an external tool failed."""


class ApplicationError(PondusError):
    """Configuration or command handling failed."""


class AliasDatasetError(DomainError):
    """The bundled or user alias dataset could not be parsed."""


class SourceParseError(DomainError):
    """A source payload did not have the expected shape."""


class CacheWriteError(InfrastructureError):
    """Writing or clearing the freshness cache failed."""


class BrowserCommandError(InfrastructureError):
    """An ``agent-browser`` invocation exited unsuccessfully or timed out."""


class SourceUnavailableError(InfrastructureError):
    """The integration behind a source is absent or has nothing to offer.

    Reported as an ``unavailable`` status rather than an error.
    """


class ConfigError(ApplicationError):
    """The configuration file or environment is invalid."""


class CliError(ApplicationError):
    """A command failed; ``exit_code`` is what the process exits with."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: BaseException | None = None,
        *,
        command: str | None = None,
        exit_code: int = 1,
    ) -> None:
        super().__init__(code, message, context, original_error)
        self.command = command
        self.exit_code = exit_code


def create_parsing_error(
    message: str,
    file_path: str | None = None,
    operation: str | None = None,
    original_error: BaseException | None = None,
) -> AliasDatasetError:
    """AliasDatasetError for a dataset that failed to load."""
    return AliasDatasetError(
        ErrorCode.PARSING_ERROR,
        message,
        ErrorContext(file_path=file_path, operation=operation),
        original_error,
    )


def create_config_error(
    message: str,
    file_path: str | None = None,
    config_key: str | None = None,
    original_error: BaseException | None = None,
) -> ConfigError:
    """ConfigError pointing at the offending file and key."""
    return ConfigError(
        ErrorCode.CONFIG_INVALID,
        message,
        ErrorContext(
            file_path=file_path,
            operation="load_settings",
            additional_data={"config_key": config_key},
        ),
        original_error,
    )


def create_cli_error(
    message: str,
    command: str | None = None,
    original_error: BaseException | None = None,
    code: ErrorCode = ErrorCode.CLI_UNEXPECTED_ERROR,
    exit_code: int = 1,
) -> CliError:
    """CliError for ``command``."""
    return CliError(
        code,
        message,
        ErrorContext(operation="cli", additional_data={"command": command}),
        original_error,
        command=command,
        exit_code=exit_code,
    )
