"""
Structured logging for pondus.

Helpers that attach operation names, timings and error context to log
records, plus the handler setup used by the CLI. Console logs always go to
stderr because stdout carries the rendered command output.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

from pondus.shared.errors import ErrorContext, PondusError


class StructuredFormatter(logging.Formatter):
    """
    Formatter that renders each record as one JSON object per line.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created,
                tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for attribute in ("error_code", "context", "operation", "duration_ms", "result_info"):
            if hasattr(record, attribute):
                log_entry[attribute] = getattr(record, attribute)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def _stderr_console() -> Console:
    return Console(stderr=True)


def setup_structured_logger(
    name: str = "pondus",
    level: str = "WARNING",
    log_file: str | None = None,
    *,
    use_rich_console: bool = True,
) -> logging.Logger:
    """
    Configure the ``pondus`` logger for one CLI invocation.

    Calling it again replaces the previous handlers, so the level can change
    between invocations in the same process.

    Args:
        name: Logger name
        level: Level name such as ``"DEBUG"`` or ``"WARNING"``
        log_file: Also append JSON lines to this file
        use_rich_console: RichHandler on stderr; False writes JSON lines instead
    """
    logger = logging.getLogger(name)
    logger.handlers.clear()
    logger.setLevel(level.upper())
    logger.propagate = False

    console_handler: logging.Handler
    if use_rich_console:
        console_handler = RichHandler(
            console=_stderr_console(),
            show_path=False,
            markup=False,
            rich_tracebacks=True,
            log_time_format="[%H:%M:%S]",
        )
    else:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(StructuredFormatter())
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    return logger


def _as_dict(context: dict[str, Any] | ErrorContext | None) -> dict[str, Any]:
    if isinstance(context, ErrorContext):
        return context.safe_dict()
    return dict(context or {})


def log_operation_error(
    logger: logging.Logger,
    error: PondusError,
    operation: str | None = None,
    additional_context: dict[str, Any] | ErrorContext | None = None,
    *,
    level: int = logging.ERROR,
) -> None:
    """
    Log a PondusError with its code and context.

    Per-source failures are recoverable and pass ``level=logging.WARNING``.
    The original traceback is attached only when DEBUG is enabled.
    """
    merged = {**error.context.safe_dict(), **_as_dict(additional_context)}
    logger.log(
        level,
        error.message,
        extra={
            "error_code": error.code.value,
            "operation": operation or error.context.operation,
            "context": merged,
        },
        exc_info=error.original_error is not None and logger.isEnabledFor(logging.DEBUG),
    )


def log_operation_success(
    logger: logging.Logger,
    operation: str,
    duration_ms: float,
    result_info: dict[str, Any] | None = None,
    context: dict[str, Any] | ErrorContext | None = None,
) -> None:
    logger.debug(
        "%s finished in %.1fms",
        operation,
        duration_ms,
        extra={
            "operation": operation,
            "duration_ms": duration_ms,
            "result_info": result_info or {},
            "context": _as_dict(context),
        },
    )


def log_operation_start(
    logger: logging.Logger,
    operation: str,
    context: dict[str, Any] | None = None,
) -> None:
    logger.debug("%s started", operation, extra={"operation": operation, "context": _as_dict(context)})


def log_api_call(
    logger: logging.Logger,
    endpoint: str,
    method: str = "GET",
    status_code: int | None = None,
    duration_ms: float | None = None,
) -> None:
    """
    Log one HTTP request: DEBUG on success, WARNING for 4xx/5xx responses.
    """
    context: dict[str, Any] = {"endpoint": endpoint, "method": method}
    if status_code is not None:
        context["status_code"] = status_code
    if duration_ms is not None:
        context["duration_ms"] = round(duration_ms, 1)

    failed = status_code is not None and status_code >= 400
    logger.log(
        logging.WARNING if failed else logging.DEBUG,
        "%s %s -> %s",
        method,
        endpoint,
        status_code if status_code is not None else "no response",
        extra={"operation": "api_call", "context": context},
    )
