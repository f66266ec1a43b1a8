"""
Output Rendering Module

Renders a ``PondusOutput`` as JSON, a rich table, or markdown. JSON is the
stable machine-readable contract; the other two are for people.
"""

from __future__ import annotations

from enum import Enum
from io import StringIO
from typing import Any

import orjson
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pondus.core.models import MetricValue, ModelScore, PondusOutput, SourceResult
from pondus.shared.constants import CLIMessages
from pondus.shared.errors import CliError, ErrorCode, ErrorContext

TABLE_WIDTH = 120


class OutputFormat(str, Enum):
    """Supported output formats."""

    JSON = "json"
    TABLE = "table"
    MARKDOWN = "markdown"

    @classmethod
    def from_str(cls, value: str) -> OutputFormat:
        """Parse a ``--format`` value. ``md`` is accepted for markdown.

        Raises:
            CliError: For any other value, with the usage exit code.
        """
        normalized = value.strip().lower()
        if normalized == "md":
            return cls.MARKDOWN
        try:
            return cls(normalized)
        except ValueError as e:
            raise CliError(
                ErrorCode.CLI_INVALID_ARGUMENTS,
                CLIMessages.UNKNOWN_FORMAT.format(value=value),
                ErrorContext(operation="parse_format", additional_data={"format": value}),
                e,
                exit_code=2,
            ) from e


def to_json_bytes(output: PondusOutput) -> bytes:
    """Serialize output as indented JSON bytes."""
    try:
        return orjson.dumps(output.model_dump(mode="json"), option=orjson.OPT_INDENT_2)
    except (orjson.JSONEncodeError, TypeError) as e:
        raise CliError(
            ErrorCode.CLI_OUTPUT_ERROR,
            f"Failed to serialize output: {e}",
            ErrorContext(operation="render_json"),
            e,
        ) from e


def render_json(output: PondusOutput) -> str:
    return to_json_bytes(output).decode("utf-8")


def format_metric(value: MetricValue | None) -> str:
    """Format a metric cell: floats to two decimals, everything else as-is."""
    if value is None:
        return "-"
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


def metric_columns(scores: list[ModelScore]) -> list[str]:
    """Metric names in first-seen order, without the ``rank`` metric."""
    columns: dict[str, None] = {}
    for score in scores:
        for key in score.metrics:
            if key != "rank":
                columns.setdefault(key)
    return list(columns)


def _fetched_label(result: SourceResult) -> str:
    if result.fetched_at is None:
        return "never fetched"
    return f"fetched {result.fetched_at.isoformat(timespec='seconds')}"


def _rows(result: SourceResult, columns: list[str]) -> list[list[str]]:
    return [
        [
            str(score.rank) if score.rank is not None else "-",
            score.model,
            score.source_model_name,
            *(format_metric(score.metrics.get(column)) for column in columns),
        ]
        for score in result.scores
    ]


def _query_title(output: PondusOutput) -> str:
    data: dict[str, Any] = output.query.model_dump()
    details = [f"{key}={value}" for key, value in data.items() if key != "type"]
    suffix = f" ({', '.join(details)})" if details else ""
    return f"pondus {data['type']}{suffix}"


def render_table(output: PondusOutput) -> str:
    """Render one rich table per source into plain text."""
    buffer = StringIO()
    console = Console(file=buffer, width=TABLE_WIDTH, color_system=None, force_terminal=False)
    console.print(escape(_query_title(output)), style="bold")

    for result in output.sources:
        columns = metric_columns(result.scores)
        table = Table(
            title=escape(f"{result.source} ({result.status})"),
            caption=escape(_fetched_label(result)),
            show_header=True,
        )
        table.add_column("Rank", justify="right")
        table.add_column("Model")
        table.add_column("Source name")
        for column in columns:
            table.add_column(column, justify="right")

        rows = _rows(result, columns)
        if not rows:
            console.print(escape(f"{result.source} ({result.status}): no scores"))
            continue
        for row in rows:
            table.add_row(*(escape(cell) for cell in row))
        console.print(table)

    return buffer.getvalue()


def _md_cell(text: str) -> str:
    return text.replace("|", "\\|")


def render_markdown(output: PondusOutput) -> str:
    """Render a ``##`` section with a pipe table per source."""
    lines = [f"# {_query_title(output)}", ""]

    for result in output.sources:
        lines.append(f"## {result.source}")
        lines.append("")
        lines.append(f"_Status: {_md_cell(str(result.status))}, {_fetched_label(result)}_")
        lines.append("")

        if not result.scores:
            lines.append("No scores.")
            lines.append("")
            continue

        columns = metric_columns(result.scores)
        header = ["Rank", "Model", "Source name", *columns]
        lines.append("| " + " | ".join(_md_cell(cell) for cell in header) + " |")
        lines.append("|" + "|".join(" --- " for _ in header) + "|")
        for row in _rows(result, columns):
            lines.append("| " + " | ".join(_md_cell(cell) for cell in row) + " |")
        lines.append("")

    return "\n".join(lines).rstrip("\n") + "\n"


def render(output: PondusOutput, output_format: OutputFormat) -> str:
    """Render ``output`` in ``output_format``."""
    if output_format is OutputFormat.TABLE:
        return render_table(output)
    if output_format is OutputFormat.MARKDOWN:
        return render_markdown(output)
    return render_json(output)
