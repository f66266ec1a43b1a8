"""Aider polyglot leaderboard (YAML data file in the Aider repository)."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import yaml

from pondus.config import Settings
from pondus.core.models import SourceResult, SourceStatus
from pondus.shared.constants import SourceNames
from pondus.shared.errors import ErrorCode, ErrorContext, SourceParseError
from pondus.sources.base import BenchmarkSource, as_float, make_score, rank_scores

LEADERBOARD_URL = (
    "https://raw.githubusercontent.com/Aider-AI/aider/main/aider/website/_data/polyglot_leaderboard.yml"
)
KEPT_FIELDS = ("pass_rate_1", "total_cost", "percent_cases_well_formed")


def parse_leaderboard_yaml(text: str) -> list[dict[str, Any]]:
    """Parse the leaderboard YAML into the JSON-able rows that get cached.

    Raises:
        SourceParseError: If the document is not a YAML list.
    """
    try:
        entries = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SourceParseError(
            ErrorCode.PARSING_ERROR,
            f"Failed to parse Aider YAML: {e}",
            ErrorContext(operation="fetch_aider"),
            e,
        ) from e

    if not isinstance(entries, list):
        raise SourceParseError(
            ErrorCode.PARSING_ERROR,
            "Failed to parse Aider YAML: expected a list of results",
            ErrorContext(operation="fetch_aider"),
        )

    rows = []
    for entry in entries:
        if not isinstance(entry, dict) or not isinstance(entry.get("model"), str):
            continue
        row: dict[str, Any] = {"model": entry["model"]}
        for field in KEPT_FIELDS:
            row[field] = as_float(entry.get(field))
        rows.append(row)
    return rows


class AiderSource(BenchmarkSource):
    """Pass rates on Aider's polyglot coding benchmark."""

    name = SourceNames.AIDER

    def download(self, settings: Settings) -> Any:
        with self.http_client(settings) as client:
            return parse_leaderboard_yaml(client.get_text(LEADERBOARD_URL))

    def build_result(self, data: Any, fetched_at: datetime | None, status: SourceStatus) -> SourceResult:
        scores = []
        for entry in data if isinstance(data, list) else []:
            if not isinstance(entry, dict) or not isinstance(entry.get("model"), str):
                continue
            model = entry["model"]
            scores.append(
                make_score(
                    model.lower(),
                    model,
                    pass_rate_1=as_float(entry.get("pass_rate_1")),
                    cost=as_float(entry.get("total_cost")),
                    percent_cases_well_formed=as_float(entry.get("percent_cases_well_formed")),
                )
            )
        return self.result(rank_scores(scores, "pass_rate_1"), fetched_at, status)
