"""SWE-bench leaderboards published on swe-bench.github.io."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pondus.config import Settings
from pondus.core.models import ModelScore, SourceResult, SourceStatus
from pondus.shared.constants import SourceNames
from pondus.sources.base import BenchmarkSource, as_float, make_score, rank_scores

LEADERBOARDS_URL = (
    "https://raw.githubusercontent.com/SWE-bench/swe-bench.github.io/master/data/leaderboards.json"
)


def _entries(data: Any) -> list[Any]:
    if isinstance(data, dict):
        for key in ("leaderboards", "results"):
            if isinstance(data.get(key), list):
                return data[key]
        return []
    return data if isinstance(data, list) else []


def _to_score(result: Any) -> ModelScore | None:
    if not isinstance(result, dict) or not isinstance(result.get("name"), str):
        return None
    name = result["name"]
    count = result.get("resolved_count")
    date = result.get("date")
    return make_score(
        name.lower(),
        name,
        resolved_rate=as_float(result.get("resolved")),
        resolved_count=count if isinstance(count, int) and not isinstance(count, bool) else None,
        date=date if isinstance(date, str) else None,
    )


class SweBenchSource(BenchmarkSource):
    """Resolved rates across every SWE-bench leaderboard split."""

    name = SourceNames.SWEBENCH

    def download(self, settings: Settings) -> Any:
        with self.http_client(settings) as client:
            return client.get_json(LEADERBOARDS_URL)

    def build_result(self, data: Any, fetched_at: datetime | None, status: SourceStatus) -> SourceResult:
        scores = []
        for entry in _entries(data):
            nested = entry.get("results") if isinstance(entry, dict) else None
            for result in nested if isinstance(nested, list) else [entry]:
                parsed = _to_score(result)
                if parsed is not None:
                    scores.append(parsed)

        return self.result(rank_scores(scores, "resolved_rate"), fetched_at, status)
