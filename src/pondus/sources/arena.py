"""LMArena text leaderboard, via the lmarena-history snapshots on GitHub."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pondus.config import Settings
from pondus.core.models import SourceResult, SourceStatus
from pondus.shared.constants import SourceNames
from pondus.sources.base import BenchmarkSource, as_float, make_score, rank_scores

SCORES_URL = "https://raw.githubusercontent.com/nakasyou/lmarena-history/main/output/scores.json"
PREFERRED_CATEGORIES = ("overall", "full_old")


class ArenaSource(BenchmarkSource):
    """Elo ratings from the latest Arena snapshot.

    The payload is keyed by ``YYYYMMDD`` snapshot dates:
    ``{"20250101": {"text": {"overall": {"model": elo, ...}}}}``.
    """

    name = SourceNames.ARENA

    def download(self, settings: Settings) -> Any:
        with self.http_client(settings) as client:
            return client.get_json(SCORES_URL)

    def build_result(self, data: Any, fetched_at: datetime | None, status: SourceStatus) -> SourceResult:
        if not isinstance(data, dict) or not data:
            return self.result([], fetched_at, status)

        text = data[max(data)]
        text = text.get("text") if isinstance(text, dict) else None
        if not isinstance(text, dict):
            return self.result([], fetched_at, status)

        category = next((c for c in PREFERRED_CATEGORIES if c in text), None)
        if category is None:
            category = next(iter(text), None)
        if category is None:
            return self.result([], fetched_at, SourceStatus.error("No valid categories found"))

        models = text[category]
        scores = []
        if isinstance(models, dict):
            for model_name, elo in models.items():
                value = as_float(elo)
                if value is not None:
                    scores.append(make_score(model_name.lower(), model_name, elo_score=value))

        if not scores:
            return self.result([], fetched_at, SourceStatus.error("Failed to parse Arena data structure"))

        return self.result(rank_scores(scores, "elo_score", record_rank=True), fetched_at, status)
