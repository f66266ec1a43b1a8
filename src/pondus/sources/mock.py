"""Offline source with fixed scores, for demos and development."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pondus.config import Settings
from pondus.core.models import SourceResult, SourceStatus
from pondus.services.cache import FreshnessCache
from pondus.shared.constants import SourceNames
from pondus.sources.base import BenchmarkSource, make_score, rank_scores

MOCK_SCORES = (
    ("claude-opus-4.6", "Claude Opus 4.6", 92.5),
    ("gpt-5.2", "GPT-5.2", 89.1),
    ("gemini-3.1-pro", "Gemini 3.1 Pro", 87.3),
)


class MockSource(BenchmarkSource):
    """Always returns the same three scores and never touches the cache."""

    name = SourceNames.MOCK

    def fetch(self, settings: Settings, cache: FreshnessCache) -> SourceResult:
        return self.build_result(None, datetime.now(timezone.utc), SourceStatus.ok())

    def download(self, settings: Settings) -> Any:
        return None

    def build_result(self, data: Any, fetched_at: datetime | None, status: SourceStatus) -> SourceResult:
        scores = [make_score(model, source_name, score=value) for model, source_name, value in MOCK_SCORES]
        return self.result(rank_scores(scores, "score", record_rank=True), fetched_at, status)
