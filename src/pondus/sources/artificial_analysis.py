"""Artificial Analysis intelligence index (API key required)."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from pondus.config import Settings
from pondus.core.models import ModelScore, SourceResult, SourceStatus
from pondus.shared.constants import SourceNames
from pondus.sources.base import BenchmarkSource, as_float, make_score, rank_scores

logger = logging.getLogger(__name__)

API_URL = "https://artificialanalysis.ai/api/v2/data/llms/models"
API_KEY_HEADER = "x-api-key"


class ArtificialAnalysisSource(BenchmarkSource):
    """Models ranked by Artificial Analysis' intelligence index."""

    name = SourceNames.ARTIFICIAL_ANALYSIS

    def unavailable_reason(self, settings: Settings) -> str | None:
        if settings.artificial_analysis_api_key() is None:
            return "no API key configured (set AA_API_KEY)"
        return None

    def download(self, settings: Settings) -> Any:
        api_key = settings.artificial_analysis_api_key() or ""
        with self.http_client(settings) as client:
            return client.get_json(API_URL, headers={API_KEY_HEADER: api_key})

    def build_result(self, data: Any, fetched_at: datetime | None, status: SourceStatus) -> SourceResult:
        if isinstance(data, dict):
            data = data.get("data")
        models = data if isinstance(data, list) else []

        scores: list[ModelScore] = []
        for model in models:
            if not isinstance(model, dict):
                continue
            name = model.get("name")
            intelligence = as_float(model.get("intelligence_index"))
            if not isinstance(name, str) or intelligence is None or "tokens_per_second" not in model:
                continue
            scores.append(
                make_score(
                    name.lower().replace(" ", "-"),
                    name,
                    intelligence_index=intelligence,
                    input_cost_per_1m_tokens=as_float(model.get("input_cost_per_1m_tokens")),
                    output_cost_per_1m_tokens=as_float(model.get("output_cost_per_1m_tokens")),
                    tokens_per_second=as_float(model.get("tokens_per_second")),
                )
            )

        return self.result(rank_scores(scores, "intelligence_index", record_rank=True), fetched_at, status)
