"""LiveBench judgments from the Hugging Face datasets-server rows API."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime
from typing import Any

import requests

from pondus.config import Settings
from pondus.core.models import SourceResult, SourceStatus
from pondus.shared.constants import SourceNames
from pondus.shared.errors import ErrorCode, ErrorContext, SourceParseError
from pondus.sources.base import (
    BenchmarkSource,
    as_float,
    make_score,
    normalize_name,
    rank_scores,
    score_rows,
)
from pondus.sources.http import HttpClient

logger = logging.getLogger(__name__)

ROWS_URL = "https://datasets-server.huggingface.co/rows"
DATASET = "livebench/model_judgment"
BATCH_SIZE = 100


def collect_scores(client: HttpClient) -> dict[str, list[float]]:
    """Page through the leaderboard split and group raw scores by model.

    Paging stops at the first failed or empty page; whatever was collected
    up to then is kept.
    """
    collected: dict[str, list[float]] = defaultdict(list)
    offset = 0

    while True:
        params = {
            "dataset": DATASET,
            "config": "default",
            "split": "leaderboard",
            "offset": offset,
            "length": BATCH_SIZE,
        }
        try:
            page = client.get_json(ROWS_URL, params=params)
        except (requests.RequestException, ValueError) as e:
            logger.debug("Stopping LiveBench paging at offset %d: %s", offset, e)
            break

        rows = page.get("rows") if isinstance(page, dict) else None
        if not isinstance(rows, list) or not rows:
            break

        for item in rows:
            row = item.get("row") if isinstance(item, dict) else None
            if not isinstance(row, dict):
                continue
            model = row.get("model")
            value = as_float(row.get("score"))
            if isinstance(model, str) and value is not None:
                collected[model].append(value)

        total = page.get("num_rows_total")
        offset += BATCH_SIZE
        if not isinstance(total, int) or offset >= total:
            break

    return dict(collected)


class LiveBenchSource(BenchmarkSource):
    """Global average per model, scaled to 0-100.

    The cached payload holds the aggregated rows rather than the raw
    judgments: ``{"scores": [{"source_model_name", "global_average"}]}``.
    """

    name = SourceNames.LIVEBENCH

    def download(self, settings: Settings) -> Any:
        with self.http_client(settings) as client:
            collected = collect_scores(client)

        if not collected:
            raise SourceParseError(
                ErrorCode.SOURCE_FETCH_FAILED,
                "Failed to fetch LiveBench data from HuggingFace datasets API",
                ErrorContext(operation="fetch_livebench"),
            )

        averages = sorted(
            ((model, sum(values) / len(values) * 100.0) for model, values in collected.items()),
            key=lambda item: item[1],
            reverse=True,
        )
        return {
            "scores": [
                {"source_model_name": model, "global_average": average} for model, average in averages
            ],
        }

    def build_result(self, data: Any, fetched_at: datetime | None, status: SourceStatus) -> SourceResult:
        scores = [
            make_score(normalize_name(name), name, global_average=average)
            for name, average in score_rows(data, "global_average")
        ]
        return self.result(rank_scores(scores, "global_average", record_rank=True), fetched_at, status)
