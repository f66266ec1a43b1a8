"""Source adapter contract and the shared fetch template."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any, ClassVar

import requests

from pondus.config import Settings
from pondus.core.models import MetricValue, ModelScore, SourceResult, SourceStatus
from pondus.services.cache import FreshnessCache
from pondus.shared.errors import (
    BrowserCommandError,
    CacheWriteError,
    SourceParseError,
    SourceUnavailableError,
)
from pondus.shared.logging import log_operation_error
from pondus.sources.http import HttpClient, http_error_reason

logger = logging.getLogger(__name__)


def as_float(value: Any) -> float | None:
    """Return ``value`` as a float if it is a JSON number (not a bool)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def normalize_name(name: str) -> str:
    """Lowercase and turn spaces and underscores into dashes."""
    return name.lower().replace(" ", "-").replace("_", "-")


def rank_scores(scores: Iterable[ModelScore], metric: str, *, record_rank: bool = False) -> list[ModelScore]:
    """Sort best-first by ``metric`` and assign 1-based ranks.

    Missing or non-numeric metrics sort as 0. The sort is stable, so equal
    scores keep their input order.

    Args:
        scores: Unranked scores.
        metric: Metric key to sort on, descending.
        record_rank: Also store the rank as a ``rank`` metric.
    """
    ordered = sorted(scores, key=lambda s: as_float(s.metrics.get(metric)) or 0.0, reverse=True)
    for position, score in enumerate(ordered, start=1):
        score.rank = position
        if record_rank:
            score.metrics["rank"] = position
    return ordered


def make_score(model: str, source_model_name: str, **metrics: MetricValue | None) -> ModelScore:
    """Build a ModelScore, dropping metrics whose value is None."""
    return ModelScore(
        model=model,
        source_model_name=source_model_name,
        metrics={key: value for key, value in metrics.items() if value is not None},
    )


class BenchmarkSource(ABC):
    """One benchmark provider.

    Subclasses set ``name`` and implement ``download`` (network or scrape
    work returning a JSON-able payload) and ``build_result`` (pure parsing
    of that payload, shared by the fresh and cached paths).
    """

    name: ClassVar[str]

    @property
    def cache_key(self) -> str:
        return self.name

    def unavailable_reason(self, settings: Settings) -> str | None:
        """Return why this source cannot run with ``settings``, or None."""
        return None

    @abstractmethod
    def download(self, settings: Settings) -> Any:
        """Fetch the raw payload to cache."""

    @abstractmethod
    def build_result(self, data: Any, fetched_at: datetime | None, status: SourceStatus) -> SourceResult:
        """Turn a payload into a ranked ``SourceResult``."""

    def http_client(self, settings: Settings) -> HttpClient:
        return HttpClient(timeout=settings.http.timeout_seconds)

    def result(
        self,
        scores: list[ModelScore],
        fetched_at: datetime | None,
        status: SourceStatus,
    ) -> SourceResult:
        return SourceResult(source=self.name, fetched_at=fetched_at, status=status, scores=scores)

    def fetch(self, settings: Settings, cache: FreshnessCache) -> SourceResult:
        """Return this source's result, from cache when fresh.

        Expected failures (HTTP status, scrape or parse problems, missing
        tools) become an ``error`` or ``unavailable`` result. Anything else
        propagates to the caller.
        """
        reason = self.unavailable_reason(settings)
        if reason is not None:
            logger.info("Source '%s' unavailable: %s", self.name, reason)
            return SourceResult.not_available(self.name)

        cached = cache.get(self.cache_key)
        if cached is not None:
            return self.build_result(cached.data, cached.fetched_at, SourceStatus.cached())

        try:
            payload = self.download(settings)
        except requests.HTTPError as e:
            logger.warning("Source '%s' failed: %s", self.name, http_error_reason(e))
            return SourceResult.failed(self.name, http_error_reason(e))
        except SourceUnavailableError as e:
            logger.info("Source '%s' unavailable: %s", self.name, e)
            return SourceResult.not_available(self.name)
        except (BrowserCommandError, SourceParseError) as e:
            log_operation_error(logger, e, operation=f"fetch_{self.name}", level=logging.WARNING)
            return SourceResult.failed(self.name, str(e))

        fetched_at = datetime.now(timezone.utc)
        try:
            cache.set(self.cache_key, payload)
        except CacheWriteError as e:
            # The fetched result is returned even when it could not be cached
            log_operation_error(logger, e, operation=f"cache_{self.name}", level=logging.WARNING)

        return self.build_result(payload, fetched_at, SourceStatus.ok())


def score_rows(data: Any, value_key: str) -> list[tuple[str, float]]:
    """Read ``{"scores": [{"source_model_name": ..., <value_key>: ...}]}`` payloads.

    Rows missing a name or a numeric value are skipped.
    """
    rows = data.get("scores") if isinstance(data, dict) else None
    if not isinstance(rows, list):
        return []

    parsed: list[tuple[str, float]] = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        name = row.get("source_model_name")
        value = as_float(row.get(value_key))
        if isinstance(name, str) and value is not None:
            parsed.append((name, value))
    return parsed
