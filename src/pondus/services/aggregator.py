"""Aggregation pipeline: fan out to every source, then filter by identity.

Each query is one round of fetching (``fetch_all``) followed by a pure
in-memory filter over the collected results.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

from pondus.config import Settings
from pondus.core.models import ModelScore, PondusOutput, QueryInfo, QueryType, SourceResult
from pondus.services.alias_resolver import AliasResolver
from pondus.services.cache import FreshnessCache
from pondus.shared.errors import ErrorCode, ErrorContext, PondusError
from pondus.shared.logging import (
    log_operation_error,
    log_operation_start,
    log_operation_success,
)
from pondus.shared.protocols import BenchmarkSourceProtocol

logger = logging.getLogger(__name__)


class Aggregator:
    """Answers rank, check, compare and sources queries over a fixed source list.

    Args:
        settings: Loaded settings, passed through to every source.
        cache: Freshness cache shared by the sources.
        resolver: Alias resolver used by identity-sensitive queries.
        sources: Sources in registration order.
    """

    def __init__(
        self,
        settings: Settings,
        cache: FreshnessCache,
        resolver: AliasResolver,
        sources: Sequence[BenchmarkSourceProtocol],
    ) -> None:
        self.settings = settings
        self.cache = cache
        self.resolver = resolver
        self._sources = list(sources)

    def _fetch_one(self, source: BenchmarkSourceProtocol) -> SourceResult:
        start = time.perf_counter()
        try:
            result = source.fetch(self.settings, self.cache)
        except Exception as e:  # noqa: BLE001
            # A failing source never affects the others
            error = e if isinstance(e, PondusError) else PondusError(
                ErrorCode.SOURCE_FETCH_FAILED,
                str(e) or type(e).__name__,
                ErrorContext(operation="fetch_source", additional_data={"source": source.name}),
                e,
            )
            log_operation_error(
                logger,
                error,
                operation="fetch_source",
                additional_context={"source": source.name},
                level=logging.WARNING,
            )
            return SourceResult.failed(source.name, str(error))

        log_operation_success(
            logger,
            "fetch_source",
            (time.perf_counter() - start) * 1000,
            result_info={"status": str(result.status), "scores": len(result.scores)},
            context={"source": source.name},
        )
        return result

    def fetch_all(self) -> list[SourceResult]:
        """Fetch every source, one result per source in registration order."""
        workers = min(self.settings.fetch.max_workers, len(self._sources))
        log_operation_start(logger, "fetch_all", {"sources": len(self._sources), "workers": workers})

        if workers <= 1:
            return [self._fetch_one(source) for source in self._sources]

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pondus-source") as executor:
            futures = [executor.submit(self._fetch_one, source) for source in self._sources]
            return [future.result() for future in futures]

    def _output(self, query: QueryInfo, sources: list[SourceResult]) -> PondusOutput:
        return PondusOutput(timestamp=datetime.now(timezone.utc), query=query, sources=sources)

    def _filter(self, results: list[SourceResult], keep: Callable[[ModelScore], bool]) -> list[SourceResult]:
        return [result.with_scores([s for s in result.scores if keep(s)]) for result in results]

    def rank(self, top: int | None = None) -> PondusOutput:
        """All sources, each truncated to its first ``top`` scores if given."""
        results = self.fetch_all()
        if top is not None:
            results = [result.with_scores(result.scores[:top]) for result in results]
        return self._output(QueryInfo(query_type=QueryType.RANK, top=top), results)

    def check(self, model: str) -> PondusOutput:
        """Scores for one model across all sources.

        A score is kept when the source's own normalized name equals the
        canonical, or when its raw name resolves to it.
        """
        canonical = self.resolver.resolve(model)
        results = self._filter(
            self.fetch_all(),
            lambda s: s.model.lower() == canonical or self.resolver.matches(s.source_model_name, canonical),
        )
        return self._output(QueryInfo(query_type=QueryType.CHECK, model=canonical), results)

    def compare(self, model1: str, model2: str) -> PondusOutput:
        """Scores for two models side by side, matched on the raw source name."""
        wanted = (self.resolver.resolve(model1), self.resolver.resolve(model2))
        results = self._filter(
            self.fetch_all(),
            lambda s: self.resolver.resolve(s.source_model_name) in wanted,
        )
        return self._output(QueryInfo(query_type=QueryType.COMPARE, models=list(wanted)), results)

    def sources(self) -> PondusOutput:
        """Every source, unfiltered."""
        return self._output(QueryInfo(query_type=QueryType.SOURCES), self.fetch_all())

    def refresh(self, on_cleared: Callable[[int], None] | None = None) -> PondusOutput:
        """Clear the cache, then rank.

        ``on_cleared`` is called with the number of removed entries once the
        cache is empty and before any source is fetched.
        """
        removed = self.cache.clear()
        logger.info("Removed %d cache entries before refresh", removed)
        if on_cleared is not None:
            on_cleared(removed)
        return self.rank()
