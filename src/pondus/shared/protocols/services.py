"""Service protocols for dependency inversion.

The aggregation pipeline drives sources through this protocol so the
services layer never imports the concrete source adapters.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from pondus.config import Settings
    from pondus.core.models import SourceResult
    from pondus.services.cache import FreshnessCache


class BenchmarkSourceProtocol(Protocol):
    """A benchmark provider the pipeline can fetch from.

    Example:
        >>> from pondus.sources import ArenaSource
        >>> source: BenchmarkSourceProtocol = ArenaSource()
        >>> result = source.fetch(settings, cache)
    """

    @property
    def name(self) -> str:
        """Stable source identifier, also used as the cache key."""

    def fetch(self, settings: Settings, cache: FreshnessCache) -> SourceResult:
        """Return this source's result. May raise; the caller isolates failures."""
