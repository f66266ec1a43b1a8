"""Services module for pondus.

Alias resolution, the freshness cache and the aggregation pipeline.
"""

from .aggregator import Aggregator
from .alias_resolver import AliasEntry, AliasResolver
from .cache import CachedPayload, CacheEntry, FreshnessCache

__all__ = [
    "Aggregator",
    "AliasEntry",
    "AliasResolver",
    "CacheEntry",
    "CachedPayload",
    "FreshnessCache",
]
