"""
Core domain models for pondus.

Score records, per-source results and query output shared by the sources,
the aggregation pipeline and the renderers.
"""

from .models import (
    MetricValue,
    ModelScore,
    PondusOutput,
    QueryInfo,
    QueryType,
    SourceResult,
    SourceStatus,
    StatusKind,
)

__all__ = [
    "MetricValue",
    "ModelScore",
    "PondusOutput",
    "QueryInfo",
    "QueryType",
    "SourceResult",
    "SourceStatus",
    "StatusKind",
]
