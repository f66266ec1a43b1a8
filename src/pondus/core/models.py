"""Domain models for benchmark scores and query output.

Every source produces a ``SourceResult``; every query returns a
``PondusOutput`` that wraps the per-source results with the query that
produced them.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, model_serializer, model_validator

# Metric values keep the type the provider reported
MetricValue = Union[int, float, str]


class StatusKind(str, Enum):
    """Outcome of one source fetch."""

    OK = "ok"
    CACHED = "cached"
    UNAVAILABLE = "unavailable"
    ERROR = "error"


class SourceStatus(BaseModel):
    """Status of a ``SourceResult``.

    ``unavailable`` means the integration is absent or not configured and no
    attempt was made; ``error`` means an attempt was made and failed, and
    carries the reason.

    Serialized as ``"ok"``, ``"cached"``, ``"unavailable"`` or
    ``{"error": "<reason>"}``.
    """

    model_config = ConfigDict(frozen=True)

    kind: StatusKind
    reason: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _from_wire(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"kind": value}
        if isinstance(value, dict) and set(value) == {StatusKind.ERROR.value}:
            return {"kind": StatusKind.ERROR, "reason": value[StatusKind.ERROR.value]}
        return value

    @model_validator(mode="after")
    def _check_reason(self) -> SourceStatus:
        if self.kind is StatusKind.ERROR and self.reason is None:
            msg = "error status requires a reason"
            raise ValueError(msg)
        return self

    @model_serializer
    def _to_wire(self) -> Union[str, dict[str, str]]:
        if self.kind is StatusKind.ERROR:
            return {StatusKind.ERROR.value: self.reason or ""}
        return self.kind.value

    @classmethod
    def ok(cls) -> SourceStatus:
        return cls(kind=StatusKind.OK)

    @classmethod
    def cached(cls) -> SourceStatus:
        return cls(kind=StatusKind.CACHED)

    @classmethod
    def unavailable(cls) -> SourceStatus:
        return cls(kind=StatusKind.UNAVAILABLE)

    @classmethod
    def error(cls, reason: str) -> SourceStatus:
        return cls(kind=StatusKind.ERROR, reason=reason)

    @property
    def is_error(self) -> bool:
        return self.kind is StatusKind.ERROR

    def __str__(self) -> str:
        if self.kind is StatusKind.ERROR:
            return f"error: {self.reason}"
        return self.kind.value


class ModelScore(BaseModel):
    """One model's entry on one leaderboard.

    Attributes:
        model: Name as normalized by the source itself (lowercase, roughly
            canonical). Not guaranteed to match what the alias resolver
            produces for ``source_model_name``.
        source_model_name: Name exactly as the provider wrote it.
        metrics: Provider metrics, numeric or text.
        rank: 1-based position within the source, if ranked.
    """

    model: str
    source_model_name: str
    metrics: dict[str, MetricValue] = Field(default_factory=dict)
    rank: int | None = None


class SourceResult(BaseModel):
    """Everything one source returned for one invocation."""

    source: str
    fetched_at: datetime | None = None
    status: SourceStatus
    scores: list[ModelScore] = Field(default_factory=list)

    @classmethod
    def failed(cls, source: str, reason: str) -> SourceResult:
        """Result for a source whose fetch was attempted and failed."""
        return cls(source=source, status=SourceStatus.error(reason))

    @classmethod
    def not_available(cls, source: str) -> SourceResult:
        """Result for a source that is not configured or not installed."""
        return cls(source=source, status=SourceStatus.unavailable())

    def with_scores(self, scores: list[ModelScore]) -> SourceResult:
        """Return a copy of this result holding ``scores`` instead."""
        return self.model_copy(update={"scores": scores})


class QueryType(str, Enum):
    RANK = "rank"
    CHECK = "check"
    COMPARE = "compare"
    SOURCES = "sources"


class QueryInfo(BaseModel):
    """The query a ``PondusOutput`` answers. Unset fields are omitted on output."""

    model_config = ConfigDict(populate_by_name=True)

    query_type: QueryType = Field(alias="type")
    model: str | None = None
    models: list[str] | None = None
    top: int | None = None

    @model_serializer
    def _serialize(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.query_type.value}
        if self.model is not None:
            data["model"] = self.model
        if self.models is not None:
            data["models"] = list(self.models)
        if self.top is not None:
            data["top"] = self.top
        return data


class PondusOutput(BaseModel):
    """Top-level document produced by every query."""

    timestamp: datetime
    query: QueryInfo
    sources: list[SourceResult]
