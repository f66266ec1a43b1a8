"""HTTP, fan-out and browser-automation configuration models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from pondus.shared.constants import Network


class HttpSettings(BaseModel):
    """HTTP client settings shared by every API-backed source."""

    timeout_seconds: float = Field(
        default=Network.DEFAULT_TIMEOUT_SECONDS,
        gt=0,
        description="Request timeout in seconds",
    )


class FetchSettings(BaseModel):
    """How the aggregation pipeline drives the sources."""

    max_workers: int = Field(
        default=4,
        ge=1,
        description="Sources fetched concurrently (1 = strictly sequential)",
    )
    include_mock: bool = Field(
        default=False,
        description="Register the offline mock source",
    )


class BrowserSettings(BaseModel):
    """agent-browser subprocess settings."""

    timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Per-invocation timeout; unset means wait indefinitely",
    )
