"""Cache and alias dataset configuration models."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from pondus.shared.constants import Cache
from pondus.shared.paths import default_cache_dir


class CacheSettings(BaseModel):
    """Freshness cache configuration.

    ``ttl_hours`` is written into every cache entry; an entry is fresh while
    its age in whole hours is below the TTL it was written with.
    """

    ttl_hours: int = Field(
        default=Cache.DEFAULT_TTL_HOURS,
        ge=0,
        description="Cache time-to-live in hours",
    )
    dir: Path | None = Field(
        default=None,
        description="Cache directory (default: per-user cache directory)",
    )

    def resolved_dir(self) -> Path:
        """Return the configured directory, or the per-user default."""
        return self.dir.expanduser() if self.dir is not None else default_cache_dir()


class AliasSettings(BaseModel):
    """Alias dataset override configuration."""

    path: Path | None = Field(
        default=None,
        description="Path to a models.toml merged over the bundled aliases",
    )
