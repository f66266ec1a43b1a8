"""File-based freshness cache for raw source payloads.

One JSON document per source key, ``<cache_dir>/<key>.json``, holding the
payload together with when it was fetched and the TTL it was written with.
Writes go through a temporary file that is fsynced and renamed onto the
final path, so a reader only ever sees a complete document.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, NamedTuple

import orjson
from pydantic import BaseModel, Field, ValidationError, field_validator

from pondus.shared.constants import Cache
from pondus.shared.errors import (
    CacheWriteError,
    DomainError,
    ErrorCode,
    ErrorContext,
)
from pondus.shared.logging import log_operation_error, log_operation_success

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(Cache.KEY_PATTERN)


class CacheEntry(BaseModel):
    """Schema of one cache file.

    Attributes:
        fetched_at: UTC time the payload was fetched.
        ttl_hours: Freshness window the entry was written with.
        data: Source-defined payload, opaque to the cache.
    """

    fetched_at: datetime
    ttl_hours: int = Field(ge=0)
    data: Any = None

    @field_validator("fetched_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class CachedPayload(NamedTuple):
    """A fresh cache hit."""

    fetched_at: datetime
    data: Any


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class FreshnessCache:
    """TTL cache keyed by source name.

    Args:
        cache_dir: Directory holding the cache files; created on first write.
        ttl_hours: TTL recorded in entries written by this instance.
        bypass: Treat every read as a miss (writes still happen).
        clock: Returns the current aware UTC time.
    """

    def __init__(
        self,
        cache_dir: Path | str,
        ttl_hours: int = Cache.DEFAULT_TTL_HOURS,
        *,
        bypass: bool = False,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.cache_dir = Path(cache_dir)
        self.ttl_hours = ttl_hours
        self.bypass = bypass
        self._clock = clock or _utc_now

    def path_for(self, key: str) -> Path:
        """Return the file backing ``key``.

        Raises:
            DomainError: If ``key`` is not a safe file name.
        """
        if not _KEY_RE.match(key):
            raise DomainError(
                ErrorCode.VALIDATION_ERROR,
                f"Invalid cache key: {key!r}",
                ErrorContext(operation="cache_path", additional_data={"key": key}),
            )
        return self.cache_dir / f"{key}{Cache.FILE_SUFFIX}"

    def get(self, key: str) -> CachedPayload | None:
        """Return the payload for ``key`` if present and fresh.

        Missing, unreadable, corrupt and stale files are all misses. Stale
        files are left in place for the next ``set`` to overwrite.
        """
        path = self.path_for(key)
        if self.bypass:
            logger.debug("Cache bypass enabled, skipping read of '%s'", key)
            return None

        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            logger.debug("Cache miss for '%s'", key)
            return None
        except OSError as e:
            logger.debug("Cache read failed for '%s': %s", key, e)
            return None

        try:
            entry = CacheEntry.model_validate(orjson.loads(raw))
        except (orjson.JSONDecodeError, ValidationError) as e:
            logger.debug("Ignoring corrupt cache file %s: %s", path, e)
            return None

        age_hours = int((self._clock() - entry.fetched_at).total_seconds() / Cache.SECONDS_PER_HOUR)
        if age_hours >= entry.ttl_hours:
            logger.debug(
                "Cache entry '%s' is stale (%dh old, ttl %dh)",
                key,
                age_hours,
                entry.ttl_hours,
            )
            return None

        logger.debug("Cache hit for '%s' (%dh old)", key, age_hours)
        return CachedPayload(entry.fetched_at, entry.data)

    def set(self, key: str, data: Any) -> None:
        """Store ``data`` under ``key`` with the current time.

        Raises:
            CacheWriteError: If serialization or any file operation fails.
        """
        start = time.perf_counter()
        path = self.path_for(key)
        context = ErrorContext(
            file_path=str(path),
            operation="cache_set",
            additional_data={"key": key, "ttl_hours": self.ttl_hours},
        )

        try:
            entry = CacheEntry(fetched_at=self._clock(), ttl_hours=self.ttl_hours, data=data)
            payload = orjson.dumps(entry.model_dump(mode="json"), option=orjson.OPT_INDENT_2)
        except (TypeError, ValueError) as e:
            error = CacheWriteError(
                ErrorCode.CACHE_SERIALIZATION_ERROR,
                f"Failed to serialize cache data for '{key}': {e}",
                context,
                e,
            )
            log_operation_error(logger, error, level=logging.WARNING)
            raise error from e

        tmp_name: str | None = None
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "wb",
                dir=self.cache_dir,
                prefix=f".{key}.",
                suffix=Cache.TEMP_SUFFIX,
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            error = CacheWriteError(
                ErrorCode.CACHE_WRITE_FAILED,
                f"Failed to write cache file {path}: {e}",
                context,
                e,
            )
            log_operation_error(logger, error, level=logging.WARNING)
            raise error from e
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)

        log_operation_success(
            logger,
            "cache_set",
            (time.perf_counter() - start) * 1000,
            result_info={"bytes": len(payload)},
            context=context,
        )

    def clear(self) -> int:
        """Delete every cache file and return how many entries were removed.

        Raises:
            CacheWriteError: If a file cannot be removed.
        """
        if not self.cache_dir.is_dir():
            return 0

        removed = 0
        try:
            for cache_file in self.cache_dir.glob(f"*{Cache.FILE_SUFFIX}"):
                cache_file.unlink()
                removed += 1
            for leftover in self.cache_dir.glob(f".*{Cache.TEMP_SUFFIX}"):
                leftover.unlink(missing_ok=True)
        except OSError as e:
            error = CacheWriteError(
                ErrorCode.CACHE_WRITE_FAILED,
                f"Failed to clear cache directory {self.cache_dir}: {e}",
                ErrorContext(file_path=str(self.cache_dir), operation="cache_clear"),
                e,
            )
            log_operation_error(logger, error)
            raise error from e

        logger.info("Cleared %d cache entries from %s", removed, self.cache_dir)
        return removed
