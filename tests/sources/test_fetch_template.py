"""Tests for the shared source fetch template and HTTP helpers."""

from __future__ import annotations

from unittest.mock import Mock

import pytest
import requests

from pondus.config import Settings
from pondus.core.models import SourceStatus, StatusKind
from pondus.shared.errors import CacheWriteError, ErrorCode
from pondus.sources import ArenaSource, MockSource, all_sources
from pondus.sources.http import HttpClient, create_session, http_error_reason

ARENA_PAYLOAD = {"20250301": {"text": {"overall": {"GPT-5.2": 1501, "Claude Opus 4.6": 1480}}}}


def _http_error(status: int, reason: str) -> requests.HTTPError:
    response = requests.Response()
    response.status_code = status
    response.reason = reason
    return requests.HTTPError(f"{status} Client Error", response=response)


class TestFetchTemplate:
    """Cache first, then download, with failures mapped to statuses."""

    def test_fresh_download_is_cached(self, settings, cache, mocker) -> None:
        download = mocker.patch.object(ArenaSource, "download", return_value=ARENA_PAYLOAD)

        first = ArenaSource().fetch(settings, cache)
        second = ArenaSource().fetch(settings, cache)

        assert download.call_count == 1
        assert first.status == SourceStatus.ok()
        assert first.fetched_at is not None
        assert second.status == SourceStatus.cached()
        assert [s.model for s in second.scores] == ["gpt-5.2", "claude opus 4.6"]

    def test_bypass_always_downloads(self, settings, cache, mocker) -> None:
        download = mocker.patch.object(ArenaSource, "download", return_value=ARENA_PAYLOAD)
        cache.bypass = True

        ArenaSource().fetch(settings, cache)
        result = ArenaSource().fetch(settings, cache)

        assert download.call_count == 2
        assert result.status == SourceStatus.ok()

    def test_http_status_becomes_error(self, settings, cache, mocker) -> None:
        mocker.patch.object(ArenaSource, "download", side_effect=_http_error(404, "Not Found"))

        result = ArenaSource().fetch(settings, cache)

        assert result.status == SourceStatus.error("HTTP 404 Not Found")
        assert result.scores == []
        assert result.fetched_at is None

    def test_cache_write_failure_still_returns_scores(self, settings, cache, mocker) -> None:
        mocker.patch.object(ArenaSource, "download", return_value=ARENA_PAYLOAD)
        mocker.patch.object(
            cache,
            "set",
            side_effect=CacheWriteError(ErrorCode.CACHE_WRITE_FAILED, "read-only file system"),
        )

        result = ArenaSource().fetch(settings, cache)

        assert result.status == SourceStatus.ok()
        assert len(result.scores) == 2

    def test_unexpected_errors_propagate(self, settings, cache, mocker) -> None:
        """Network failures are left for the aggregator to report."""
        mocker.patch.object(ArenaSource, "download", side_effect=requests.ConnectionError("refused"))

        with pytest.raises(requests.ConnectionError):
            ArenaSource().fetch(settings, cache)

    def test_mock_source_ignores_cache(self, settings, cache) -> None:
        result = MockSource().fetch(settings, cache)

        assert result.status.kind is StatusKind.OK
        assert [(s.model, s.metrics["score"], s.rank) for s in result.scores] == [
            ("claude-opus-4.6", 92.5, 1),
            ("gpt-5.2", 89.1, 2),
            ("gemini-3.1-pro", 87.3, 3),
        ]
        assert cache.get("mock") is None


class TestRegistry:
    """Source registration order."""

    def test_default_order(self, settings) -> None:
        assert [source.name for source in all_sources(settings)] == [
            "artificial-analysis",
            "arena",
            "swebench",
            "swe-rebench",
            "aider",
            "livebench",
            "terminal-bench",
            "seal",
        ]

    def test_mock_is_appended_when_enabled(self) -> None:
        settings = Settings(fetch={"include_mock": True})

        assert all_sources(settings)[-1].name == "mock"


class TestHttp:
    """Session and client helpers."""

    def test_http_error_reason(self) -> None:
        assert http_error_reason(_http_error(503, "Service Unavailable")) == "HTTP 503 Service Unavailable"
        assert http_error_reason(_http_error(418, "")) == "HTTP 418"

    def test_session_has_user_agent_and_retries(self) -> None:
        session = create_session()

        assert session.headers["User-Agent"].startswith("pondus/")
        assert session.get_adapter("https://example.com").max_retries.total == 2

    def test_get_json_sends_accept_and_timeout(self) -> None:
        response = Mock(status_code=200)
        response.json.return_value = {"ok": True}
        session = Mock()
        session.get.return_value = response

        with HttpClient(timeout=7, session=session) as client:
            data = client.get_json("https://example.com/api", headers={"x-api-key": "k"})

        assert data == {"ok": True}
        session.get.assert_called_once_with(
            "https://example.com/api",
            params=None,
            headers={"Accept": "application/json", "x-api-key": "k"},
            timeout=7,
        )
        response.raise_for_status.assert_called_once()
        session.close.assert_called_once()
