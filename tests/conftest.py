"""
Pytest configuration and shared fixtures for pondus tests.
"""

from __future__ import annotations

import tempfile
from collections.abc import Generator
from datetime import datetime, timezone
from pathlib import Path

import pytest

from pondus.config import Settings
from pondus.services import AliasResolver, FreshnessCache

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep user config, cache and API keys out of every test."""
    for name in ("AA_API_KEY", "PONDUS_CONFIG", "PONDUS_AA_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PONDUS_CONFIG", str(tmp_path / "no-config.toml"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "xdg-cache"))


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to the temporary directory.
    """
    with tempfile.TemporaryDirectory() as temp_path:
        yield Path(temp_path)


@pytest.fixture
def settings() -> Settings:
    """Default settings with sequential fetching."""
    settings = Settings()
    settings.fetch.max_workers = 1
    return settings


@pytest.fixture
def cache(temp_dir: Path) -> FreshnessCache:
    """A cache in a throwaway directory with a fixed clock."""
    return FreshnessCache(temp_dir / "cache", ttl_hours=24, clock=lambda: FIXED_NOW)


@pytest.fixture
def resolver() -> AliasResolver:
    """A small resolver independent of the bundled dataset."""
    return AliasResolver.from_entries(
        {
            "gpt-5": {"canonical": "gpt-5", "aliases": ["GPT-5 (high)", "openai/gpt-5"]},
            "gpt-5-pro": {"canonical": "gpt-5-pro", "aliases": []},
            "gpt-5.2": {"canonical": "gpt-5.2", "aliases": ["GPT 5.2"]},
            "claude-opus-4.6": {"canonical": "claude-opus-4.6", "aliases": ["Claude Opus 4.6"]},
        },
    )
