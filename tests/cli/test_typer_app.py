"""Tests for the pondus command line."""

from __future__ import annotations

from pathlib import Path

import orjson
import pytest
from typer.testing import CliRunner

from pondus.cli.context import CliContext, LogLevel, clear_cli_context, get_cli_context
from pondus.cli.output import OutputFormat
from pondus.cli.typer_app import app
from pondus.config import Settings
from pondus.core.models import ModelScore, SourceResult, SourceStatus
from pondus.services import FreshnessCache
from pondus.shared.errors import CacheWriteError, ErrorCode
from pondus.sources import MockSource


class BrokenSource:
    """Always raises from fetch."""

    @property
    def name(self) -> str:
        return "broken"

    def fetch(self, settings: Settings, cache: FreshnessCache) -> SourceResult:
        raise RuntimeError("upstream exploded")


class AliasedSource:
    """Scores spelled the way providers spell them."""

    @property
    def name(self) -> str:
        return "aliased"

    def fetch(self, settings: Settings, cache: FreshnessCache) -> SourceResult:
        scores = [
            ModelScore(model="gpt-5 (high)", source_model_name="GPT-5 (high)", metrics={"score": 1.0}, rank=1),
            ModelScore(model="grok-4", source_model_name="Grok 4", metrics={"score": 0.5}, rank=2),
        ]
        return SourceResult(source="aliased", status=SourceStatus.ok(), scores=scores)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def offline_sources(mocker, monkeypatch, tmp_path: Path):
    """Replace the real sources and keep the cache in a temp directory."""
    monkeypatch.setenv("PONDUS_CACHE__DIR", str(tmp_path / "cache"))
    clear_cli_context()
    return mocker.patch(
        "pondus.cli.typer_app.all_sources",
        return_value=[MockSource(), BrokenSource(), AliasedSource()],
    )


def _json(stdout: str) -> dict:
    return orjson.loads(stdout)


class TestCommands:
    """Query commands print one JSON document to stdout."""

    def test_no_command_runs_rank(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--log-level", "CRITICAL"])

        assert result.exit_code == 0, result.output
        document = _json(result.stdout)
        assert document["query"] == {"type": "rank"}
        assert [s["source"] for s in document["sources"]] == ["mock", "broken", "aliased"]
        assert document["sources"][1]["status"] == {"error": "upstream exploded"}

    def test_rank_top(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--log-level", "CRITICAL", "rank", "--top", "1"])

        assert result.exit_code == 0, result.output
        document = _json(result.stdout)
        assert document["query"] == {"type": "rank", "top": 1}
        assert [len(s["scores"]) for s in document["sources"]] == [1, 0, 1]

    def test_rank_top_must_be_positive(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["rank", "--top", "0"])

        assert result.exit_code == 2

    def test_check(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--log-level", "CRITICAL", "check", "OpenAI/GPT-5"])

        assert result.exit_code == 0, result.output
        document = _json(result.stdout)
        assert document["query"] == {"type": "check", "model": "gpt-5"}
        assert document["sources"][0]["scores"] == []
        assert [s["source_model_name"] for s in document["sources"][2]["scores"]] == ["GPT-5 (high)"]

    def test_compare(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--log-level", "CRITICAL", "compare", "gpt-5.2", "Gemini 3.1 Pro"])

        assert result.exit_code == 0, result.output
        document = _json(result.stdout)
        assert document["query"] == {"type": "compare", "models": ["gpt-5.2", "gemini-3.1-pro"]}
        assert [s["model"] for s in document["sources"][0]["scores"]] == ["gpt-5.2", "gemini-3.1-pro"]

    def test_sources(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--log-level", "CRITICAL", "sources"])

        assert result.exit_code == 0, result.output
        assert _json(result.stdout)["query"] == {"type": "sources"}

    def test_refresh_announces_cache_clear(self, runner: CliRunner, tmp_path: Path) -> None:
        cache_dir = tmp_path / "cache"
        cache_dir.mkdir()
        (cache_dir / "arena.json").write_text("{}", encoding="utf-8")

        result = runner.invoke(app, ["--log-level", "CRITICAL", "refresh"])

        assert result.exit_code == 0, result.output
        assert "Cache cleared. Re-fetching all sources..." in result.output
        assert not (cache_dir / "arena.json").exists()

    def test_refresh_failed_clear_is_not_announced(self, runner: CliRunner, mocker) -> None:
        mocker.patch.object(
            FreshnessCache,
            "clear",
            side_effect=CacheWriteError(ErrorCode.CACHE_WRITE_FAILED, "Failed to clear cache directory"),
        )

        result = runner.invoke(app, ["--log-level", "CRITICAL", "refresh"])

        assert result.exit_code == 1
        assert "Cache cleared" not in result.output
        assert "Error: Failed to clear cache directory" in result.output

    def test_markdown_format(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--format", "md", "--log-level", "CRITICAL", "sources"])

        assert result.exit_code == 0, result.output
        assert "## mock" in result.stdout
        assert "| 1 | claude-opus-4.6 | Claude Opus 4.6 | 92.50 |" in result.stdout


class TestStartup:
    """Global options and fatal errors."""

    def test_unknown_format_exits_2(self, runner: CliRunner, offline_sources) -> None:
        result = runner.invoke(app, ["--format", "yaml", "rank"])

        assert result.exit_code == 2
        assert "Unknown format: yaml" in result.output
        offline_sources.assert_not_called()

    def test_missing_explicit_config_is_fatal(self, runner: CliRunner, tmp_path: Path, offline_sources) -> None:
        result = runner.invoke(app, ["--config", str(tmp_path / "missing.toml"), "rank"])

        assert result.exit_code == 1
        assert "Configuration file not found" in result.output
        offline_sources.assert_not_called()

    def test_malformed_alias_override_is_fatal(self, runner: CliRunner, tmp_path: Path) -> None:
        override = tmp_path / "aliases.toml"
        override.write_text('[x]\ncanonical = "a"\ncanonical = "b"\n', encoding="utf-8")
        config = tmp_path / "config.toml"
        config.write_text(f'[alias]\npath = "{override.as_posix()}"\n', encoding="utf-8")

        result = runner.invoke(app, ["--config", str(config), "sources"])

        assert result.exit_code == 1
        assert "Malformed alias dataset" in result.output

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert result.stdout.strip() == "pondus 0.1.0"

    def test_context_reflects_options(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["-v", "--refresh", "--format", "table", "sources"])

        assert result.exit_code == 0, result.output
        context = get_cli_context()
        assert context.refresh is True
        assert context.output_format is OutputFormat.TABLE
        assert context.get_effective_log_level() == "DEBUG"


def test_effective_log_level() -> None:
    assert CliContext(log_level=LogLevel.ERROR).get_effective_log_level() == "ERROR"
    assert CliContext(verbose=2, log_level=LogLevel.ERROR).get_effective_log_level() == "DEBUG"
