"""Tests for parsing the API-backed source payloads."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from pondus.config import Settings
from pondus.core.models import SourceStatus, StatusKind
from pondus.shared.errors import SourceParseError
from pondus.sources import (
    AiderSource,
    ArenaSource,
    ArtificialAnalysisSource,
    LiveBenchSource,
    SweBenchSource,
    TerminalBenchSource,
)
from pondus.sources.aider import parse_leaderboard_yaml
from pondus.sources.livebench import collect_scores
from pondus.sources.terminal_bench import aggregate_results, result_files

FETCHED_AT = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class TestArtificialAnalysis:
    """Intelligence index payloads."""

    PAYLOAD = {
        "data": [
            {
                "name": "GPT 5.2",
                "intelligence_index": 73.1,
                "input_cost_per_1m_tokens": 1.25,
                "output_cost_per_1m_tokens": 10,
                "tokens_per_second": 120.5,
            },
            {"name": "Claude Opus 4.6", "intelligence_index": 75, "tokens_per_second": None},
            {"name": "No Speed Key", "intelligence_index": 80},
            {"name": "Bad Index", "intelligence_index": "high", "tokens_per_second": 1},
            "not a model",
        ],
    }

    def test_build_result(self) -> None:
        result = ArtificialAnalysisSource().build_result(self.PAYLOAD, FETCHED_AT, SourceStatus.ok())

        assert [s.source_model_name for s in result.scores] == ["Claude Opus 4.6", "GPT 5.2"]
        top, second = result.scores
        assert top.model == "claude-opus-4.6"
        assert top.rank == 1
        assert top.metrics == {"intelligence_index": 75.0, "rank": 1}
        assert second.metrics["output_cost_per_1m_tokens"] == 10.0
        assert second.metrics["tokens_per_second"] == 120.5
        assert second.metrics["rank"] == 2

    def test_bare_list_payload(self) -> None:
        result = ArtificialAnalysisSource().build_result(self.PAYLOAD["data"], FETCHED_AT, SourceStatus.ok())

        assert len(result.scores) == 2

    def test_unavailable_without_key(self, settings, cache) -> None:
        result = ArtificialAnalysisSource().fetch(settings, cache)

        assert result.status.kind is StatusKind.UNAVAILABLE
        assert result.scores == []

    def test_key_from_sources_table(self) -> None:
        settings = Settings(sources={"artificial-analysis": {"api_key": "secret"}})

        assert ArtificialAnalysisSource().unavailable_reason(settings) is None


class TestArena:
    """Dated Elo snapshots."""

    def test_latest_snapshot_and_overall_category(self) -> None:
        payload = {
            "20250101": {"text": {"overall": {"old-model": 1500}}},
            "20250301": {
                "text": {
                    "coding": {"ignored": 1},
                    "overall": {"Gemini-3.1-Pro": 1490.2, "GPT-5.2": 1501, "broken": "n/a"},
                },
            },
        }

        result = ArenaSource().build_result(payload, FETCHED_AT, SourceStatus.ok())

        assert [(s.model, s.metrics["elo_score"], s.rank) for s in result.scores] == [
            ("gpt-5.2", 1501.0, 1),
            ("gemini-3.1-pro", 1490.2, 2),
        ]
        assert result.scores[0].metrics["rank"] == 1
        assert result.status == SourceStatus.ok()

    def test_full_old_then_first_category(self) -> None:
        full_old = {"20250301": {"text": {"coding": {"a": 1}, "full_old": {"b": 2}}}}
        first = {"20250301": {"text": {"coding": {"a": 1}}}}

        assert ArenaSource().build_result(full_old, None, SourceStatus.ok()).scores[0].model == "b"
        assert ArenaSource().build_result(first, None, SourceStatus.ok()).scores[0].model == "a"

    def test_no_categories_is_an_error(self) -> None:
        result = ArenaSource().build_result({"20250301": {"text": {}}}, FETCHED_AT, SourceStatus.ok())

        assert result.status == SourceStatus.error("No valid categories found")

    def test_no_numeric_scores_is_an_error(self) -> None:
        result = ArenaSource().build_result({"20250301": {"text": {"overall": {"x": "y"}}}}, None, SourceStatus.ok())

        assert result.status == SourceStatus.error("Failed to parse Arena data structure")

    @pytest.mark.parametrize("payload", [{}, [], {"20250301": {"vision": {}}}])
    def test_unexpected_shapes_give_empty_scores(self, payload) -> None:
        result = ArenaSource().build_result(payload, None, SourceStatus.cached())

        assert result.scores == []
        assert result.status == SourceStatus.cached()


class TestSweBench:
    """Leaderboard splits with nested results."""

    def test_nested_results_across_splits(self) -> None:
        payload = {
            "leaderboards": [
                {
                    "name": "Verified",
                    "results": [
                        {"name": "Agent A + GPT-5", "resolved": 65.2, "resolved_count": 326, "date": "2025-09-01"},
                        {"name": "Agent B", "resolved": 70.4},
                    ],
                },
                {"name": "Lite", "results": [{"name": "Agent C", "resolved": 40, "resolved_count": True}]},
            ],
        }

        result = SweBenchSource().build_result(payload, FETCHED_AT, SourceStatus.ok())

        assert [s.source_model_name for s in result.scores] == ["Agent B", "Agent A + GPT-5", "Agent C"]
        assert [s.rank for s in result.scores] == [1, 2, 3]
        assert "rank" not in result.scores[0].metrics
        assert result.scores[1].metrics == {"resolved_rate": 65.2, "resolved_count": 326, "date": "2025-09-01"}
        assert result.scores[2].metrics == {"resolved_rate": 40.0}

    def test_flat_list(self) -> None:
        result = SweBenchSource().build_result([{"name": "X", "resolved": 1.5}, {"resolved": 3}], None, SourceStatus.ok())

        assert [s.model for s in result.scores] == ["x"]


class TestAider:
    """Polyglot leaderboard YAML."""

    YAML = """
- dirname: 2025-08-01-gpt5
  model: gpt-5 (high)
  pass_rate_1: 30.2
  pass_rate_2: 88.0
  percent_cases_well_formed: 91.1
  total_cost: 29.08
- model: claude-opus-4-6
  pass_rate_1: 35
- dirname: missing-model
  pass_rate_1: 99
"""

    def test_parse_and_build(self) -> None:
        rows = parse_leaderboard_yaml(self.YAML)

        assert rows[0] == {
            "model": "gpt-5 (high)",
            "pass_rate_1": 30.2,
            "total_cost": 29.08,
            "percent_cases_well_formed": 91.1,
        }
        assert len(rows) == 2

        result = AiderSource().build_result(rows, FETCHED_AT, SourceStatus.ok())

        assert [s.model for s in result.scores] == ["claude-opus-4-6", "gpt-5 (high)"]
        assert result.scores[1].metrics == {"pass_rate_1": 30.2, "cost": 29.08, "percent_cases_well_formed": 91.1}
        assert result.scores[0].metrics == {"pass_rate_1": 35.0}

    @pytest.mark.parametrize("text", ["key: [unclosed", "just: a mapping"])
    def test_invalid_yaml_raises(self, text: str) -> None:
        with pytest.raises(SourceParseError, match="Aider YAML"):
            parse_leaderboard_yaml(text)


class FakeClient:
    """Serves canned JSON pages by offset."""

    def __init__(self, pages: dict[int, object]) -> None:
        self.pages = pages
        self.offsets: list[int] = []

    def get_json(self, url, *, params=None, headers=None):
        offset = params["offset"]
        self.offsets.append(offset)
        page = self.pages[offset]
        if isinstance(page, Exception):
            raise page
        return page


def _rows(*pairs):
    return [{"row": {"model": model, "score": score}} for model, score in pairs]


class TestLiveBench:
    """Paged judgments averaged per model."""

    def test_collects_all_pages(self) -> None:
        client = FakeClient(
            {
                0: {"rows": _rows(("gpt-5", 0.8), ("claude", 0.5)), "num_rows_total": 150},
                100: {"rows": _rows(("gpt-5", 0.6), ("bad", "x")), "num_rows_total": 150},
            },
        )

        collected = collect_scores(client)

        assert client.offsets == [0, 100]
        assert collected == {"gpt-5": [0.8, 0.6], "claude": [0.5]}

    def test_failed_page_keeps_earlier_rows(self) -> None:
        client = FakeClient(
            {
                0: {"rows": _rows(("gpt-5", 0.8)), "num_rows_total": 500},
                100: ValueError("not json"),
            },
        )

        assert collect_scores(client) == {"gpt-5": [0.8]}

    def test_download_averages_and_scales(self, settings, mocker) -> None:
        mocker.patch(
            "pondus.sources.livebench.collect_scores",
            return_value={"GPT 5": [0.8, 0.6], "Claude_Opus": [0.9]},
        )

        payload = LiveBenchSource().download(settings)
        result = LiveBenchSource().build_result(payload, FETCHED_AT, SourceStatus.ok())

        assert [row["source_model_name"] for row in payload["scores"]] == ["Claude_Opus", "GPT 5"]
        assert [s.model for s in result.scores] == ["claude-opus", "gpt-5"]
        assert result.scores[1].metrics["global_average"] == pytest.approx(70.0)
        assert result.scores[1].metrics["rank"] == 2

    def test_nothing_collected_is_an_error(self, settings, cache, mocker) -> None:
        mocker.patch("pondus.sources.livebench.collect_scores", return_value={})

        result = LiveBenchSource().fetch(settings, cache)

        assert result.status == SourceStatus.error("Failed to fetch LiveBench data from HuggingFace datasets API")


def _submission(model: str, reward) -> dict:
    return {"config": {"agent": {"model_name": model}}, "verifier_result": {"rewards": {"reward": reward}}}


class TestTerminalBench:
    """Best reward per model across submissions."""

    def test_result_files(self) -> None:
        metadata = {
            "siblings": [
                {"rfilename": "submissions/a/result.json"},
                {"rfilename": "submissions/a/config.json"},
                {"rfilename": "README.md"},
                {"no": "name"},
            ],
        }

        assert result_files(metadata) == ["submissions/a/result.json"]
        assert result_files({}) == []

    def test_aggregate_keeps_best_reward_and_counts_submissions(self) -> None:
        scores = aggregate_results(
            [
                _submission("GPT 5", 0.4),
                _submission("gpt_5", 0.6),
                _submission("Claude Opus", None),
                _submission("GPT 5", 0.5),
                {"config": {}},
            ],
        )

        assert [(s.model, s.metrics["score"], s.metrics["submissions"], s.rank) for s in scores] == [
            ("gpt-5", 0.6, 3, 1),
            ("claude-opus", 0.0, 1, 2),
        ]
        assert scores[0].source_model_name == "GPT 5"

    def test_cached_rows_round_trip(self) -> None:
        rows = [score.model_dump(mode="json") for score in aggregate_results([_submission("m", 0.7)])]

        result = TerminalBenchSource().build_result(rows + [{"bogus": True}], FETCHED_AT, SourceStatus.cached())

        assert [s.model for s in result.scores] == ["m"]
        assert result.status == SourceStatus.cached()
