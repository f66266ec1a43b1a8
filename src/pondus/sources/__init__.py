"""Benchmark source adapters.

``all_sources`` returns the fixed, ordered set of sources the aggregation
pipeline drives. Result order in every query follows this order.
"""

from __future__ import annotations

from pondus.config import Settings

from .aider import AiderSource
from .arena import ArenaSource
from .artificial_analysis import ArtificialAnalysisSource
from .base import BenchmarkSource
from .livebench import LiveBenchSource
from .mock import MockSource
from .seal import SealSource
from .swe_rebench import SweRebenchSource
from .swebench import SweBenchSource
from .terminal_bench import TerminalBenchSource


def all_sources(settings: Settings) -> list[BenchmarkSource]:
    """Return the registered sources, with the mock appended when enabled."""
    sources: list[BenchmarkSource] = [
        ArtificialAnalysisSource(),
        ArenaSource(),
        SweBenchSource(),
        SweRebenchSource(),
        AiderSource(),
        LiveBenchSource(),
        TerminalBenchSource(),
        SealSource(),
    ]
    if settings.fetch.include_mock:
        sources.append(MockSource())
    return sources


__all__ = [
    "AiderSource",
    "ArenaSource",
    "ArtificialAnalysisSource",
    "BenchmarkSource",
    "LiveBenchSource",
    "MockSource",
    "SealSource",
    "SweBenchSource",
    "SweRebenchSource",
    "TerminalBenchSource",
    "all_sources",
]
