"""agent-browser subprocess runner for scraped leaderboards.

Scraped sources drive an external ``agent-browser`` executable:
``open <url>``, ``wait 2000`` and ``snapshot``, which prints the page's
accessibility tree.
"""

from __future__ import annotations

import logging
import subprocess
import threading
import time
from abc import abstractmethod
from datetime import datetime
from typing import Any, ClassVar

from pondus.config import Settings
from pondus.core.models import SourceResult, SourceStatus
from pondus.shared.constants import AgentBrowser
from pondus.shared.errors import (
    BrowserCommandError,
    ErrorCode,
    ErrorContext,
    SourceParseError,
    SourceUnavailableError,
)
from pondus.shared.logging import log_operation_success
from pondus.sources.base import (
    BenchmarkSource,
    make_score,
    normalize_name,
    rank_scores,
    score_rows,
)

logger = logging.getLogger(__name__)

# agent-browser keeps one page open per session and ``snapshot`` reads
# whatever page is current, so open/wait/snapshot must not interleave.
_SESSION_LOCK = threading.Lock()


class BrowserRunner:
    """Runs agent-browser steps on behalf of one source.

    Args:
        executable: agent-browser path or command name.
        label: Human-readable source name used in error messages.
        timeout: Per-invocation timeout in seconds; None waits indefinitely.
    """

    def __init__(self, executable: str, label: str, timeout: float | None = None) -> None:
        self.executable = executable
        self.label = label
        self.timeout = timeout

    def run(self, step: str, *args: str) -> str:
        """Run ``<executable> <step> <args...>`` and return its stdout.

        Raises:
            SourceUnavailableError: If the executable does not exist.
            BrowserCommandError: If the command fails or times out.
        """
        command = [self.executable, step, *args]
        context = ErrorContext(
            operation="agent_browser",
            additional_data={"source": self.label, "step": step},
        )
        start = time.perf_counter()

        try:
            completed = subprocess.run(  # noqa: S603
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise SourceUnavailableError(
                ErrorCode.EXTERNAL_TOOL_MISSING,
                f"{self.executable} not found",
                context,
                e,
            ) from e
        except subprocess.TimeoutExpired as e:
            raise BrowserCommandError(
                ErrorCode.EXTERNAL_TOOL_FAILED,
                f"{self.label} scrape failed at {step}: "
                f"agent-browser {' '.join(command[1:])} timed out after {self.timeout}s",
                context,
                e,
            ) from e
        except OSError as e:
            raise BrowserCommandError(
                ErrorCode.EXTERNAL_TOOL_FAILED,
                f"{self.label} scrape failed at {step}: failed to execute {self.executable}: {e}",
                context,
                e,
            ) from e

        if completed.returncode != 0:
            details = (
                completed.stderr.strip()
                or completed.stdout.strip()
                or f"exit status {completed.returncode}"
            )
            raise BrowserCommandError(
                ErrorCode.EXTERNAL_TOOL_FAILED,
                f"{self.label} scrape failed at {step}: agent-browser {' '.join(command[1:])} failed: {details}",
                context,
            )

        log_operation_success(
            logger,
            f"agent_browser_{step}",
            (time.perf_counter() - start) * 1000,
            result_info={"stdout_chars": len(completed.stdout)},
            context=context,
        )
        return completed.stdout

    def snapshot(self, url: str) -> str:
        """Open ``url``, let it settle and return the accessibility snapshot.

        Holds the browser session for the whole sequence, so scraped
        sources fetched on different threads never read each other's page.
        """
        with _SESSION_LOCK:
            self.run(AgentBrowser.STEP_OPEN, url)
            try:
                self.run(AgentBrowser.STEP_WAIT, AgentBrowser.PAGE_SETTLE_MS)
            except BrowserCommandError as e:
                logger.debug("Ignoring failed wait for %s: %s", self.label, e)
            return self.run(AgentBrowser.STEP_SNAPSHOT)


class ScrapedLeaderboardSource(BenchmarkSource):
    """A leaderboard read from an agent-browser page snapshot.

    The cached payload is ``{"scores": [{"source_model_name", "score"}]}``
    sorted best-first; subclasses supply the page URL, the metric name and
    the snapshot parser.
    """

    url: ClassVar[str]
    label: ClassVar[str]
    metric: ClassVar[str]

    @abstractmethod
    def parse_snapshot(self, text: str) -> list[tuple[str, float]]:
        """Extract ``(model name, score)`` pairs from a snapshot."""

    def download(self, settings: Settings) -> dict[str, Any]:
        runner = BrowserRunner(
            settings.agent_browser_path(),
            self.label,
            timeout=settings.browser.timeout_seconds,
        )
        parsed = self.parse_snapshot(runner.snapshot(self.url))
        if not parsed:
            raise SourceParseError(
                ErrorCode.PARSING_ERROR,
                f"Failed to parse any model scores from {self.label} page output",
                ErrorContext(operation=f"fetch_{self.name}"),
            )

        parsed.sort(key=lambda row: row[1], reverse=True)
        return {
            "scores": [{"source_model_name": name, "score": value} for name, value in parsed],
        }

    def build_result(self, data: Any, fetched_at: datetime | None, status: SourceStatus) -> SourceResult:
        scores = [
            make_score(normalize_name(name), name, **{self.metric: value})
            for name, value in score_rows(data, "score")
        ]
        return self.result(rank_scores(scores, self.metric, record_rank=True), fetched_at, status)
