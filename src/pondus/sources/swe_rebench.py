"""SWE-rebench leaderboard, scraped with agent-browser."""

from __future__ import annotations

from pondus.shared.constants import SourceNames
from pondus.sources.browser import ScrapedLeaderboardSource

LEADERBOARD_URL = "https://swe-rebench.com/"
ROW_PREFIX = '- row "'
CELL_PREFIX = '- cell "'
HEADER_MODEL_CELL = "Model"


def cell_value(line: str) -> str | None:
    """Return the quoted value of ``- cell "value" [ref=...]``."""
    start = line.find('"')
    if start == -1:
        return None
    end = line.find('"', start + 1)
    if end == -1:
        return None
    return line[start + 1 : end]


def parse_rebench_snapshot(text: str) -> list[tuple[str, float]]:
    """Read model and resolved rate from the leaderboard table rows.

    Columns are rank, model, resolved rate (%), SEM, pass@5, cost, tokens
    and cached %. A model listed twice keeps its first rate.
    """
    lines = text.splitlines()
    results: dict[str, float] = {}
    i = 0

    while i < len(lines):
        stripped = lines[i].strip()
        if not (stripped.startswith(ROW_PREFIX) and "%" in stripped):
            i += 1
            continue

        cells: list[str] = []
        j = i + 1
        while j < len(lines):
            cell_line = lines[j].strip()
            if cell_line.startswith(CELL_PREFIX):
                value = cell_value(cell_line)
                if value is not None:
                    cells.append(value)
            elif cell_line.startswith("- row "):
                break
            j += 1

        if len(cells) >= 3:
            model = cells[1]
            try:
                rate = float(cells[2].rstrip("%"))
            except ValueError:
                rate = None
            if (
                rate is not None
                and model
                and model != HEADER_MODEL_CELL
                and any(c.isascii() and c.isalpha() for c in model)
            ):
                results.setdefault(model, rate)

        i = j

    return list(results.items())


class SweRebenchSource(ScrapedLeaderboardSource):
    """Resolved rate per model on SWE-rebench."""

    name = SourceNames.SWE_REBENCH
    url = LEADERBOARD_URL
    label = "SWE-rebench"
    metric = "resolve_rate"

    def parse_snapshot(self, text: str) -> list[tuple[str, float]]:
        return parse_rebench_snapshot(text)
