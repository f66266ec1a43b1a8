"""Scale AI SEAL leaderboards, scraped with agent-browser."""

from __future__ import annotations

import re
from collections import defaultdict

from pondus.shared.constants import SourceNames
from pondus.sources.browser import ScrapedLeaderboardSource

LEADERBOARD_URL = "https://scale.com/leaderboard"
CARD_MARKER = "View Full Ranking"
SCORE_SEPARATOR = "±"
NEW_BADGE = "NEW"
MAX_RANK = 500

_RANK_RE = re.compile(r"^\d+$", re.ASCII)


def _is_rank(token: str) -> bool:
    return bool(_RANK_RE.match(token)) and int(token) <= MAX_RANK


def extract_card_scores(text: str) -> list[tuple[str, float]]:
    """Pull ``(model, score)`` pairs out of one card's flattened text.

    Cards read ``RANK MODEL [NEW] SCORE±ERR`` repeatedly. Each score's name
    runs from the rank that follows the previous score (or the card start)
    up to the score token.
    """
    tokens = text.split()
    score_positions = [i for i, token in enumerate(tokens) if SCORE_SEPARATOR in token]

    results: list[tuple[str, float]] = []
    for index, position in enumerate(score_positions):
        try:
            value = float(tokens[position].split(SCORE_SEPARATOR, 1)[0])
        except ValueError:
            continue

        window_start = score_positions[index - 1] + 1 if index else 0
        rank_position = next((j for j in range(window_start, position) if _is_rank(tokens[j])), None)
        name_start = rank_position + 1 if rank_position is not None else window_start

        name = " ".join(t for t in tokens[name_start:position] if t != NEW_BADGE)
        name = name.rstrip("*").strip()
        if len(name) >= 2 and any(c.isascii() and c.isalpha() for c in name):
            results.append((name, value))

    return results


def parse_seal_snapshot(text: str) -> list[tuple[str, float]]:
    """Average each model's score across every benchmark card on the page."""
    collected: dict[str, list[float]] = defaultdict(list)

    for line in text.splitlines():
        stripped = line.strip()
        if CARD_MARKER not in stripped:
            continue
        quote = stripped.find('"')
        if quote == -1:
            continue
        rest = stripped[quote + 1 :]
        end = rest.rfind(CARD_MARKER)
        if end == -1:
            continue
        for model, value in extract_card_scores(rest[:end]):
            collected[model].append(value)

    return [(model, sum(values) / len(values)) for model, values in collected.items()]


class SealSource(ScrapedLeaderboardSource):
    """Average SEAL score per model across benchmark cards."""

    name = SourceNames.SEAL
    url = LEADERBOARD_URL
    label = "SEAL"
    metric = "overall_score"

    def parse_snapshot(self, text: str) -> list[tuple[str, float]]:
        return parse_seal_snapshot(text)
