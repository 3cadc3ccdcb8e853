"""Experience conversion, ranking, and league tier lookup."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from pixel_leaderboard.config import LeaderboardConfig
from pixel_leaderboard.models import RankedEntry, Tier


def to_experience(points: int, multiplier: int) -> int:
    return points * multiplier


def rank_contributors(
    scores: Mapping[str, int], config: LeaderboardConfig
) -> list[RankedEntry]:
    """Return the top ``config.top_n`` contributors by XP, highest first.

    Equal XP keeps mapping order, which is not guaranteed to be meaningful.
    """
    entries = [
        RankedEntry(login=login, xp=to_experience(points, config.xp_multiplier))
        for login, points in scores.items()
    ]
    entries.sort(key=lambda e: e.xp, reverse=True)
    return entries[: config.top_n]


def get_tier(xp: int, tiers: Sequence[Tier]) -> Tier:
    """Highest tier whose threshold is at or below *xp*.

    *tiers* must be ordered by descending threshold; the last tier is the
    fallback.
    """
    for tier in tiers:
        if xp >= tier.threshold:
            return tier
    return tiers[-1]
