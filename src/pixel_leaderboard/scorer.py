"""Label-weighted scoring of merged pull requests."""

from __future__ import annotations

from collections.abc import Iterable

from pixel_leaderboard.config import LeaderboardConfig, PointsConfig
from pixel_leaderboard.models import PullRequest


def pr_points(pr: PullRequest, points: PointsConfig) -> int:
    """Points earned by a single pull request.

    Each label contributes the value of the first level keyword found in its
    lowercased name; matches across labels add up.  A pull request with no
    level label earns ``points.default``.
    """
    rules = points.label_rules()
    total = 0
    matched = False

    for label in pr.labels:
        name = label.name.lower()
        for keyword, value in rules:
            if keyword in name:
                total += value
                matched = True
                break

    if not matched:
        total += points.default
    return total


def calculate_scores(
    pulls: Iterable[PullRequest], config: LeaderboardConfig
) -> dict[str, int]:
    """Reduce pull requests to a login -> points mapping.

    Unmerged pull requests and those authored by the excluded owner account
    (compared case-insensitively) are ignored.
    """
    owner = config.owner_login.lower()
    scores: dict[str, int] = {}

    for pr in pulls:
        if not pr.is_merged:
            continue
        login = pr.author_login
        if login.lower() == owner:
            continue
        scores.setdefault(login, 0)
        scores[login] += pr_points(pr, config.points)

    return scores
