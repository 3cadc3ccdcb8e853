"""End-to-end leaderboard pipeline: fetch, score, rank, lay out slots."""

from __future__ import annotations

import logging

from pixel_leaderboard.config import LeaderboardConfig, load_config
from pixel_leaderboard.formatter import build_slots
from pixel_leaderboard.github_client import GitHubClient
from pixel_leaderboard.models import FetchResult, Leaderboard
from pixel_leaderboard.ranker import rank_contributors
from pixel_leaderboard.scorer import calculate_scores

logger = logging.getLogger(__name__)


def assemble_leaderboard(fetch: FetchResult, config: LeaderboardConfig) -> Leaderboard:
    """Score, rank and lay out an already fetched set of pull requests."""
    scores = calculate_scores(fetch.pulls, config)
    top = rank_contributors(scores, config)
    return Leaderboard(
        repo=config.repo.full_name,
        fetch=fetch,
        scores=scores,
        top=top,
        slots=build_slots(top, config),
    )


async def build_leaderboard(
    config: LeaderboardConfig | None = None,
    client: GitHubClient | None = None,
) -> Leaderboard:
    """Fetch pull requests and build the leaderboard.

    Parameters
    ----------
    config:
        Optional configuration; loaded from file and environment when *None*.
    client:
        Optional open :class:`~pixel_leaderboard.github_client.GitHubClient`.
        When *None*, a client is created and closed here.
    """
    if config is None:
        config = load_config()

    if client is None:
        async with GitHubClient(config) as own_client:
            fetch = await own_client.fetch_pull_requests()
    else:
        fetch = await client.fetch_pull_requests()

    board = assemble_leaderboard(fetch, config)
    logger.info(
        "Scored %d contributors from %d pull requests (%d page(s)%s)",
        len(board.scores),
        len(fetch.pulls),
        fetch.pages_fetched,
        "" if fetch.complete else ", partial",
    )
    return board


async def run_leaderboard(config: LeaderboardConfig | None = None) -> Leaderboard | None:
    """Build the leaderboard, logging and swallowing any failure.

    Returns *None* when the run failed, in which case the display should be
    left as it is.
    """
    try:
        return await build_leaderboard(config)
    except Exception:
        logger.exception("Leaderboard sync failed")
        return None
