"""Pixel Leaderboard - contributor leaderboard from merged pull requests."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from pixel_leaderboard.config import LeaderboardConfig, load_config
from pixel_leaderboard.exceptions import LeaderboardError
from pixel_leaderboard.models import Leaderboard, RankedEntry, SlotView, Tier
from pixel_leaderboard.pipeline import build_leaderboard, run_leaderboard

try:
    __version__ = version("pixel-leaderboard")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "Leaderboard",
    "LeaderboardConfig",
    "LeaderboardError",
    "RankedEntry",
    "SlotView",
    "Tier",
    "__version__",
    "build_leaderboard",
    "load_config",
    "run_leaderboard",
]
