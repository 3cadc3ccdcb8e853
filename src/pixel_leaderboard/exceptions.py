"""Custom exception hierarchy for Pixel Leaderboard."""

from __future__ import annotations


class LeaderboardError(Exception):
    """Base exception for Pixel Leaderboard."""


class GitHubAPIError(LeaderboardError):
    """Error from the GitHub API or a malformed response body."""

    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code


class ConfigError(LeaderboardError):
    """Error with configuration."""


class RenderError(LeaderboardError):
    """The display surface could not be read or written."""
