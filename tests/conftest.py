"""Shared test fixtures for Pixel Leaderboard tests."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import pytest

from pixel_leaderboard.config import LeaderboardConfig
from pixel_leaderboard.models import Label, PullRequest

SAMPLE_PAGE = """<!DOCTYPE html>
<html>
<head><title>Pixel Phantoms</title></head>
<body>
  <section class="leaderboard">
    <div class="lb-row gold" style="border-left: 4px solid #333;">
      <div class="lb-rank">#1</div><div class="lb-user">Loading...</div>
    </div>
    <div class="lb-row silver">
      <div class="lb-rank">#2</div><div class="lb-user">Loading...</div>
    </div>
    <div class="lb-row bronze">
      <div class="lb-rank">#3</div><div class="lb-user">Loading...</div>
    </div>
  </section>
</body>
</html>
"""


def make_raw_pr(
    login: str,
    merged_at: str | None = "2024-06-15T10:00:00Z",
    labels: list[str] | None = None,
) -> dict[str, Any]:
    """Build a raw pulls-endpoint record."""
    return {
        "number": 1,
        "state": "closed",
        "user": {"login": login, "type": "User"},
        "merged_at": merged_at,
        "labels": [{"id": i, "name": name} for i, name in enumerate(labels or [])],
    }


def make_pr(
    login: str,
    merged: bool = True,
    labels: list[str] | None = None,
) -> PullRequest:
    return PullRequest(
        author_login=login,
        merged_at=datetime(2024, 6, 15, tzinfo=UTC) if merged else None,
        labels=[Label(name=name) for name in labels or []],
    )


@pytest.fixture
def config() -> LeaderboardConfig:
    return LeaderboardConfig()


@pytest.fixture
def sample_page() -> str:
    return SAMPLE_PAGE


@pytest.fixture
def sample_pulls() -> list[PullRequest]:
    return [
        make_pr("alice", labels=["Level 2 Bug"]),
        make_pr("bob", labels=["level 1"]),
        make_pr("alice", labels=["documentation"]),
        make_pr("carol", merged=False, labels=["Level 3"]),
        make_pr("sayeeg-11", labels=["Level 3"]),
    ]
