"""Data models for the Pixel Leaderboard pipeline."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, computed_field


class Label(BaseModel):
    """A label attached to a pull request."""
    model_config = ConfigDict(frozen=True)

    name: str


class PullRequest(BaseModel):
    """A pull request as returned by the REST pulls endpoint."""
    model_config = ConfigDict(frozen=True)

    author_login: str
    merged_at: datetime | None = None
    labels: list[Label] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_merged(self) -> bool:
        return self.merged_at is not None


class FetchResult(BaseModel):
    """Best-effort outcome of paginating the pulls endpoint.

    ``complete`` is False when pagination stopped on a failed page rather
    than on an empty page or the page cap.
    """
    pulls: list[PullRequest] = []
    pages_fetched: int = 0
    complete: bool = True
    error: str | None = None


class RankedEntry(BaseModel):
    """A contributor with their experience total."""
    model_config = ConfigDict(frozen=True)

    login: str
    xp: int


class Tier(BaseModel):
    """A reward league reached at ``threshold`` XP."""
    model_config = ConfigDict(frozen=True)

    threshold: int
    name: str
    perk: str
    color: str


class SlotView(BaseModel):
    """Declarative description of one leaderboard row."""
    model_config = ConfigDict(frozen=True)

    rank: int
    selector: str
    login: str | None = None
    xp: int = 0
    tier: Tier | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_placeholder(self) -> bool:
        return self.login is None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def display_name(self) -> str:
        return "---" if self.login is None else f"@{self.login}"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def xp_text(self) -> str:
        if self.login is None:
            return "0 XP"
        return f"{self.xp:,} XP"


class Leaderboard(BaseModel):
    """Complete result of one leaderboard run."""
    repo: str
    fetch: FetchResult
    scores: dict[str, int] = {}
    top: list[RankedEntry] = []
    slots: list[SlotView] = []
