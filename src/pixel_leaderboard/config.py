"""Configuration models for Pixel Leaderboard."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pixel_leaderboard.exceptions import ConfigError
from pixel_leaderboard.models import Tier


class RepoConfig(BaseModel):
    """Repository whose pull requests feed the leaderboard."""
    model_config = ConfigDict(frozen=True)

    owner: str = "sayeeg-11"
    name: str = "Pixel_Phantoms"
    api_base_url: str = "https://api.github.com"

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def pulls_path(self) -> str:
        return f"/repos/{self.owner}/{self.name}/pulls"


class PointsConfig(BaseModel):
    """Points awarded per merged pull request, keyed by label level."""
    model_config = ConfigDict(frozen=True)

    level_3: int = 11
    level_2: int = 5
    level_1: int = 2
    default: int = 1

    def label_rules(self) -> list[tuple[str, int]]:
        """Label keywords and their points, highest priority first."""
        return [
            ("level 3", self.level_3),
            ("level 2", self.level_2),
            ("level 1", self.level_1),
        ]


class FetchConfig(BaseModel):
    """GitHub REST fetch parameters."""
    model_config = ConfigDict(frozen=True)

    max_pages: int = Field(default=3, ge=1)
    per_page: int = Field(default=100, ge=1, le=100)


def _default_tiers() -> list[Tier]:
    return [
        Tier(threshold=15000, name="Gold", perk="\U0001f3c6 Access to Core Team",
             color="#FFD700"),
        Tier(threshold=7500, name="Silver", perk="\U0001f455 Exclusive Merch",
             color="#C0C0C0"),
        Tier(threshold=3000, name="Bronze", perk="\U0001f47e Discord VIP Badge",
             color="#CD7F32"),
        Tier(threshold=0, name="Rookie", perk="\U0001f331 Contributor Role",
             color="#00aaff"),
    ]


class TierConfig(BaseModel):
    """League tiers, ordered by descending XP threshold."""
    model_config = ConfigDict(frozen=True)

    tiers: list[Tier] = Field(default_factory=_default_tiers)

    @field_validator("tiers")
    @classmethod
    def _check_order(cls, tiers: list[Tier]) -> list[Tier]:
        if not tiers:
            raise ValueError("at least one tier is required")
        thresholds = [t.threshold for t in tiers]
        if thresholds != sorted(thresholds, reverse=True):
            raise ValueError("tiers must be ordered by descending threshold")
        if thresholds[-1] != 0:
            raise ValueError("the last tier must have a threshold of 0")
        return tiers


class LeaderboardConfig(BaseModel):
    """Top-level configuration composing all sub-configs."""
    model_config = ConfigDict(frozen=True)

    repo: RepoConfig = Field(default_factory=RepoConfig)
    points: PointsConfig = Field(default_factory=PointsConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    tiers: TierConfig = Field(default_factory=TierConfig)
    xp_multiplier: int = 100
    top_n: int = 3
    # Defaults to the repository owner.
    excluded_login: str | None = None
    slot_selectors: list[str] = Field(default_factory=lambda: [
        ".lb-row.gold",
        ".lb-row.silver",
        ".lb-row.bronze",
    ])

    @property
    def owner_login(self) -> str:
        """Account whose pull requests never score."""
        return self.excluded_login or self.repo.owner


_DEFAULT_PATHS = [".pixel-leaderboard.yml", ".pixel-leaderboard.yaml"]

_ENV_MAPPING: dict[str, tuple[str | None, str, type]] = {
    "PIXEL_LEADERBOARD_REPO_OWNER": ("repo", "owner", str),
    "PIXEL_LEADERBOARD_REPO_NAME": ("repo", "name", str),
    "PIXEL_LEADERBOARD_API_BASE_URL": ("repo", "api_base_url", str),
    "PIXEL_LEADERBOARD_MAX_PAGES": ("fetch", "max_pages", int),
    "PIXEL_LEADERBOARD_XP_MULTIPLIER": (None, "xp_multiplier", int),
}


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def load_config(path: str | Path | None = None) -> LeaderboardConfig:
    """Load configuration from YAML file, environment variables, and defaults.

    Priority (highest to lowest):
    1. Environment variables (PIXEL_LEADERBOARD_*)
    2. YAML config file
    3. Defaults
    """
    config_data: dict[str, Any] = {}

    if path is not None:
        config_path = Path(path)
        if config_path.exists():
            config_data = _read_yaml(config_path)
    else:
        for default_path in _DEFAULT_PATHS:
            p = Path(default_path)
            if p.exists():
                config_data = _read_yaml(p)
                break

    for env_var, (section, key, type_fn) in _ENV_MAPPING.items():
        value = os.environ.get(env_var)
        if value is None:
            continue
        try:
            converted = type_fn(value)
        except ValueError as exc:
            raise ConfigError(f"Invalid value for {env_var}: {value!r}") from exc
        if section is None:
            config_data[key] = converted
        else:
            config_data.setdefault(section, {})[key] = converted

    try:
        return LeaderboardConfig(**config_data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
