"""Async GitHub REST client for fetching a repository's pull requests."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from pixel_leaderboard.config import LeaderboardConfig
from pixel_leaderboard.exceptions import GitHubAPIError
from pixel_leaderboard.models import FetchResult, Label, PullRequest

logger = logging.getLogger(__name__)


def _parse_labels(raw: dict[str, Any]) -> list[Label]:
    return [Label(name=label["name"]) for label in raw.get("labels") or []]


def parse_pull_request(raw: Any) -> PullRequest:
    """Build a :class:`PullRequest` from a raw REST record.

    Unmerged records never score, so a missing author or broken labels on
    them are tolerated.

    Raises:
        GitHubAPIError: If the record is not an object, or a merged record
            lacks an author login or has unparseable fields.
    """
    if not isinstance(raw, dict):
        raise GitHubAPIError("Pull request record is not an object")

    user = raw.get("user")
    login = user.get("login") if isinstance(user, dict) else None

    if not raw.get("merged_at"):
        try:
            labels = _parse_labels(raw)
        except (KeyError, TypeError, ValidationError):
            labels = []
        return PullRequest(author_login=str(login or ""), labels=labels)

    if not login:
        raise GitHubAPIError("Pull request record has no user.login")

    try:
        return PullRequest(
            author_login=str(login),
            merged_at=raw["merged_at"],
            labels=_parse_labels(raw),
        )
    except (KeyError, TypeError, ValidationError) as exc:
        raise GitHubAPIError(f"Malformed pull request record: {exc}") from exc


class GitHubClient:
    """Unauthenticated async client for the pulls endpoint of one repository."""

    def __init__(self, config: LeaderboardConfig | None = None) -> None:
        self._config = config if config is not None else LeaderboardConfig()
        self._client = httpx.AsyncClient(
            base_url=self._config.repo.api_base_url,
            headers={"Accept": "application/vnd.github.v3+json"},
        )

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self._client.aclose()

    async def fetch_page(self, page: int) -> list[dict[str, Any]]:
        """Fetch one page of pull requests in every state.

        Raises:
            GitHubAPIError: On transport failure, a non-success status, or a
                body that is not a JSON list.
        """
        params = {
            "state": "all",
            "per_page": self._config.fetch.per_page,
            "page": page,
        }
        try:
            response = await self._client.get(self._config.repo.pulls_path, params=params)
        except httpx.HTTPError as exc:
            raise GitHubAPIError(f"Request for page {page} failed: {exc}") from exc

        if not response.is_success:
            raise GitHubAPIError(
                message=f"GitHub API returned {response.status_code} for page {page}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise GitHubAPIError(f"Page {page} body is not valid JSON") from exc

        if not isinstance(data, list):
            raise GitHubAPIError(f"Page {page} body is not a list of pull requests")
        return data

    async def fetch_pull_requests(self) -> FetchResult:
        """Best-effort pagination over the pulls endpoint.

        Fetches pages sequentially up to ``fetch.max_pages``, stopping at the
        first empty page.  A failed or malformed page ends pagination and the
        pages already retrieved are returned with ``complete=False``.  Never
        raises.
        """
        pulls: list[PullRequest] = []
        pages_fetched = 0

        for page in range(1, self._config.fetch.max_pages + 1):
            try:
                records = await self.fetch_page(page)
                if not records:
                    logger.debug("Page %d is empty, stopping", page)
                    break
                parsed = [parse_pull_request(record) for record in records]
            except GitHubAPIError as exc:
                logger.warning(
                    "Stopping pagination for %s at page %d: %s",
                    self._config.repo.full_name, page, exc,
                )
                return FetchResult(
                    pulls=pulls,
                    pages_fetched=pages_fetched,
                    complete=False,
                    error=str(exc),
                )
            pulls.extend(parsed)
            pages_fetched += 1

        return FetchResult(pulls=pulls, pages_fetched=pages_fetched)
