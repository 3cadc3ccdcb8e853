"""Tests for the async GitHub REST client."""

from __future__ import annotations

import httpx
import pytest
import respx

from conftest import make_raw_pr
from pixel_leaderboard.config import FetchConfig, LeaderboardConfig
from pixel_leaderboard.exceptions import GitHubAPIError
from pixel_leaderboard.github_client import GitHubClient, parse_pull_request

PULLS_PATH = "/repos/sayeeg-11/Pixel_Phantoms/pulls"


def _pulls_route() -> respx.Route:
    return respx.route(method="GET", host="api.github.com", path=PULLS_PATH)


def _make_client(config: LeaderboardConfig | None = None) -> GitHubClient:
    return GitHubClient(config or LeaderboardConfig())


# ---------------------------------------------------------------------------
# parse_pull_request
# ---------------------------------------------------------------------------


class TestParsePullRequest:
    def test_parses_merged_record(self) -> None:
        pr = parse_pull_request(make_raw_pr("alice", labels=["Level 2 Bug", "ui"]))
        assert pr.author_login == "alice"
        assert pr.is_merged is True
        assert [label.name for label in pr.labels] == ["Level 2 Bug", "ui"]

    def test_parses_unmerged_record(self) -> None:
        pr = parse_pull_request(make_raw_pr("bob", merged_at=None))
        assert pr.merged_at is None
        assert pr.is_merged is False

    def test_missing_labels_is_empty(self) -> None:
        raw = make_raw_pr("alice")
        del raw["labels"]
        assert parse_pull_request(raw).labels == []

    def test_unmerged_record_without_user(self) -> None:
        raw = make_raw_pr("ghost", merged_at=None, labels=["level 3"])
        raw["user"] = None
        pr = parse_pull_request(raw)
        assert pr.author_login == ""
        assert pr.is_merged is False
        assert [label.name for label in pr.labels] == ["level 3"]

    def test_unmerged_record_with_broken_labels(self) -> None:
        raw = make_raw_pr("bob", merged_at=None)
        raw["labels"] = [None]
        assert parse_pull_request(raw).labels == []

    @pytest.mark.parametrize("raw", ["oops", None, 42, ["nested"]])
    def test_non_object_record_raises(self, raw: object) -> None:
        with pytest.raises(GitHubAPIError):
            parse_pull_request(raw)

    def test_missing_user_raises(self) -> None:
        raw = make_raw_pr("alice")
        raw["user"] = None
        with pytest.raises(GitHubAPIError):
            parse_pull_request(raw)

    def test_malformed_label_raises(self) -> None:
        raw = make_raw_pr("alice")
        raw["labels"] = ["not-a-mapping"]
        with pytest.raises(GitHubAPIError):
            parse_pull_request(raw)


# ---------------------------------------------------------------------------
# fetch_page
# ---------------------------------------------------------------------------


class TestFetchPage:
    async def test_uses_transport_default_timeout(self) -> None:
        async with _make_client() as client, httpx.AsyncClient() as default:
            assert client._client.timeout == default.timeout

    @respx.mock
    async def test_sends_query_parameters(self) -> None:
        route = _pulls_route().mock(
            return_value=httpx.Response(200, json=[make_raw_pr("alice")])
        )

        async with _make_client() as client:
            records = await client.fetch_page(2)

        assert len(records) == 1
        params = route.calls[0].request.url.params
        assert params["state"] == "all"
        assert params["per_page"] == "100"
        assert params["page"] == "2"

    @respx.mock
    async def test_non_success_status_raises(self) -> None:
        _pulls_route().mock(return_value=httpx.Response(404, json={"message": "Not Found"}))

        async with _make_client() as client:
            with pytest.raises(GitHubAPIError) as exc_info:
                await client.fetch_page(1)

        assert exc_info.value.status_code == 404

    @respx.mock
    async def test_non_list_body_raises(self) -> None:
        _pulls_route().mock(return_value=httpx.Response(200, json={"message": "oops"}))

        async with _make_client() as client:
            with pytest.raises(GitHubAPIError):
                await client.fetch_page(1)

    @respx.mock
    async def test_invalid_json_raises(self) -> None:
        _pulls_route().mock(return_value=httpx.Response(200, text="<html>"))

        async with _make_client() as client:
            with pytest.raises(GitHubAPIError):
                await client.fetch_page(1)

    @respx.mock
    async def test_transport_error_raises(self) -> None:
        _pulls_route().mock(side_effect=httpx.ConnectError("connection refused"))

        async with _make_client() as client:
            with pytest.raises(GitHubAPIError):
                await client.fetch_page(1)


# ---------------------------------------------------------------------------
# fetch_pull_requests
# ---------------------------------------------------------------------------


class TestFetchPullRequests:
    @respx.mock
    async def test_stops_at_page_cap(self) -> None:
        route = _pulls_route()
        route.side_effect = [
            httpx.Response(200, json=[make_raw_pr("alice")]),
            httpx.Response(200, json=[make_raw_pr("bob")]),
            httpx.Response(200, json=[make_raw_pr("carol")]),
            httpx.Response(200, json=[make_raw_pr("dave")]),
        ]

        async with _make_client() as client:
            result = await client.fetch_pull_requests()

        assert route.call_count == 3
        assert result.pages_fetched == 3
        assert result.complete is True
        assert [pr.author_login for pr in result.pulls] == ["alice", "bob", "carol"]
        assert [call.request.url.params["page"] for call in route.calls] == ["1", "2", "3"]

    @respx.mock
    async def test_stops_on_empty_page(self) -> None:
        route = _pulls_route()
        route.side_effect = [
            httpx.Response(200, json=[make_raw_pr("alice"), make_raw_pr("bob")]),
            httpx.Response(200, json=[]),
        ]

        async with _make_client() as client:
            result = await client.fetch_pull_requests()

        assert route.call_count == 2
        assert result.pages_fetched == 1
        assert result.complete is True
        assert len(result.pulls) == 2

    @respx.mock
    async def test_failed_page_returns_partial_results(self) -> None:
        route = _pulls_route()
        route.side_effect = [
            httpx.Response(200, json=[make_raw_pr("alice")]),
            httpx.Response(500, json={"message": "Server Error"}),
        ]

        async with _make_client() as client:
            result = await client.fetch_pull_requests()

        assert route.call_count == 2
        assert result.complete is False
        assert result.pages_fetched == 1
        assert [pr.author_login for pr in result.pulls] == ["alice"]
        assert result.error is not None and "500" in result.error

    @respx.mock
    async def test_transport_failure_on_first_page(self) -> None:
        _pulls_route().mock(side_effect=httpx.ReadTimeout("Read timed out"))

        async with _make_client() as client:
            result = await client.fetch_pull_requests()

        assert result.pulls == []
        assert result.pages_fetched == 0
        assert result.complete is False

    @respx.mock
    async def test_malformed_record_discards_page(self) -> None:
        broken = make_raw_pr("bob")
        broken["user"] = {}
        route = _pulls_route()
        route.side_effect = [
            httpx.Response(200, json=[make_raw_pr("alice")]),
            httpx.Response(200, json=[make_raw_pr("carol"), broken]),
        ]

        async with _make_client() as client:
            result = await client.fetch_pull_requests()

        assert result.complete is False
        assert [pr.author_login for pr in result.pulls] == ["alice"]

    @respx.mock
    async def test_non_object_element_discards_page(self) -> None:
        route = _pulls_route()
        route.side_effect = [
            httpx.Response(200, json=[make_raw_pr("alice")]),
            httpx.Response(200, json=["oops"]),
        ]

        async with _make_client() as client:
            result = await client.fetch_pull_requests()

        assert route.call_count == 2
        assert result.complete is False
        assert result.pages_fetched == 1
        assert [pr.author_login for pr in result.pulls] == ["alice"]

    @respx.mock
    async def test_null_element_discards_page(self) -> None:
        _pulls_route().mock(return_value=httpx.Response(200, json=[None]))

        async with _make_client() as client:
            result = await client.fetch_pull_requests()

        assert result.complete is False
        assert result.pulls == []

    @respx.mock
    async def test_unmerged_record_without_user_keeps_pagination(self) -> None:
        ghost = {"user": None, "merged_at": None, "labels": []}
        route = _pulls_route()
        route.side_effect = [
            httpx.Response(200, json=[make_raw_pr("alice", labels=["level 3"]), ghost]),
            httpx.Response(200, json=[make_raw_pr("bob")]),
            httpx.Response(200, json=[]),
        ]

        async with _make_client() as client:
            result = await client.fetch_pull_requests()

        assert route.call_count == 3
        assert result.complete is True
        assert result.pages_fetched == 2
        merged = {pr.author_login for pr in result.pulls if pr.is_merged}
        assert merged == {"alice", "bob"}

    @respx.mock
    async def test_respects_configured_page_cap(self) -> None:
        config = LeaderboardConfig(fetch=FetchConfig(max_pages=1))
        route = _pulls_route().mock(
            return_value=httpx.Response(200, json=[make_raw_pr("alice")])
        )

        async with _make_client(config) as client:
            result = await client.fetch_pull_requests()

        assert route.call_count == 1
        assert result.pages_fetched == 1
