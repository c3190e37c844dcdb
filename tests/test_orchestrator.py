"""Tests for the orchestrator module."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from org_leaderboard.config import LeaderboardConfig
from org_leaderboard.github.client import GitHubClient
from org_leaderboard.github.errors import AuthError
from org_leaderboard.models import ActivityMetrics, RepositoryRef
from org_leaderboard.orchestrator import run

NOW = datetime(2024, 7, 1, 12, 0, tzinfo=timezone.utc)
RECENT_WEEK = int(datetime(2024, 6, 2, tzinfo=timezone.utc).timestamp())


def _entry(login: str, commits: int) -> dict:
    return {"author": {"login": login}, "weeks": [{"w": RECENT_WEEK, "c": commits}]}


STATS = {
    "repo-a": [_entry("alice", 5), _entry("bob", 2)],
    "repo-b": [_entry("alice", 3), _entry("carol", 1)],
}


def _mock_client() -> AsyncMock:
    client = AsyncMock(spec=GitHubClient)
    client.list_org_repos.return_value = [
        RepositoryRef(name="repo-a", full_name="org/repo-a"),
        RepositoryRef(name="repo-b", full_name="org/repo-b"),
    ]

    async def stats_side_effect(owner, repo):
        return STATS[repo]

    async def graphql_side_effect(request):
        count = 2 if "author:alice" in request.query else 0
        return {
            "issues": {"issueCount": 1},
            "prsOpened": {"issueCount": count},
            "prsMerged": {"issueCount": count},
        }

    client.get_contributor_stats.side_effect = stats_side_effect
    client.graphql.side_effect = graphql_side_effect
    return client


def _config(tmp_path, **kwargs) -> LeaderboardConfig:
    defaults = dict(
        org="org",
        token="fake",
        overall_top_n=3,
        enrich_top_repos=1,
        output=str(tmp_path / "leaderboard.svg"),
        org_delay=0,
        repo_delay=0,
    )
    defaults.update(kwargs)
    return LeaderboardConfig(**defaults)


def _patch_client(mock_client_cls, client):
    mock_client_cls.return_value.__aenter__ = AsyncMock(return_value=client)
    mock_client_cls.return_value.__aexit__ = AsyncMock(return_value=False)


@pytest.mark.asyncio
@patch("org_leaderboard.orchestrator.GitHubClient")
async def test_run_end_to_end(mock_client_cls, tmp_path):
    client = _mock_client()
    _patch_client(mock_client_cls, client)

    report = await run(_config(tmp_path), now=NOW, show_summary=False)

    assert [(e.login, e.commits) for e in report.overall] == [("alice", 8), ("bob", 2), ("carol", 1)]
    assert report.overall[0].metrics == ActivityMetrics(issues_opened=1, prs_opened=2, prs_merged=2)
    assert [r.name for r in report.repos] == ["repo-a", "repo-b"]
    assert report.repos[0].enriched is True
    assert report.repos[1].enriched is False
    assert report.repos[1].entries[0].metrics is None
    assert report.total_commits == 11

    svg = (tmp_path / "leaderboard.svg").read_text(encoding="utf-8")
    assert "org leaderboard last 6 months" in svg
    assert "org/repo-a  commits 7" in svg
    assert "org/repo-b  commits 4" in svg


@pytest.mark.asyncio
@patch("org_leaderboard.orchestrator.GitHubClient")
async def test_run_enrichment_scopes(mock_client_cls, tmp_path):
    client = _mock_client()
    _patch_client(mock_client_cls, client)

    await run(_config(tmp_path), now=NOW, show_summary=False)

    queries = [c.args[0].query for c in client.graphql.call_args_list]
    # three org-scope lookups, then repo-a's two contributors
    assert len(queries) == 5
    assert all("org:org " in q for q in queries[:3])
    assert all("repo:org/repo-a " in q for q in queries[3:])


@pytest.mark.asyncio
@patch("org_leaderboard.orchestrator.GitHubClient")
async def test_run_survives_repo_network_error(mock_client_cls, tmp_path):
    client = _mock_client()

    async def stats_side_effect(owner, repo):
        if repo == "repo-b":
            raise httpx.ConnectError("connection reset")
        return STATS[repo]

    client.get_contributor_stats.side_effect = stats_side_effect
    _patch_client(mock_client_cls, client)

    report = await run(_config(tmp_path), now=NOW, show_summary=False)

    assert report.failed_repos == ["repo-b"]
    assert [(e.login, e.commits) for e in report.overall] == [("alice", 5), ("bob", 2)]
    assert [r.name for r in report.repos] == ["repo-a"]
    assert (tmp_path / "leaderboard.svg").exists()


@pytest.mark.asyncio
@patch("org_leaderboard.orchestrator.GitHubClient")
async def test_run_auth_failure_writes_nothing(mock_client_cls, tmp_path):
    client = _mock_client()
    client.list_org_repos.side_effect = AuthError("GET", "/orgs/org/repos", 401, "Bad credentials")
    _patch_client(mock_client_cls, client)

    with pytest.raises(AuthError):
        await run(_config(tmp_path), now=NOW, show_summary=False)

    assert not (tmp_path / "leaderboard.svg").exists()


@pytest.mark.asyncio
@patch("org_leaderboard.orchestrator.render_summary")
@patch("org_leaderboard.orchestrator.GitHubClient")
async def test_run_passes_config(mock_client_cls, mock_summary, tmp_path):
    client = _mock_client()
    _patch_client(mock_client_cls, client)
    config = _config(tmp_path, api_url="https://ghe.example.com/api/v3")

    report = await run(config, now=NOW)

    kwargs = mock_client_cls.call_args.kwargs
    assert kwargs["token"] == "fake"
    assert kwargs["base_url"] == "https://ghe.example.com/api/v3"
    assert kwargs["retry"] is config.retry
    mock_summary.assert_called_once_with(report)
