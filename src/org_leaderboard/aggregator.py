"""Aggregate windowed commit counts across every repository of an org."""

from __future__ import annotations

import logging
from collections.abc import Mapping

import httpx

from .concurrency import gather_bounded
from .github.client import GitHubClient
from .github.errors import LeaderboardError
from .models import OrgCommitSummary, RankedEntry, RepoCommitStats, RepositoryRef, TimeWindow
from .stats import reduce_contributor_stats

log = logging.getLogger(__name__)

DEFAULT_PARALLELISM = 4


def top_n(counts: Mapping[str, int], n: int) -> list[RankedEntry]:
    """Rank ``counts`` by descending value; ties keep the mapping's order."""
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)[:n]
    return [RankedEntry(rank=i, login=login, commits=c) for i, (login, c) in enumerate(ranked, 1)]


def merge_totals(parts: list[RepoCommitStats]) -> dict[str, int]:
    totals: dict[str, int] = {}
    for stats in parts:
        for login, count in stats.per_login.items():
            totals[login] = totals.get(login, 0) + count
    return totals


def rank_repos(repo_stats: Mapping[str, RepoCommitStats]) -> list[str]:
    """Names of repositories with commits, busiest first."""
    active = [(name, s.total) for name, s in repo_stats.items() if s.total > 0]
    active.sort(key=lambda item: item[1], reverse=True)
    return [name for name, _ in active]


async def aggregate_org(
    client: GitHubClient,
    org: str,
    window: TimeWindow,
    overall_top_n: int = 50,
    per_repo_top_n: int = 10,
    enrich_top_repos: int = 10,
    parallelism: int = DEFAULT_PARALLELISM,
) -> OrgCommitSummary:
    repos = await client.list_org_repos(org)
    log.info("Found %d repositories in %s", len(repos), org)
    failed: list[str] = []

    async def _fetch(repo: RepositoryRef) -> RepoCommitStats:
        try:
            payload = await client.get_contributor_stats(org, repo.name)
        except (LeaderboardError, httpx.HTTPError) as e:
            log.warning("Stats failed for %s: %s", repo.full_name, e)
            failed.append(repo.name)
            return RepoCommitStats()
        if payload is None:
            log.info("No contributor stats for %s (pending or empty repository)", repo.full_name)
        return reduce_contributor_stats(payload, window.start_epoch)

    results = await gather_bounded(repos, _fetch, parallelism)

    repo_stats = {repo.name: stats for repo, stats in zip(repos, results)}
    totals = merge_totals(results)
    active = rank_repos(repo_stats)

    return OrgCommitSummary(
        repos=repos,
        repo_stats=repo_stats,
        totals=totals,
        overall_top=top_n(totals, overall_top_n),
        repo_top={name: top_n(s.per_login, per_repo_top_n) for name, s in repo_stats.items()},
        active_repos=active,
        top_repos=active[:enrich_top_repos],
        # Completion order varies; report failures in listing order.
        failed_repos=[r.name for r in repos if r.name in failed],
    )
