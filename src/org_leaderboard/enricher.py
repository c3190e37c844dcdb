"""Issue and pull request counts for top contributors via GraphQL search."""

from __future__ import annotations

import asyncio
import logging

import httpx

from .github.client import GitHubClient
from .github.errors import LeaderboardError
from .github.query import (
    ISSUES_ALIAS,
    PRS_MERGED_ALIAS,
    PRS_OPENED_ALIAS,
    SearchScope,
    build_activity_request,
)
from .models import ActivityMetrics, RankedEntry, TimeWindow

log = logging.getLogger(__name__)

ORG_DELAY = 0.15
REPO_DELAY = 0.12


def _count(data: dict, alias: str) -> int:
    return (data.get(alias) or {}).get("issueCount") or 0


async def fetch_activity(
    client: GitHubClient, scope: SearchScope, login: str, window: TimeWindow
) -> ActivityMetrics:
    data = await client.graphql(build_activity_request(scope, login, window))
    return ActivityMetrics(
        issues_opened=_count(data, ISSUES_ALIAS),
        prs_opened=_count(data, PRS_OPENED_ALIAS),
        prs_merged=_count(data, PRS_MERGED_ALIAS),
    )


async def enrich_logins(
    client: GitHubClient,
    scope: SearchScope,
    logins: list[str],
    window: TimeWindow,
    delay: float,
) -> dict[str, ActivityMetrics]:
    """Fetch metrics for each login one at a time, pausing ``delay`` seconds between calls.

    The search API has a tighter secondary rate limit than REST, so calls are
    never issued concurrently. A failed lookup yields zero metrics.
    """
    metrics: dict[str, ActivityMetrics] = {}
    for login in logins:
        try:
            metrics[login] = await fetch_activity(client, scope, login, window)
        except (LeaderboardError, httpx.HTTPError) as e:
            log.warning("Search failed for %s in %s: %s", login, scope, e)
            metrics[login] = ActivityMetrics()
        await asyncio.sleep(delay)
    return metrics


def attach_metrics(
    entries: list[RankedEntry], metrics: dict[str, ActivityMetrics]
) -> list[RankedEntry]:
    return [
        RankedEntry(
            rank=e.rank,
            login=e.login,
            commits=e.commits,
            metrics=metrics.get(e.login, ActivityMetrics()),
        )
        for e in entries
    ]
