"""Orchestrator: wires together client, aggregator, enricher and renderer."""

from __future__ import annotations

import logging
from datetime import datetime

from .aggregator import aggregate_org
from .config import LeaderboardConfig
from .enricher import attach_metrics, enrich_logins
from .github.client import GitHubClient
from .github.query import SearchScope
from .models import LeaderboardReport, OrgCommitSummary, RepoLeaderboard
from .renderer import build_report_lines, render_summary, write_svg
from .window import compute_window

log = logging.getLogger(__name__)


def _repo_leaderboards(summary: OrgCommitSummary, enriched: dict) -> list[RepoLeaderboard]:
    boards = []
    for name in summary.active_repos:
        entries = summary.repo_top[name]
        if name in enriched:
            entries = attach_metrics(entries, enriched[name])
        boards.append(RepoLeaderboard(
            name=name,
            total_commits=summary.repo_stats[name].total,
            entries=entries,
            enriched=name in enriched,
        ))
    return boards


async def run(
    config: LeaderboardConfig,
    now: datetime | None = None,
    show_summary: bool = True,
) -> LeaderboardReport:
    """Main pipeline: aggregate commits, enrich the leaders, render the SVG."""
    window = compute_window(config.months, now)
    log.info("Org %s, window %s", config.org, window.search_range)

    async with GitHubClient(
        token=config.token, base_url=config.api_url, retry=config.retry
    ) as client:
        summary = await aggregate_org(
            client,
            config.org,
            window,
            overall_top_n=config.overall_top_n,
            per_repo_top_n=config.per_repo_top_n,
            enrich_top_repos=config.enrich_top_repos,
            parallelism=config.parallelism,
        )

        overall_metrics = await enrich_logins(
            client,
            SearchScope.for_org(config.org),
            [e.login for e in summary.overall_top],
            window,
            delay=config.org_delay,
        )

        repo_metrics = {}
        for name in summary.top_repos:
            repo_metrics[name] = await enrich_logins(
                client,
                SearchScope.for_repo(config.org, name),
                [e.login for e in summary.repo_top[name]],
                window,
                delay=config.repo_delay,
            )

    report = LeaderboardReport(
        org=config.org,
        months=config.months,
        window=window,
        total_repos=len(summary.repos),
        overall=attach_metrics(summary.overall_top, overall_metrics),
        repos=_repo_leaderboards(summary, repo_metrics),
        failed_repos=summary.failed_repos,
    )

    write_svg(build_report_lines(report), config.output)
    log.info("Wrote %s", config.output)

    if show_summary:
        render_summary(report)
    return report
