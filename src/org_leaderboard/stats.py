"""Reduce ``stats/contributors`` payloads to windowed commit counts."""

from __future__ import annotations

from collections.abc import Iterator

from .models import RepoCommitStats, WeeklyCommitSample


def parse_weeks(entry: dict) -> Iterator[WeeklyCommitSample]:
    for week in entry.get("weeks") or []:
        if not isinstance(week, dict):
            continue
        start = week.get("w")
        if not isinstance(start, int) or isinstance(start, bool):
            continue
        yield WeeklyCommitSample(week_start=start, commits=week.get("c") or 0)


def commits_since(entry: dict, since_epoch: int) -> int:
    return sum(s.commits for s in parse_weeks(entry) if s.week_start >= since_epoch)


def reduce_contributor_stats(payload: list[dict] | None, since_epoch: int) -> RepoCommitStats:
    """Sum each contributor's weekly commits from ``since_epoch`` onward.

    ``None`` means GitHub has not computed the stats yet and yields empty
    stats. Contributors without a login, or with no commits in the window,
    are left out.
    """
    if not payload:
        return RepoCommitStats()

    per_login: dict[str, int] = {}
    for entry in payload:
        login = (entry.get("author") or {}).get("login")
        if not login:
            continue
        count = commits_since(entry, since_epoch)
        if count <= 0:
            continue
        per_login[login] = per_login.get(login, 0) + count
    return RepoCommitStats(per_login=per_login, total=sum(per_login.values()))
