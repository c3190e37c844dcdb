"""Data models for org-leaderboard."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType


@dataclass(frozen=True)
class TimeWindow:
    start: date
    end: date
    start_epoch: int

    @property
    def search_range(self) -> str:
        """Date range in search qualifier form, e.g. ``2024-01-01..2024-06-30``."""
        return f"{self.start.isoformat()}..{self.end.isoformat()}"


@dataclass(frozen=True)
class RepositoryRef:
    name: str
    full_name: str
    private: bool = False
    fork: bool = False

    @classmethod
    def from_api(cls, payload: dict) -> RepositoryRef:
        return cls(
            name=payload["name"],
            full_name=payload["full_name"],
            private=bool(payload.get("private", False)),
            fork=bool(payload.get("fork", False)),
        )


@dataclass(frozen=True)
class WeeklyCommitSample:
    week_start: int
    commits: int


@dataclass(frozen=True)
class RepoCommitStats:
    """Windowed commit counts per login for one repository."""

    per_login: Mapping[str, int] = field(default_factory=dict)
    total: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "per_login", MappingProxyType(dict(self.per_login)))


@dataclass(frozen=True)
class ActivityMetrics:
    issues_opened: int = 0
    prs_opened: int = 0
    prs_merged: int = 0


@dataclass(frozen=True)
class RankedEntry:
    rank: int
    login: str
    commits: int
    metrics: ActivityMetrics | None = None


@dataclass
class OrgCommitSummary:
    repos: list[RepositoryRef]
    repo_stats: dict[str, RepoCommitStats]
    totals: dict[str, int]
    overall_top: list[RankedEntry]
    repo_top: dict[str, list[RankedEntry]]
    active_repos: list[str]
    top_repos: list[str]
    failed_repos: list[str] = field(default_factory=list)


@dataclass
class RepoLeaderboard:
    name: str
    total_commits: int
    entries: list[RankedEntry] = field(default_factory=list)
    enriched: bool = False


@dataclass
class LeaderboardReport:
    org: str
    months: int
    window: TimeWindow
    total_repos: int
    overall: list[RankedEntry] = field(default_factory=list)
    repos: list[RepoLeaderboard] = field(default_factory=list)
    failed_repos: list[str] = field(default_factory=list)

    @property
    def total_commits(self) -> int:
        return sum(r.total_commits for r in self.repos)
