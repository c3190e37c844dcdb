"""Run configuration for org-leaderboard."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass(frozen=True)
class RetryPolicy:
    """Backoff schedule for endpoints that answer 202 while computing."""

    max_attempts: int = 7
    initial_delay: float = 2.0
    max_delay: float = 60.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.initial_delay < 0 or self.max_delay < 0:
            raise ValueError("retry delays must not be negative")

    def delays(self) -> Iterator[float]:
        """Yield the wait before each retry: doubling, capped at max_delay."""
        delay = self.initial_delay
        for _ in range(self.max_attempts - 1):
            yield min(delay, self.max_delay)
            delay *= 2


@dataclass
class LeaderboardConfig:
    org: str
    token: str
    months: int = 6
    overall_top_n: int = 50
    per_repo_top_n: int = 10
    enrich_top_repos: int = 10
    output: str = "leaderboard.svg"
    parallelism: int = 4
    org_delay: float = 0.15
    repo_delay: float = 0.12
    api_url: str | None = None
    retry: RetryPolicy = field(default_factory=RetryPolicy)

    def __post_init__(self) -> None:
        if not self.org:
            raise ValueError("org must not be empty")
        if self.months < 0:
            raise ValueError("months must not be negative")
        for name in ("overall_top_n", "per_repo_top_n", "enrich_top_repos"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        if self.parallelism < 1:
            raise ValueError("parallelism must be at least 1")
