"""Typed builder for the GraphQL search queries used during enrichment.

Each activity count is a ``search(type: ISSUE, first: 1) { issueCount }``
field whose query string combines a scope qualifier (``org:`` or ``repo:``),
an entity kind, an author and a date range. Every string interpolated into
the GraphQL document goes through :func:`quote_literal`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..models import TimeWindow


def quote_literal(value: str) -> str:
    """Return ``value`` as a double-quoted GraphQL string literal."""
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class EntityKind(str, Enum):
    ISSUE = "issue"
    PULL_REQUEST = "pr"


class DateField(str, Enum):
    CREATED = "created"
    MERGED = "merged"


@dataclass(frozen=True)
class SearchScope:
    """Either a whole organization or a single repository in it."""

    org: str
    repo: str | None = None

    @classmethod
    def for_org(cls, org: str) -> SearchScope:
        return cls(org=org)

    @classmethod
    def for_repo(cls, org: str, repo: str) -> SearchScope:
        return cls(org=org, repo=repo)

    @property
    def qualifier(self) -> str:
        if self.repo is None:
            return f"org:{self.org}"
        return f"repo:{self.org}/{self.repo}"

    def __str__(self) -> str:
        return self.qualifier


@dataclass(frozen=True)
class ActivitySearch:
    alias: str
    scope: SearchScope
    kind: EntityKind
    author: str
    date_field: DateField
    window: TimeWindow

    def search_string(self) -> str:
        return (
            f"{self.scope.qualifier} is:{self.kind.value} author:{self.author} "
            f"{self.date_field.value}:{self.window.search_range}"
        )

    def to_field(self) -> str:
        return (
            f"{self.alias}: search(query: {quote_literal(self.search_string())}, "
            f"type: ISSUE, first: 1) {{ issueCount }}"
        )


@dataclass(frozen=True)
class GraphQLRequest:
    query: str
    variables: dict[str, Any] = field(default_factory=dict)

    def payload(self) -> dict[str, Any]:
        body: dict[str, Any] = {"query": self.query}
        if self.variables:
            body["variables"] = self.variables
        return body


ISSUES_ALIAS = "issues"
PRS_OPENED_ALIAS = "prsOpened"
PRS_MERGED_ALIAS = "prsMerged"


def activity_searches(scope: SearchScope, login: str, window: TimeWindow) -> list[ActivitySearch]:
    return [
        ActivitySearch(ISSUES_ALIAS, scope, EntityKind.ISSUE, login, DateField.CREATED, window),
        ActivitySearch(PRS_OPENED_ALIAS, scope, EntityKind.PULL_REQUEST, login, DateField.CREATED, window),
        ActivitySearch(PRS_MERGED_ALIAS, scope, EntityKind.PULL_REQUEST, login, DateField.MERGED, window),
    ]


def build_activity_request(scope: SearchScope, login: str, window: TimeWindow) -> GraphQLRequest:
    """Combine the issue, opened-PR and merged-PR counts into one request."""
    fields = "\n".join(f"  {s.to_field()}" for s in activity_searches(scope, login, window))
    return GraphQLRequest(query=f"query {{\n{fields}\n}}")
