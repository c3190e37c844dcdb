"""Errors raised by the GitHub client."""

from __future__ import annotations

from typing import Any


class LeaderboardError(Exception):
    """Base class for errors raised while talking to GitHub."""


class HttpError(LeaderboardError):
    """A REST request returned a non-2xx status."""

    def __init__(self, method: str, url: str, status_code: int, body: str = "") -> None:
        self.method = method
        self.url = url
        self.status_code = status_code
        self.body = body
        message = f"{method} {url} failed with status {status_code}"
        if body:
            message = f"{message}\n{body}"
        super().__init__(message)


class AuthError(HttpError):
    """GitHub rejected the credential (401 or 403)."""


class QueryError(LeaderboardError):
    """The GraphQL endpoint returned an error status or an ``errors`` payload."""

    def __init__(self, errors: Any, status_code: int | None = None) -> None:
        self.errors = errors
        self.status_code = status_code
        prefix = "GraphQL query failed"
        if status_code is not None:
            prefix = f"{prefix} (status {status_code})"
        super().__init__(f"{prefix}: {errors}")
