"""Async GitHub client covering the REST and GraphQL surfaces."""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from urllib.parse import quote

import httpx

from ..config import RetryPolicy
from ..models import RepositoryRef
from .errors import AuthError, HttpError, QueryError
from .query import GraphQLRequest
from .rate_limit import RateLimitMonitor

log = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
API_VERSION = "2022-11-28"
PAGE_SIZE = 100


def _graphql_url_for(base_url: str) -> str:
    base = base_url.rstrip("/")
    if base.endswith("/api/v3"):
        return base[: -len("/v3")] + "/graphql"
    return f"{base}/graphql"


def _segment(value: str) -> str:
    return quote(value, safe="")


class GitHubClient:
    """Authenticated client for one leaderboard run.

    Use as an async context manager so the underlying connection pool is
    closed when the run finishes.
    """

    def __init__(
        self,
        token: str,
        base_url: str | None = None,
        graphql_url: str | None = None,
        retry: RetryPolicy | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or DEFAULT_API_URL).rstrip("/")
        self.graphql_url = graphql_url or _graphql_url_for(self.base_url)
        self.retry = retry or RetryPolicy()
        self.rate_limit = RateLimitMonitor()
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": API_VERSION,
            },
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        await self.rate_limit.wait_if_needed()
        response = await self._client.request(method, url, **kwargs)
        self.rate_limit.update(response)
        return response

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_success:
            return
        request = response.request
        args = (request.method, str(request.url), response.status_code, response.text)
        if response.status_code in (401, 403):
            raise AuthError(*args)
        raise HttpError(*args)

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        """Decode a successful response; 204 or an empty body means no data."""
        if response.status_code == 204 or not response.content.strip():
            return None
        try:
            return response.json()
        except ValueError as e:
            request = response.request
            raise HttpError(
                request.method, str(request.url), response.status_code, f"undecodable body: {e}"
            ) from e

    async def get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET a REST resource and return its decoded JSON body."""
        response = await self._send("GET", path, params=params)
        self._raise_for_status(response)
        return self._decode(response)

    async def get_json_with_pending_retry(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        max_attempts: int | None = None,
    ) -> Any | None:
        """Like :meth:`get_json`, but wait and retry while GitHub answers 202.

        Returns ``None`` when the resource is still being computed after the
        last attempt.
        """
        attempts = max_attempts or self.retry.max_attempts
        delays = RetryPolicy(attempts, self.retry.initial_delay, self.retry.max_delay).delays()
        for attempt in range(1, attempts + 1):
            response = await self._send("GET", path, params=params)
            if response.status_code != 202:
                self._raise_for_status(response)
                return self._decode(response)
            if attempt == attempts:
                break
            delay = next(delays)
            log.debug("%s pending (attempt %d/%d), retrying in %.1fs", path, attempt, attempts, delay)
            await asyncio.sleep(delay)
        log.debug("%s still pending after %d attempts", path, attempts)
        return None

    async def graphql(self, request: GraphQLRequest) -> dict[str, Any]:
        """Run one GraphQL request and return its ``data`` object."""
        response = await self._send("POST", self.graphql_url, json=request.payload())
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        if not response.is_success or body.get("errors"):
            raise QueryError(body.get("errors") or body or response.text, status_code=response.status_code)
        return body.get("data") or {}

    async def list_org_repos(self, org: str, page_size: int = PAGE_SIZE) -> list[RepositoryRef]:
        """List the organization's non-archived repositories, most recently pushed first."""
        repos: list[RepositoryRef] = []
        page = 1
        while True:
            batch = await self.get_json(
                f"/orgs/{_segment(org)}/repos",
                params={
                    "per_page": page_size,
                    "page": page,
                    "sort": "pushed",
                    "direction": "desc",
                    "type": "all",
                },
            )
            if not isinstance(batch, list) or not batch:
                break
            repos.extend(RepositoryRef.from_api(r) for r in batch if not r.get("archived"))
            if len(batch) < page_size:
                break
            page += 1
        return repos

    async def get_contributor_stats(self, owner: str, repo: str) -> list[dict] | None:
        """Weekly commit histograms per contributor.

        ``None`` while GitHub is still computing them, or when the repository
        is empty (204).
        """
        return await self.get_json_with_pending_retry(
            f"/repos/{_segment(owner)}/{_segment(repo)}/stats/contributors"
        )
