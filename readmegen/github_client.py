"""
Async GitHub REST API client used by the collector's optional pre-fetch.

- httpx.AsyncClient with configurable timeouts.
- Unauthenticated unless a token is configured.
- Proper 403/429 rate-limit handling (reads X-RateLimit-Reset header).
- No retries: any failure ends the pre-fetch with a ``NetworkError``.
"""

from __future__ import annotations

import datetime as _dt
import json
import logging
import time
from typing import Any

import httpx

from readmegen.errors import NetworkError, RateLimitError, RepoNotFoundError
from readmegen.models import GithubRef
from readmegen.prompt import GITHUB_REF_FILENAME
from readmegen.settings import Settings

logger = logging.getLogger("readmegen.github_client")


# ── Helpers ─────────────────────────────────────────────────────
def _rate_limit_reset(response: httpx.Response) -> int | None:
    """Extract X-RateLimit-Reset header (unix timestamp) if present."""
    val = response.headers.get("x-ratelimit-reset")
    if val:
        try:
            return int(val)
        except ValueError:
            pass
    return None


def _check_rate_limit(response: httpx.Response, has_token: bool) -> None:
    """Raise RateLimitError if response indicates rate limiting."""
    if response.status_code in (403, 429):
        remaining = response.headers.get("x-ratelimit-remaining")
        # GitHub returns 403 with remaining=0 when rate-limited
        if response.status_code == 429 or remaining == "0":
            reset_ts = _rate_limit_reset(response)
            hint = " Try again later."
            if reset_ts:
                reset_dt = _dt.datetime.fromtimestamp(reset_ts, tz=_dt.timezone.utc)
                hint = f" Try again after {reset_dt.strftime('%Y-%m-%d %H:%M:%S UTC')}."

            token_hint = "" if has_token else " Set GITHUB_TOKEN for higher limits."
            raise RateLimitError(
                f"GitHub rate limit hit.{hint}{token_hint}",
                reset_timestamp=reset_ts,
            )


# ── Client ──────────────────────────────────────────────────────
class GitHubClient:
    """Async GitHub REST API wrapper."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None) -> None:
        headers: dict[str, str] = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "readmegen/1.0",
        }
        if settings.github_token:
            headers["Authorization"] = f"Bearer {settings.github_token}"
        self._has_token = bool(settings.github_token)

        self._client = client or httpx.AsyncClient(
            base_url=settings.github_api_base,
            headers=headers,
            timeout=httpx.Timeout(
                connect=settings.http_connect_timeout,
                read=settings.http_read_timeout,
                write=settings.http_read_timeout,
                pool=settings.http_read_timeout,
            ),
        )

    async def _get(self, path: str) -> httpx.Response:
        try:
            resp = await self._client.get(path)
        except httpx.HTTPError as exc:
            raise NetworkError(f"GitHub request failed for {path}: {exc}") from exc

        _check_rate_limit(resp, self._has_token)
        if resp.status_code == 404:
            raise RepoNotFoundError("Repository not found")
        if resp.status_code >= 400:
            raise NetworkError(f"GitHub returned {resp.status_code} for {path}")
        return resp

    async def fetch_repo(self, ref: GithubRef) -> dict[str, Any]:
        """Fetch repository metadata."""
        resp = await self._get(f"/repos/{ref.owner}/{ref.repo}")
        return resp.json()

    async def fetch_contents(self, ref: GithubRef) -> list[dict[str, Any]]:
        """Fetch the top-level directory listing."""
        resp = await self._get(f"/repos/{ref.owner}/{ref.repo}/contents")
        data = resp.json()
        # a path pointing at a single file yields an object, not a list
        return data if isinstance(data, list) else [data]

    async def fetch_repository_bundle(self, ref: GithubRef) -> dict[str, str]:
        """Fetch metadata + top-level contents and bundle them as one JSON file.

        Returns a FileSet with a single ``repository.json`` entry.
        """
        t0 = time.perf_counter()
        repo_data = await self.fetch_repo(ref)
        try:
            contents = await self.fetch_contents(ref)
        except RepoNotFoundError as exc:
            # empty repositories answer 404 on /contents
            raise NetworkError("Could not fetch repository contents") from exc

        bundle = {
            "name": ref.repo,
            "description": repo_data.get("description"),
            "language": repo_data.get("language"),
            "stars": repo_data.get("stargazers_count"),
            "forks": repo_data.get("forks_count"),
            "topics": repo_data.get("topics"),
            "contents": contents,
        }
        elapsed = (time.perf_counter() - t0) * 1000
        logger.info(
            "Fetched %s from GitHub (%d top-level entries, %.1f ms)",
            ref.full_name, len(contents), elapsed,
        )
        return {GITHUB_REF_FILENAME: json.dumps(bundle, indent=2)}

    async def aclose(self) -> None:
        await self._client.aclose()
