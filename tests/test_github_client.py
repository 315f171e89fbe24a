"""Tests for readmegen.github_client — all HTTP calls mocked via respx."""

import json

import pytest
import httpx
import respx

from readmegen.errors import NetworkError, RateLimitError, RepoNotFoundError
from readmegen.github_client import GitHubClient
from readmegen.models import GithubRef
from readmegen.settings import Settings

REF = GithubRef(owner="acme", repo="widget")

REPO_META = {
    "name": "widget",
    "full_name": "acme/widget",
    "description": "A tiny widget library.",
    "language": "Python",
    "stargazers_count": 42,
    "forks_count": 7,
    "topics": ["widgets", "python"],
}

CONTENTS = [
    {"name": "README.md", "path": "README.md", "type": "file"},
    {"name": "src", "path": "src", "type": "dir"},
]


def _client(hc: httpx.AsyncClient) -> GitHubClient:
    return GitHubClient(Settings(), client=hc)


# ── Repo metadata ──────────────────────────────────────────────
@pytest.mark.asyncio
@respx.mock
async def test_fetch_repo_success():
    respx.get("https://api.github.com/repos/acme/widget").mock(
        return_value=httpx.Response(200, json=REPO_META)
    )

    async with httpx.AsyncClient(base_url="https://api.github.com") as hc:
        data = await _client(hc).fetch_repo(REF)

    assert data["description"] == "A tiny widget library."


@pytest.mark.asyncio
@respx.mock
async def test_fetch_repo_not_found():
    respx.get("https://api.github.com/repos/acme/widget").mock(
        return_value=httpx.Response(404, json={"message": "Not Found"})
    )

    async with httpx.AsyncClient(base_url="https://api.github.com") as hc:
        with pytest.raises(RepoNotFoundError, match="Repository not found"):
            await _client(hc).fetch_repo(REF)


# ── Rate limit ─────────────────────────────────────────────────
@pytest.mark.asyncio
@respx.mock
async def test_fetch_repo_rate_limited():
    respx.get("https://api.github.com/repos/acme/widget").mock(
        return_value=httpx.Response(
            403,
            json={"message": "API rate limit exceeded"},
            headers={
                "x-ratelimit-remaining": "0",
                "x-ratelimit-reset": "1700000000",
            },
        )
    )

    async with httpx.AsyncClient(base_url="https://api.github.com") as hc:
        with pytest.raises(RateLimitError) as exc_info:
            await _client(hc).fetch_repo(REF)
    assert exc_info.value.reset_timestamp == 1700000000
    assert isinstance(exc_info.value, NetworkError)


@pytest.mark.asyncio
@respx.mock
async def test_server_error_is_not_retried():
    route = respx.get("https://api.github.com/repos/acme/widget").mock(
        return_value=httpx.Response(502)
    )

    async with httpx.AsyncClient(base_url="https://api.github.com") as hc:
        with pytest.raises(NetworkError):
            await _client(hc).fetch_repo(REF)
    assert route.call_count == 1


@pytest.mark.asyncio
@respx.mock
async def test_transport_error_becomes_network_error():
    respx.get("https://api.github.com/repos/acme/widget").mock(
        side_effect=httpx.ConnectError("connection refused")
    )

    async with httpx.AsyncClient(base_url="https://api.github.com") as hc:
        with pytest.raises(NetworkError, match="connection refused"):
            await _client(hc).fetch_repo(REF)


# ── Bundle ─────────────────────────────────────────────────────
@pytest.mark.asyncio
@respx.mock
async def test_fetch_repository_bundle():
    respx.get("https://api.github.com/repos/acme/widget").mock(
        return_value=httpx.Response(200, json=REPO_META)
    )
    respx.get("https://api.github.com/repos/acme/widget/contents").mock(
        return_value=httpx.Response(200, json=CONTENTS)
    )

    async with httpx.AsyncClient(base_url="https://api.github.com") as hc:
        file_set = await _client(hc).fetch_repository_bundle(REF)

    assert list(file_set) == ["repository.json"]
    bundle = json.loads(file_set["repository.json"])
    assert bundle["name"] == "widget"
    assert bundle["description"] == "A tiny widget library."
    assert bundle["language"] == "Python"
    assert bundle["stars"] == 42
    assert bundle["forks"] == 7
    assert bundle["topics"] == ["widgets", "python"]
    assert bundle["contents"] == CONTENTS


@pytest.mark.asyncio
@respx.mock
async def test_bundle_fails_when_contents_missing():
    respx.get("https://api.github.com/repos/acme/widget").mock(
        return_value=httpx.Response(200, json=REPO_META)
    )
    respx.get("https://api.github.com/repos/acme/widget/contents").mock(
        return_value=httpx.Response(404, json={"message": "This repository is empty."})
    )

    async with httpx.AsyncClient(base_url="https://api.github.com") as hc:
        with pytest.raises(NetworkError, match="Could not fetch repository contents"):
            await _client(hc).fetch_repository_bundle(REF)


def test_token_sets_authorization_header():
    gc = GitHubClient(Settings(github_token="ghp_test"))
    assert gc._client.headers["Authorization"] == "Bearer ghp_test"
