"""
HTTP client for the relay, used by the collector to trigger one generation.

Status mapping:
    2xx with "readme"   → the README text
    400                 → InputValidationError (server's "error" message)
    other 4xx           → NetworkError
    5xx / 2xx no readme → ProviderError
    transport failure   → NetworkError
"""

from __future__ import annotations

import logging

import httpx

from readmegen.errors import InputValidationError, NetworkError, ProviderError
from readmegen.models import (
    FilesGeneration,
    GenerateFromFilesRequest,
    GenerationRequest,
    GithubRef,
)
from readmegen.settings import Settings

logger = logging.getLogger("readmegen.relay_client")

FILES_ENDPOINT = "/api/generate-from-files"
GITHUB_ENDPOINT = "/api/generate-from-github"


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        message = str(body["error"])
        if body.get("details"):
            message = f"{message} ({body['details']})"
        return message
    return f"Relay returned HTTP {resp.status_code}"


class RelayClient:
    """Async client for the two relay endpoints."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None) -> None:
        # generation can take arbitrarily long: only the connect phase is bounded
        self._client = client or httpx.AsyncClient(
            base_url=settings.relay_url,
            timeout=httpx.Timeout(None, connect=settings.http_connect_timeout),
        )

    async def _post(self, path: str, payload: dict) -> str:
        try:
            resp = await self._client.post(path, json=payload)
        except httpx.HTTPError as exc:
            raise NetworkError(f"Could not reach the relay: {exc}") from exc

        if resp.status_code == 400:
            raise InputValidationError(_error_message(resp))
        if 400 < resp.status_code < 500:
            # wrong relay URL or an intermediary proxy
            raise NetworkError(_error_message(resp))
        if resp.status_code >= 500:
            raise ProviderError(_error_message(resp))

        try:
            readme = resp.json().get("readme")
        except (ValueError, AttributeError):
            readme = None
        if not readme:
            raise ProviderError("No README content received from server")
        logger.info("Received README from relay (%d chars)", len(readme))
        return readme

    async def generate_from_files(self, files: dict[str, str]) -> str:
        body = GenerateFromFilesRequest(files=files)
        logger.info("Files to be sent: %s", list(files))
        return await self._post(FILES_ENDPOINT, body.model_dump())

    async def generate_from_github(self, ref: GithubRef) -> str:
        logger.info("Sending GitHub ref to relay: %s", ref.full_name)
        return await self._post(GITHUB_ENDPOINT, ref.model_dump())

    async def generate(self, request: GenerationRequest) -> str:
        if isinstance(request, FilesGeneration):
            return await self.generate_from_files(request.files)
        return await self.generate_from_github(request.ref)

    async def aclose(self) -> None:
        await self._client.aclose()
