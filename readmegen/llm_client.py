"""
Groq completion client.

Uses the OpenAI-compatible SDK to call Groq-hosted models. One prompt in,
the model's text out. The SDK's built-in retries are switched off: a failed
or empty completion is surfaced to the caller as-is.
"""

from __future__ import annotations

import logging

from openai import AsyncOpenAI, OpenAIError

from readmegen.errors import EmptyResponseError, ProviderError
from readmegen.settings import Settings

logger = logging.getLogger("readmegen.llm_client")


class LLMClient:
    """Async wrapper around the chat completions API."""

    def __init__(self, settings: Settings, client: AsyncOpenAI | None = None) -> None:
        self._client = client or AsyncOpenAI(
            base_url=settings.llm_base_url,
            api_key=settings.groq_api_key,
            max_retries=0,
            timeout=settings.llm_timeout_seconds,
        )
        self._model = settings.llm_model
        self._temperature = settings.llm_temperature

    @property
    def model(self) -> str:
        return self._model

    async def complete(self, prompt: str) -> str:
        """Send ``prompt`` as a single user message and return the reply text.

        Raises ``ProviderError`` when the call itself fails and
        ``EmptyResponseError`` when it succeeds without content.
        """
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self._temperature,
            )
        except OpenAIError as exc:
            logger.error("Completion request to %s failed: %s", self._model, exc)
            raise ProviderError(f"Completion request failed: {exc}") from exc

        content = ""
        if response.choices:
            content = response.choices[0].message.content or ""
        if not content.strip():
            raise EmptyResponseError("No content received from the completion provider")

        logger.debug("LLM raw response (first 500 chars): %s", content[:500])
        return content

    async def aclose(self) -> None:
        await self._client.close()
