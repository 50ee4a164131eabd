"""Thin chat-completions client for the vocal analysis endpoints."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx

from myvoice.config.settings import OpenAIConfig
from myvoice.telemetry import UPSTREAM_FAILURE_COUNTER

logger = logging.getLogger(__name__)

ERROR_BODY_LIMIT = 4000


class CompletionConfigError(RuntimeError):
    """Raised when the completion API cannot be called with current settings."""


class UpstreamCompletionError(RuntimeError):
    """Raised when the completion API answers with a non-success status."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"OpenAI error ({status_code})")
        self.status_code = status_code
        self.body = body[:ERROR_BODY_LIMIT]


class OpenAiChatClient:
    """Send one chat completion request per call and return the first choice."""

    def __init__(
        self,
        config: OpenAIConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport

    def _api_key(self) -> str:
        if self._config.api_key is None or not self._config.api_key.get_secret_value():
            raise CompletionConfigError("Missing required env var: OPENAI_API_KEY")
        return self._config.api_key.get_secret_value()

    async def complete(
        self,
        *,
        model: str,
        messages: Sequence[dict[str, Any]],
        max_tokens: int,
        temperature: float | None = None,
        operation: str = "completion",
    ) -> str:
        """Return the text of the first completion choice, verbatim."""

        api_key = self._api_key()
        payload = {
            "model": model,
            "messages": list(messages),
            "temperature": self._config.temperature if temperature is None else temperature,
            "max_tokens": max_tokens,
        }
        async with httpx.AsyncClient(
            base_url=self._config.base_url,
            timeout=self._config.timeout_seconds,
            transport=self._transport,
        ) as client:
            response = await client.post(
                "/chat/completions",
                headers={"Authorization": f"Bearer {api_key}"},
                json=payload,
            )

        if response.is_error:
            UPSTREAM_FAILURE_COUNTER.labels(operation=operation).inc()
            logger.error(
                "Completion API error operation=%s status=%s body=%s",
                operation,
                response.status_code,
                response.text[:500],
            )
            raise UpstreamCompletionError(response.status_code, response.text)

        data = response.json()
        choices = data.get("choices") or [{}]
        content = (choices[0].get("message") or {}).get("content") or ""
        logger.info("Completion received operation=%s model=%s chars=%s", operation, model, len(content))
        return content


__all__ = [
    "CompletionConfigError",
    "ERROR_BODY_LIMIT",
    "OpenAiChatClient",
    "UpstreamCompletionError",
]
