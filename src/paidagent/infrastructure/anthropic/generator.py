from __future__ import annotations

import logging
from typing import Any

import httpx

from paidagent.domain.exceptions import GeneratorError
from paidagent.domain.repositories import ContentGenerator

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.anthropic.com"
DEFAULT_MODEL = "claude-3-opus-20240229"
DEFAULT_MAX_TOKENS = 512
ANTHROPIC_VERSION = "2023-06-01"


class AnthropicContentGenerator(ContentGenerator):
    """Content generator backed by the Anthropic Messages API."""

    def __init__(
        self,
        api_key: str,
        *,
        model: str = DEFAULT_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("ANTHROPIC_API_KEY environment variable is not set.")
        self._api_key = api_key
        self._model = model
        self._max_tokens = max_tokens
        self._client = client or httpx.AsyncClient(
            base_url=base_url, timeout=httpx.Timeout(timeout_seconds)
        )

    async def generate(self, prompt: str) -> str:
        payload = {
            "model": self._model,
            "max_tokens": self._max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        headers = {
            "x-api-key": self._api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }
        try:
            response = await self._client.post("/v1/messages", json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise GeneratorError(f"Anthropic API request failed: {exc}") from exc

        if not response.is_success:
            raise GeneratorError(
                f"Anthropic API error: {response.status_code} {response.text}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise GeneratorError("Anthropic API returned invalid JSON") from exc

        text = _join_text(data.get("content") if isinstance(data, dict) else None)
        logger.debug(
            "Anthropic response received",
            extra={"model": self._model, "chars": len(text)},
        )
        return text

    async def aclose(self) -> None:
        await self._client.aclose()


def _join_text(content: Any) -> str:
    if not isinstance(content, list):
        return ""
    return "".join(
        part["text"]
        for part in content
        if isinstance(part, dict) and isinstance(part.get("text"), str)
    )
