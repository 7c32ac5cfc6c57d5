"""Claude (Anthropic) text generator."""

from __future__ import annotations

import os
from typing import Protocol, cast

from kalshi_consensus.constants import DEFAULT_LLM_TIMEOUT_SECONDS

from ._schemas import GenerationRequest, require_api_key

DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-5-20250929"
ANTHROPIC_MODEL_ENV_VAR = "KALSHI_CONSENSUS_ANTHROPIC_MODEL"


class _AnthropicMessages(Protocol):
    async def create(self, **kwargs: object) -> object: ...


class _AnthropicClient(Protocol):
    messages: _AnthropicMessages


class ClaudeGenerator:
    """Text generator backed by the Anthropic messages API."""

    def __init__(
        self,
        *,
        model: str | None = None,
        api_key: str | None = None,
        timeout: float = DEFAULT_LLM_TIMEOUT_SECONDS,
        client: _AnthropicClient | None = None,
    ) -> None:
        self.model = model or os.getenv(ANTHROPIC_MODEL_ENV_VAR) or DEFAULT_ANTHROPIC_MODEL
        self._api_key = api_key
        self._timeout = timeout
        self._client = client

    def _get_client(self) -> _AnthropicClient:
        if self._client is None:
            from anthropic import AsyncAnthropic

            key = require_api_key(self._api_key, "ANTHROPIC_API_KEY")
            self._client = cast(
                "_AnthropicClient", AsyncAnthropic(api_key=key, timeout=self._timeout)
            )
        return self._client

    async def generate(self, request: GenerationRequest) -> str:
        kwargs: dict[str, object] = {
            "model": self.model,
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "messages": [{"role": "user", "content": request.prompt}],
        }
        if request.system:
            kwargs["system"] = request.system

        response = await self._get_client().messages.create(**kwargs)
        return self._extract_text(response)

    @staticmethod
    def _extract_text(response: object) -> str:
        """Return the first text block of an Anthropic response."""
        content = getattr(response, "content", None)
        if not isinstance(content, list):
            return ""
        for block in content:
            if getattr(block, "type", None) != "text":
                continue
            text = getattr(block, "text", None)
            if isinstance(text, str):
                return text
        return ""
