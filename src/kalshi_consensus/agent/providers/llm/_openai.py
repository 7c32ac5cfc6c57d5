"""OpenAI (chat completions) text generator."""

from __future__ import annotations

import os
from typing import Protocol, cast

from kalshi_consensus.constants import DEFAULT_LLM_TIMEOUT_SECONDS

from ._schemas import GenerationRequest, require_api_key

DEFAULT_OPENAI_MODEL = "gpt-4o"
OPENAI_MODEL_ENV_VAR = "KALSHI_CONSENSUS_OPENAI_MODEL"


class _OpenAICompletions(Protocol):
    async def create(self, **kwargs: object) -> object: ...


class _OpenAIChat(Protocol):
    completions: _OpenAICompletions


class _OpenAIClient(Protocol):
    chat: _OpenAIChat


class OpenAIGenerator:
    """Text generator backed by OpenAI chat completions."""

    def __init__(
        self,
        *,
        model: str | None = None,
        api_key: str | None = None,
        timeout: float = DEFAULT_LLM_TIMEOUT_SECONDS,
        client: _OpenAIClient | None = None,
    ) -> None:
        self.model = model or os.getenv(OPENAI_MODEL_ENV_VAR) or DEFAULT_OPENAI_MODEL
        self._api_key = api_key
        self._timeout = timeout
        self._client = client

    def _get_client(self) -> _OpenAIClient:
        if self._client is None:
            from openai import AsyncOpenAI

            key = require_api_key(self._api_key, "OPENAI_API_KEY")
            self._client = cast("_OpenAIClient", AsyncOpenAI(api_key=key, timeout=self._timeout))
        return self._client

    async def generate(self, request: GenerationRequest) -> str:
        messages: list[dict[str, str]] = []
        if request.system:
            messages.append({"role": "system", "content": request.system})
        messages.append({"role": "user", "content": request.prompt})

        completion = await self._get_client().chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=request.temperature,
            max_tokens=request.max_tokens,
        )
        return self._extract_text(completion)

    @staticmethod
    def _extract_text(completion: object) -> str:
        """Unwrap `choices[0].message.content`; empty string when absent."""
        choices = getattr(completion, "choices", None)
        if not choices:
            return ""
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        return content if isinstance(content, str) else ""
