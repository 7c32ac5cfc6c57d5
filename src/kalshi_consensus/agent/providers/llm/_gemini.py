"""Gemini (Google GenAI) text generator."""

from __future__ import annotations

import os
from typing import Protocol, cast

from kalshi_consensus.constants import DEFAULT_LLM_TIMEOUT_SECONDS

from ._schemas import GenerationRequest, require_api_key

DEFAULT_GEMINI_MODEL = "gemini-2.5-pro"
GEMINI_MODEL_ENV_VAR = "KALSHI_CONSENSUS_GEMINI_MODEL"


class _GeminiModels(Protocol):
    async def generate_content(self, **kwargs: object) -> object: ...


class _GeminiAio(Protocol):
    models: _GeminiModels


class _GeminiClient(Protocol):
    aio: _GeminiAio


class GeminiGenerator:
    """Text generator backed by the `google-genai` async client."""

    def __init__(
        self,
        *,
        model: str | None = None,
        api_key: str | None = None,
        timeout: float = DEFAULT_LLM_TIMEOUT_SECONDS,
        client: _GeminiClient | None = None,
    ) -> None:
        self.model = model or os.getenv(GEMINI_MODEL_ENV_VAR) or DEFAULT_GEMINI_MODEL
        self._api_key = api_key
        self._timeout = timeout
        self._client = client

    def _get_client(self) -> _GeminiClient:
        if self._client is None:
            from google import genai
            from google.genai import types

            key = require_api_key(self._api_key, "GOOGLE_AI_API_KEY", "GEMINI_API_KEY")
            self._client = cast(
                "_GeminiClient",
                genai.Client(
                    api_key=key,
                    # HttpOptions.timeout is in milliseconds.
                    http_options=types.HttpOptions(timeout=int(self._timeout * 1000)),
                ),
            )
        return self._client

    def _build_config(self, request: GenerationRequest) -> object:
        from google.genai import types

        return types.GenerateContentConfig(
            system_instruction=request.system,
            temperature=request.temperature,
            max_output_tokens=request.max_tokens,
        )

    async def generate(self, request: GenerationRequest) -> str:
        client = self._get_client()
        response = await client.aio.models.generate_content(
            model=self.model,
            contents=request.prompt,
            config=self._build_config(request),
        )
        return self._extract_text(response)

    @staticmethod
    def _extract_text(response: object) -> str:
        """Return `response.text`; empty string when the reply was blocked or empty."""
        text = getattr(response, "text", None)
        return text if isinstance(text, str) else ""
