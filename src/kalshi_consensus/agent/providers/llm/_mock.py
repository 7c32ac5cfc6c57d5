"""Mock text generator for tests and offline runs."""

from __future__ import annotations

import json

from ._schemas import GenerationRequest

_DEFAULT_REPLY = json.dumps(
    {
        "estimatedProbability": 50,
        "confidence": 50,
        "reasoning": "Mock analysis: no external provider was consulted.",
        "keyFactors": ["mock backend"],
        "recommendation": "hold",
    }
)


class MockGenerator:
    """Return canned text (or raise a canned error) and record every request.

    Handy in tests where a real provider SDK would need network access.
    """

    def __init__(
        self,
        reply: str = _DEFAULT_REPLY,
        *,
        error: BaseException | None = None,
        model: str = "mock-v1",
    ) -> None:
        self.model = model
        self._reply = reply
        self._error = error
        self.requests: list[GenerationRequest] = []

    async def generate(self, request: GenerationRequest) -> str:
        self.requests.append(request)
        if self._error is not None:
            raise self._error
        return self._reply
