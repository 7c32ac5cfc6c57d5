"""Schema types for text-generation providers."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kalshi_consensus.constants import (
    DEFAULT_LLM_MAX_TOKENS,
    DEFAULT_LLM_TEMPERATURE,
    MISSING_REASONING,
    NEUTRAL_PROBABILITY,
)


class ProviderConfigurationError(RuntimeError):
    """A text-generation provider is missing its credentials or SDK configuration."""


@dataclass(frozen=True)
class GenerationRequest:
    """One prompt sent to one text-generation provider."""

    prompt: str
    system: str | None = None
    temperature: float = DEFAULT_LLM_TEMPERATURE
    max_tokens: int = DEFAULT_LLM_MAX_TOKENS


class TextGenerator(Protocol):
    """Capability: given a prompt, return the provider's reply as a single string.

    Implementations own the provider-specific envelope unwrapping. They may raise
    on configuration or transport errors; the adapter absorbs those.
    """

    model: str

    async def generate(self, request: GenerationRequest) -> str:
        """Generate a reply for `request` and return its plain text."""
        ...


def _lenient_percent(value: object, *, default: float) -> float:
    """Read a 0..100 number (numeric strings and a trailing "%" allowed), clamped to [0, 100]."""
    number: float
    if isinstance(value, bool):
        number = default
    elif isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().rstrip("%"))
        except ValueError:
            number = default
    else:
        number = default

    if math.isnan(number):
        number = default
    return min(100.0, max(0.0, number))


class ProviderReply(BaseModel):
    """JSON object a provider returns for one market, on the 0..100 scale.

    Validation is lenient: wrong-typed or missing values fall back to defaults
    instead of failing the whole reply.
    """

    model_config = ConfigDict(frozen=True)

    estimated_probability: float = Field(
        default=NEUTRAL_PROBABILITY * 100, ge=0, le=100, alias="estimatedProbability"
    )
    confidence: float = Field(default=0.0, ge=0, le=100)
    reasoning: str = MISSING_REASONING
    key_factors: list[str] = Field(default_factory=list, alias="keyFactors")
    recommendation: str | None = None

    @field_validator("estimated_probability", mode="before")
    @classmethod
    def _read_probability(cls, value: object) -> float:
        return _lenient_percent(value, default=NEUTRAL_PROBABILITY * 100)

    @field_validator("confidence", mode="before")
    @classmethod
    def _read_confidence(cls, value: object) -> float:
        return _lenient_percent(value, default=0.0)

    @field_validator("reasoning", mode="before")
    @classmethod
    def _read_reasoning(cls, value: object) -> str:
        if not isinstance(value, str) or not value.strip():
            return MISSING_REASONING
        return value.strip()

    @field_validator("key_factors", mode="before")
    @classmethod
    def _read_key_factors(cls, value: object) -> list[str]:
        if not isinstance(value, list):
            return []
        return [item.strip() for item in value if isinstance(item, str) and item.strip()]

    @field_validator("recommendation", mode="before")
    @classmethod
    def _read_recommendation(cls, value: object) -> str | None:
        return value if isinstance(value, str) else None


def require_api_key(explicit: str | None, *env_names: str) -> str:
    """Return `explicit` or the first non-empty env var, else raise ProviderConfigurationError."""
    if explicit:
        return explicit
    for name in env_names:
        value = os.getenv(name)
        if value and value.strip():
            return value.strip()
    raise ProviderConfigurationError(f"{' or '.join(env_names)} is not configured")
