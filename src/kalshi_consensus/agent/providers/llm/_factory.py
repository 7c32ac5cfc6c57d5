"""Factory functions for text-generator backends and provider adapters."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from ...schemas import Provider
from ...taxonomy import get_taxonomy
from ._adapter import ProviderAdapter
from ._claude import ClaudeGenerator
from ._gemini import GeminiGenerator
from ._mock import MockGenerator
from ._openai import OpenAIGenerator

if TYPE_CHECKING:
    from ...taxonomy import RecommendationTaxonomy
    from ._schemas import TextGenerator

BACKEND_ENV_VAR = "KALSHI_CONSENSUS_BACKEND"


def resolve_backend(backend: str | None = None) -> str:
    """Return "live" or "mock", reading `KALSHI_CONSENSUS_BACKEND` when not given."""
    backend_raw = backend
    if backend_raw is None:
        backend_raw = os.getenv(BACKEND_ENV_VAR) or "live"
    backend_value = backend_raw.strip().lower()
    if backend_value not in ("live", "mock"):
        raise ValueError(f"Unknown generator backend: {backend_value!r}")
    return backend_value


def get_generator(provider: Provider, backend: str | None = None) -> TextGenerator:
    """Construct the text generator for one provider.

    Live generators resolve their API key lazily, on the first request, so a
    missing key only fails that provider's estimates.
    """
    if resolve_backend(backend) == "mock":
        return MockGenerator(model=f"mock-{provider.value}")
    if provider is Provider.OPENAI:
        return OpenAIGenerator()
    if provider is Provider.ANTHROPIC:
        return ClaudeGenerator()
    return GeminiGenerator()


def build_adapters(
    backend: str | None = None,
    taxonomy: RecommendationTaxonomy | None = None,
) -> list[ProviderAdapter]:
    """One adapter per provider, in fixed `Provider` order."""
    resolved_taxonomy = taxonomy or get_taxonomy()
    resolved_backend = resolve_backend(backend)
    return [
        ProviderAdapter(provider, get_generator(provider, resolved_backend), resolved_taxonomy)
        for provider in Provider
    ]
