"""Tests for the failure-isolated provider adapter."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import httpx
import pytest

from kalshi_consensus.agent.providers.llm import (
    GenerationRequest,
    MockGenerator,
    ProviderAdapter,
    ProviderConfigurationError,
)
from kalshi_consensus.agent.schemas import EstimateStatus, Provider, Recommendation
from kalshi_consensus.agent.taxonomy import FIVE_WAY, THREE_WAY

if TYPE_CHECKING:
    from collections.abc import Callable

    from kalshi_consensus.agent.schemas import MarketSnapshot


@pytest.mark.asyncio
async def test_adapter_sends_prompt_with_sampling_settings(
    make_market_snapshot: Callable[..., MarketSnapshot],
) -> None:
    generator = MockGenerator('{"estimatedProbability": 61, "confidence": 70}')
    adapter = ProviderAdapter(Provider.OPENAI, generator, FIVE_WAY)

    await adapter.analyze(make_market_snapshot(title="Rain tomorrow?"))

    [request] = generator.requests
    assert isinstance(request, GenerationRequest)
    assert "Market: Rain tomorrow?" in request.prompt
    assert request.system
    assert request.temperature == 0.3
    assert request.max_tokens == 1000


@pytest.mark.asyncio
async def test_adapter_tags_estimate_with_its_provider(
    make_market_snapshot: Callable[..., MarketSnapshot],
) -> None:
    adapter = ProviderAdapter(
        Provider.GEMINI,
        MockGenerator('{"estimatedProbability": 61, "confidence": 70, "recommendation": "yes"}'),
        FIVE_WAY,
    )

    estimate = await adapter.analyze(make_market_snapshot())

    assert adapter.provider is Provider.GEMINI
    assert estimate.provider is Provider.GEMINI
    assert estimate.estimated_probability == pytest.approx(0.61)
    assert estimate.recommendation is Recommendation.BUY_YES
    assert estimate.status is EstimateStatus.OK


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        ProviderConfigurationError("OPENAI_API_KEY is not configured"),
        httpx.ConnectError("network down"),
        RuntimeError("provider 500"),
    ],
)
async def test_adapter_absorbs_provider_errors(
    error: Exception, make_market_snapshot: Callable[..., MarketSnapshot]
) -> None:
    adapter = ProviderAdapter(Provider.ANTHROPIC, MockGenerator(error=error), THREE_WAY)

    estimate = await adapter.analyze(make_market_snapshot())

    assert estimate.provider is Provider.ANTHROPIC
    assert estimate.estimated_probability == 0.5
    assert estimate.confidence == 0.0
    assert estimate.reasoning == "API error occurred"
    assert estimate.recommendation is Recommendation.SKIP
    assert estimate.status is EstimateStatus.PROVIDER_FAILED


@pytest.mark.asyncio
async def test_adapter_does_not_swallow_cancellation(
    make_market_snapshot: Callable[..., MarketSnapshot],
) -> None:
    adapter = ProviderAdapter(
        Provider.OPENAI, MockGenerator(error=asyncio.CancelledError()), FIVE_WAY
    )

    with pytest.raises(asyncio.CancelledError):
        await adapter.analyze(make_market_snapshot())


@pytest.mark.asyncio
async def test_adapter_parse_failure_keeps_small_confidence(
    make_market_snapshot: Callable[..., MarketSnapshot],
) -> None:
    adapter = ProviderAdapter(Provider.OPENAI, MockGenerator("I refuse."), FIVE_WAY)

    estimate = await adapter.analyze(make_market_snapshot())

    assert estimate.confidence == 0.2
    assert estimate.status is EstimateStatus.PARSE_FAILED
