"""Tests for the ConsensusService entry point."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import pytest
import respx
from httpx import Response

from kalshi_consensus.agent.consensus import ConsensusEngine
from kalshi_consensus.agent.orchestrator import ConsensusService
from kalshi_consensus.agent.providers.llm import MockGenerator, ProviderAdapter
from kalshi_consensus.agent.schemas import Provider, Recommendation
from kalshi_consensus.agent.taxonomy import FIVE_WAY
from kalshi_consensus.analysis.scanner import BatchScanner
from kalshi_consensus.api.client import KalshiPublicClient
from kalshi_consensus.api.exceptions import MarketNotFoundError

if TYPE_CHECKING:
    from collections.abc import Callable

BASE = "https://api.elections.kalshi.com/trade-api/v2"

_BULLISH = json.dumps(
    {
        "estimatedProbability": 80,
        "confidence": 90,
        "reasoning": "Strong fundamentals",
        "keyFactors": ["momentum"],
        "recommendation": "buy_yes",
    }
)


def _bullish_engine() -> ConsensusEngine:
    adapters = [ProviderAdapter(p, MockGenerator(_BULLISH), FIVE_WAY) for p in Provider]
    return ConsensusEngine(adapters, taxonomy=FIVE_WAY)


async def _no_sleep(_seconds: float) -> None:
    return None


@pytest.mark.asyncio
@respx.mock
async def test_analyze_ticker_fetches_then_analyzes(
    make_api_market: Callable[..., dict[str, Any]],
) -> None:
    respx.get(f"{BASE}/markets/ABC").mock(
        return_value=Response(
            200, json={"market": make_api_market(ticker="ABC", yes_bid=40, yes_ask=50)}
        )
    )

    async with KalshiPublicClient() as client:
        service = ConsensusService(kalshi_client=client, engine=_bullish_engine())
        result = await service.analyze_ticker("ABC")

    assert result.ticker == "ABC"
    assert result.implied_probability == pytest.approx(0.45)
    assert result.edge_percentage == pytest.approx(35.0)
    assert result.recommendation is Recommendation.STRONG_BUY_YES
    assert all(a.key_factors == ["momentum"] for a in result.analyses)


@pytest.mark.asyncio
@respx.mock
async def test_analyze_ticker_propagates_fetch_errors() -> None:
    respx.get(f"{BASE}/markets/NOPE").mock(return_value=Response(404))

    async with KalshiPublicClient() as client:
        service = ConsensusService(kalshi_client=client, engine=_bullish_engine())
        with pytest.raises(MarketNotFoundError):
            await service.analyze_ticker("NOPE")


@pytest.mark.asyncio
async def test_analyze_ticker_rejects_blank_ticker() -> None:
    async with KalshiPublicClient() as client:
        service = ConsensusService(kalshi_client=client, engine=_bullish_engine())
        with pytest.raises(ValueError):
            await service.analyze_ticker("  ")


@pytest.mark.asyncio
@respx.mock
async def test_find_scan_candidates_picks_top_volume(
    make_api_market: Callable[..., dict[str, Any]],
) -> None:
    respx.get(f"{BASE}/events").mock(
        return_value=Response(
            200,
            json={
                "events": [
                    {
                        "event_ticker": "E1",
                        "title": "One",
                        "category": "Politics",
                        "markets": [
                            make_api_market(ticker="LOW", volume=5),
                            make_api_market(ticker="HIGH", volume=500),
                        ],
                    },
                    {
                        "event_ticker": "E2",
                        "title": "Two",
                        "category": "Sports",
                        "markets": [make_api_market(ticker="MID", volume=200)],
                    },
                ],
                "cursor": None,
            },
        )
    )

    async with KalshiPublicClient() as client:
        service = ConsensusService(kalshi_client=client, engine=_bullish_engine())
        candidates = await service.find_scan_candidates(candidates=2)
        filtered = await service.find_scan_candidates(candidates=10, min_volume=100)

    assert [m.ticker for m in candidates] == ["HIGH", "MID"]
    assert {m.ticker for m in filtered} == {"HIGH", "MID"}
    assert candidates[1].category == "Sports"


@pytest.mark.asyncio
async def test_scan_delegates_to_scanner(
    make_market_snapshot: Callable[..., Any],
) -> None:
    engine = _bullish_engine()
    async with KalshiPublicClient() as client:
        service = ConsensusService(
            kalshi_client=client,
            engine=engine,
            scanner=BatchScanner(engine, sleep=_no_sleep),
        )
        markets = [
            make_market_snapshot(ticker="NEAR", yes_bid=0.70, yes_ask=0.80),
            make_market_snapshot(ticker="FAR", yes_bid=0.10, yes_ask=0.20),
        ]
        results = await service.scan(markets)

    assert [r.ticker for r in results] == ["FAR", "NEAR"]
