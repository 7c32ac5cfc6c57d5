"""
Shared test fixtures.

PHILOSOPHY: Use REAL objects wherever possible. Only mock at system boundaries.
- Real Pydantic models (not dicts pretending to be models)
- respx ONLY for the Kalshi HTTP boundary
- Fake SDK clients / MockGenerator ONLY for the LLM provider boundary
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import pytest

from kalshi_consensus.agent.schemas import (
    EstimateStatus,
    MarketSnapshot,
    Provider,
    ProviderEstimate,
    Recommendation,
)

if TYPE_CHECKING:
    from collections.abc import Callable


@pytest.fixture(autouse=True)
def _isolate_llm_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep real provider keys and config out of unit tests."""
    for name in (
        "OPENAI_API_KEY",
        "ANTHROPIC_API_KEY",
        "GOOGLE_AI_API_KEY",
        "GEMINI_API_KEY",
        "KALSHI_CONSENSUS_BACKEND",
        "KALSHI_CONSENSUS_TAXONOMY",
        "KALSHI_CONSENSUS_OPENAI_MODEL",
        "KALSHI_CONSENSUS_ANTHROPIC_MODEL",
        "KALSHI_CONSENSUS_GEMINI_MODEL",
    ):
        monkeypatch.delenv(name, raising=False)


# ============================================================================
# Domain Object Builders (create REAL objects, not dicts)
# ============================================================================
@pytest.fixture
def make_market_snapshot() -> Callable[..., MarketSnapshot]:
    """Factory for MarketSnapshot with sensible defaults (prices as fractions)."""

    def _make(
        ticker: str = "TEST-MARKET",
        yes_bid: float = 0.40,
        yes_ask: float = 0.44,
        **overrides: Any,
    ) -> MarketSnapshot:
        base: dict[str, Any] = {
            "ticker": ticker,
            "title": f"Test Market {ticker}",
            "category": "Politics",
            "status": "active",
            "yes_bid": yes_bid,
            "yes_ask": yes_ask,
            "no_bid": round(1 - yes_ask, 4),
            "no_ask": round(1 - yes_bid, 4),
            "last_price": yes_bid,
            "volume": 10_000,
            "volume_24h": 1_000,
            "open_interest": 5_000,
            "close_time": datetime(2026, 12, 31, tzinfo=UTC),
        }
        base.update(overrides)
        return MarketSnapshot(**base)

    return _make


@pytest.fixture
def make_estimate() -> Callable[..., ProviderEstimate]:
    """Factory for ProviderEstimate."""

    def _make(
        provider: Provider = Provider.OPENAI,
        probability: float = 0.5,
        confidence: float = 0.5,
        **overrides: Any,
    ) -> ProviderEstimate:
        base: dict[str, Any] = {
            "provider": provider,
            "estimated_probability": probability,
            "confidence": confidence,
            "reasoning": "test reasoning",
            "recommendation": Recommendation.HOLD,
            "status": EstimateStatus.OK,
        }
        base.update(overrides)
        return ProviderEstimate(**base)

    return _make


@pytest.fixture
def make_api_market() -> Callable[..., dict[str, Any]]:
    """Factory for raw Kalshi API market dicts (legacy cents plus dollar strings)."""

    def _cents_to_fixed_dollars(cents: int) -> str:
        return f"{cents / 100:.4f}"

    def _make(
        ticker: str = "TEST-MARKET",
        status: str = "active",
        yes_bid: int = 45,
        yes_ask: int = 47,
        **overrides: Any,
    ) -> dict[str, Any]:
        base: dict[str, Any] = {
            "ticker": ticker,
            "event_ticker": "TEST-EVENT",
            "series_ticker": "TEST",
            "title": f"Test Market {ticker}",
            "subtitle": "",
            "status": status,
            "result": "",
            "yes_bid": yes_bid,
            "yes_ask": yes_ask,
            "no_bid": 100 - yes_ask,
            "no_ask": 100 - yes_bid,
            "last_price": (yes_bid + yes_ask) // 2,
            "yes_bid_dollars": _cents_to_fixed_dollars(yes_bid),
            "yes_ask_dollars": _cents_to_fixed_dollars(yes_ask),
            "volume": 10000,
            "volume_24h": 1000,
            "open_interest": 5000,
            "open_time": "2024-01-01T00:00:00Z",
            "close_time": "2026-12-31T00:00:00Z",
            "expiration_time": "2027-01-01T00:00:00Z",
        }
        base.update(overrides)
        return base

    return _make
