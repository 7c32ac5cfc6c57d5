"""Tests for the Kalshi boundary: API records -> snapshots."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
import respx
from httpx import Response
from structlog.testing import capture_logs

from kalshi_consensus.agent.providers.kalshi import (
    event_snapshot_from_api,
    fetch_event_snapshots,
    fetch_market_snapshot,
    fetch_markets_page,
    flatten_markets,
    market_snapshot_from_api,
)
from kalshi_consensus.api.client import KalshiPublicClient
from kalshi_consensus.api.exceptions import MarketNotFoundError
from kalshi_consensus.api.models.event import Event
from kalshi_consensus.api.models.market import Market

if TYPE_CHECKING:
    from collections.abc import Callable

BASE = "https://api.elections.kalshi.com/trade-api/v2"


def test_snapshot_divides_cents_by_100(make_api_market: Callable[..., dict[str, Any]]) -> None:
    market = Market.model_validate(
        make_api_market(yes_bid=40, yes_ask=50, yes_sub_title="Above 100k", volume=321)
    )

    snapshot = market_snapshot_from_api(market)

    assert snapshot.yes_bid == pytest.approx(0.40)
    assert snapshot.yes_ask == pytest.approx(0.50)
    assert snapshot.no_bid == pytest.approx(0.50)
    assert snapshot.no_ask == pytest.approx(0.60)
    assert snapshot.last_price == pytest.approx(0.45)
    assert snapshot.implied_probability == pytest.approx(0.45)
    assert snapshot.status == "active"
    assert snapshot.category == "Unknown"
    assert snapshot.outcome_label == "Above 100k"
    assert snapshot.volume == 321
    assert snapshot.subtitle is None
    assert snapshot.result is None


def test_snapshot_category_precedence(make_api_market: Callable[..., dict[str, Any]]) -> None:
    own = Market.model_validate(make_api_market(category="Crypto"))
    bare = Market.model_validate(make_api_market())

    assert market_snapshot_from_api(own, category="Economics").category == "Crypto"
    assert market_snapshot_from_api(bare, category="Economics").category == "Economics"


def test_event_category_flows_to_markets(make_api_market: Callable[..., dict[str, Any]]) -> None:
    event = Event.model_validate(
        {
            "event_ticker": "EVT",
            "series_ticker": "SER",
            "title": "Event",
            "sub_title": "Sub",
            "category": "Climate",
            "markets": [make_api_market(ticker="A"), make_api_market(ticker="B")],
        }
    )

    snapshot = event_snapshot_from_api(event)

    assert snapshot.category == "Climate"
    assert snapshot.subtitle == "Sub"
    assert [m.category for m in snapshot.markets] == ["Climate", "Climate"]
    assert [m.ticker for m in flatten_markets([snapshot])] == ["A", "B"]


@pytest.mark.asyncio
@respx.mock
async def test_fetch_market_snapshot(make_api_market: Callable[..., dict[str, Any]]) -> None:
    respx.get(f"{BASE}/markets/ABC").mock(
        return_value=Response(200, json={"market": make_api_market(ticker="ABC")})
    )

    async with KalshiPublicClient() as client:
        snapshot = await fetch_market_snapshot(client, "ABC")

    assert snapshot.ticker == "ABC"


@pytest.mark.asyncio
@respx.mock
async def test_fetch_market_snapshot_propagates_not_found() -> None:
    respx.get(f"{BASE}/markets/NOPE").mock(return_value=Response(404))

    async with KalshiPublicClient() as client:
        with pytest.raises(MarketNotFoundError):
            await fetch_market_snapshot(client, "NOPE")


@pytest.mark.asyncio
@respx.mock
async def test_fetch_markets_page(make_api_market: Callable[..., dict[str, Any]]) -> None:
    respx.get(f"{BASE}/markets").mock(
        return_value=Response(200, json={"markets": [make_api_market()], "cursor": "c2"})
    )

    async with KalshiPublicClient() as client:
        markets, cursor = await fetch_markets_page(client, limit=1)

    assert len(markets) == 1
    assert cursor == "c2"


@pytest.mark.asyncio
@respx.mock
async def test_fetch_event_snapshots_single_page(
    make_api_market: Callable[..., dict[str, Any]],
) -> None:
    route = respx.get(f"{BASE}/events").mock(
        return_value=Response(
            200,
            json={
                "events": [
                    {
                        "event_ticker": "EVT",
                        "title": "Event",
                        "category": "Sports",
                        "markets": [make_api_market()],
                    }
                ],
                "cursor": "more",
            },
        )
    )

    async with KalshiPublicClient() as client:
        with capture_logs() as logs:
            events = await fetch_event_snapshots(client, limit=5)

    assert route.call_count == 1
    assert not [entry for entry in logs if entry["log_level"] == "warning"]
    assert events[0].markets[0].category == "Sports"


@pytest.mark.asyncio
async def test_fetch_event_snapshots_single_page_skips_paginator(
    make_api_market: Callable[..., dict[str, Any]],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    event = Event.model_validate(
        {"event_ticker": "EVT", "title": "Event", "markets": [make_api_market()]}
    )
    client = KalshiPublicClient()

    async def _page(**_: Any) -> tuple[list[Event], str | None]:
        return [event], "more"

    def _paginate(**_: Any) -> Any:
        raise AssertionError("single page should not paginate")

    monkeypatch.setattr(client, "get_events_page", _page)
    monkeypatch.setattr(client, "get_all_events", _paginate)
    try:
        events = await fetch_event_snapshots(client, limit=5)
    finally:
        await client.aclose()

    assert [e.event_ticker for e in events] == ["EVT"]


@pytest.mark.asyncio
@respx.mock
async def test_fetch_event_snapshots_follows_cursor_across_pages(
    make_api_market: Callable[..., dict[str, Any]],
) -> None:
    route = respx.get(f"{BASE}/events").mock(
        side_effect=[
            Response(
                200,
                json={
                    "events": [{"event_ticker": "E1", "title": "One", "markets": []}],
                    "cursor": "c2",
                },
            ),
            Response(
                200,
                json={
                    "events": [
                        {"event_ticker": "E2", "title": "Two", "markets": [make_api_market()]}
                    ],
                    "cursor": None,
                },
            ),
        ]
    )

    async with KalshiPublicClient() as client:
        events = await fetch_event_snapshots(client, limit=5, max_pages=3)

    assert route.call_count == 2
    assert [e.event_ticker for e in events] == ["E1", "E2"]
