"""Kalshi provider adapter: API records -> normalized market snapshots."""

from __future__ import annotations

from typing import TYPE_CHECKING

from kalshi_consensus.api.models.market import MarketFilterStatus
from kalshi_consensus.constants import DEFAULT_EVENTS_LIMIT, DEFAULT_MARKETS_LIMIT

from ..schemas import EventSnapshot, MarketSnapshot

if TYPE_CHECKING:
    from kalshi_consensus.api.client import KalshiPublicClient
    from kalshi_consensus.api.models.event import Event
    from kalshi_consensus.api.models.market import Market

UNKNOWN_CATEGORY = "Unknown"


def _cents_to_fraction(cents: int) -> float:
    return min(100, max(0, cents)) / 100


def market_snapshot_from_api(market: Market, *, category: str | None = None) -> MarketSnapshot:
    """Convert a raw API market into a snapshot with [0, 1] prices.

    Args:
        market: Market as returned by the Kalshi API (cents or `*_dollars` strings)
        category: Category inherited from the parent event, used when the market
            record carries none

    Returns:
        MarketSnapshot with every price divided by 100
    """
    return MarketSnapshot(
        ticker=market.ticker,
        title=market.title,
        subtitle=market.subtitle or None,
        yes_sub_title=market.yes_sub_title or None,
        no_sub_title=market.no_sub_title or None,
        event_ticker=market.event_ticker,
        category=market.category or category or UNKNOWN_CATEGORY,
        status=market.status.value,
        yes_bid=_cents_to_fraction(market.yes_bid_cents),
        yes_ask=_cents_to_fraction(market.yes_ask_cents),
        no_bid=_cents_to_fraction(market.no_bid_cents),
        no_ask=_cents_to_fraction(market.no_ask_cents),
        last_price=_cents_to_fraction(market.last_price_cents),
        volume=market.volume,
        volume_24h=market.volume_24h,
        open_interest=market.open_interest,
        close_time=market.close_time,
        result=market.result or None,
        rules_primary=market.rules_primary,
    )


def event_snapshot_from_api(event: Event) -> EventSnapshot:
    """Convert an event with nested markets; the event's category flows to each market."""
    category = event.category or UNKNOWN_CATEGORY
    return EventSnapshot(
        event_ticker=event.event_ticker,
        series_ticker=event.series_ticker,
        title=event.title,
        subtitle=event.sub_title or None,
        category=category,
        markets=[market_snapshot_from_api(m, category=category) for m in event.nested_markets],
    )


async def fetch_market_snapshot(client: KalshiPublicClient, ticker: str) -> MarketSnapshot:
    """Fetch one market by ticker.

    Raises:
        ValueError: If the ticker is blank.
        MarketNotFoundError: If Kalshi has no market with this ticker.
    """
    market = await client.get_market(ticker)
    return market_snapshot_from_api(market)


async def fetch_markets_page(
    client: KalshiPublicClient,
    *,
    limit: int = DEFAULT_MARKETS_LIMIT,
    cursor: str | None = None,
    status: MarketFilterStatus | str | None = MarketFilterStatus.OPEN,
) -> tuple[list[MarketSnapshot], str | None]:
    """Fetch one page of markets as snapshots, plus the next cursor."""
    markets, next_cursor = await client.get_markets_page(status=status, limit=limit, cursor=cursor)
    return [market_snapshot_from_api(m) for m in markets], next_cursor


async def fetch_event_snapshots(
    client: KalshiPublicClient,
    *,
    limit: int = DEFAULT_EVENTS_LIMIT,
    status: MarketFilterStatus | str | None = MarketFilterStatus.OPEN,
    max_pages: int | None = 1,
) -> list[EventSnapshot]:
    """Fetch events with nested markets (the only listing that carries categories).

    A single requested page is read directly so a remaining cursor is not reported as
    truncated pagination.
    """
    if max_pages == 1:
        events, _ = await client.get_events_page(status=status, limit=limit)
        return [event_snapshot_from_api(event) for event in events]
    return [
        event_snapshot_from_api(event)
        async for event in client.get_all_events(status=status, limit=limit, max_pages=max_pages)
    ]


def flatten_markets(events: list[EventSnapshot]) -> list[MarketSnapshot]:
    """All markets across `events`, in event order."""
    return [market for event in events for market in event.markets]
