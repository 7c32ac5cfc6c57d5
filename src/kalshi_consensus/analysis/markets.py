"""Market listing helpers: volume filter, scan candidate selection, sort and search."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import TYPE_CHECKING

from kalshi_consensus.constants import DEFAULT_MIN_VOLUME, DEFAULT_SCAN_CANDIDATES

if TYPE_CHECKING:
    from kalshi_consensus.agent.schemas import MarketSnapshot

# Filter listings say "open"; market records say "active".
TRADABLE_STATUSES = frozenset({"open", "active"})


class MarketSort(str, Enum):
    """Listing orders offered by the `markets` command."""

    VOLUME = "volume"
    TRENDING = "trending"
    ENDING_SOON = "ending_soon"
    NEWEST = "newest"


def filter_high_volume_markets(
    markets: Iterable[MarketSnapshot], min_volume: int = DEFAULT_MIN_VOLUME
) -> list[MarketSnapshot]:
    """Tradable markets with at least `min_volume` contracts traded."""
    return [m for m in markets if m.volume >= min_volume and m.status in TRADABLE_STATUSES]


def select_scan_candidates(
    markets: Iterable[MarketSnapshot], limit: int = DEFAULT_SCAN_CANDIDATES
) -> list[MarketSnapshot]:
    """The `limit` highest-volume markets, de-duplicated by ticker."""
    if limit <= 0:
        return []
    seen: set[str] = set()
    unique: list[MarketSnapshot] = []
    for market in markets:
        if market.ticker in seen:
            continue
        seen.add(market.ticker)
        unique.append(market)
    return sorted(unique, key=lambda m: m.volume, reverse=True)[:limit]


def sort_markets(
    markets: Iterable[MarketSnapshot], by: MarketSort | str = MarketSort.VOLUME
) -> list[MarketSnapshot]:
    """Return a new list ordered by `by`.

    - volume: total volume, highest first
    - trending: 24h volume, highest first
    - ending_soon: close time, soonest first
    - newest: close time, latest first
    """
    order = MarketSort(by)
    items = list(markets)
    if order is MarketSort.VOLUME:
        return sorted(items, key=lambda m: m.volume, reverse=True)
    if order is MarketSort.TRENDING:
        return sorted(items, key=lambda m: m.volume_24h, reverse=True)
    if order is MarketSort.ENDING_SOON:
        return sorted(items, key=lambda m: m.close_time)
    return sorted(items, key=lambda m: m.close_time, reverse=True)


def search_markets(
    markets: Iterable[MarketSnapshot],
    term: str | None = None,
    category: str | None = None,
) -> list[MarketSnapshot]:
    """Case-insensitive match on title or outcome label, optionally within one category."""
    needle = (term or "").strip().lower()
    wanted_category = (category or "").strip().lower()

    matches: list[MarketSnapshot] = []
    for market in markets:
        if wanted_category and wanted_category not in ("all", market.category.lower()):
            continue
        if needle:
            haystack = [market.title, market.outcome_label or ""]
            if not any(needle in text.lower() for text in haystack):
                continue
        matches.append(market)
    return matches
