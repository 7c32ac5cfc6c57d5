"""Market selection, batch scanning and ranking of consensus results."""

from kalshi_consensus.analysis.markets import (
    MarketSort,
    filter_high_volume_markets,
    search_markets,
    select_scan_candidates,
    sort_markets,
)
from kalshi_consensus.analysis.scanner import BatchScanner, MarketAnalyzer, batches
from kalshi_consensus.analysis.top_picks import TopPicks

__all__ = [
    "BatchScanner",
    "MarketAnalyzer",
    "MarketSort",
    "TopPicks",
    "batches",
    "filter_high_volume_markets",
    "search_markets",
    "select_scan_candidates",
    "sort_markets",
]
