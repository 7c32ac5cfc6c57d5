"""Consensus service: the single entry point for analysis and scanning.

Workflow for a ticker:
1. Fetch the market from Kalshi and normalize it to a snapshot
2. Fan out to every configured provider (ConsensusEngine)
3. Combine, score and classify

Kalshi errors propagate to the caller. Provider errors never do.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from kalshi_consensus.analysis.markets import filter_high_volume_markets, select_scan_candidates
from kalshi_consensus.analysis.scanner import BatchScanner
from kalshi_consensus.constants import DEFAULT_EVENTS_LIMIT, DEFAULT_SCAN_CANDIDATES

from .providers.kalshi import fetch_event_snapshots, fetch_market_snapshot, flatten_markets

if TYPE_CHECKING:
    from collections.abc import Sequence

    from kalshi_consensus.analysis.scanner import BatchCallback
    from kalshi_consensus.api.client import KalshiPublicClient

    from .consensus import ConsensusEngine
    from .schemas import ConsensusResult, MarketSnapshot

logger = structlog.get_logger()


class ConsensusService:
    """Ties the Kalshi client, the consensus engine and the batch scanner together."""

    def __init__(
        self,
        *,
        kalshi_client: KalshiPublicClient,
        engine: ConsensusEngine,
        scanner: BatchScanner | None = None,
    ) -> None:
        self.kalshi_client = kalshi_client
        self.engine = engine
        self.scanner = scanner or BatchScanner(engine)

    async def analyze(self, market: MarketSnapshot) -> ConsensusResult:
        return await self.engine.analyze(market)

    async def analyze_ticker(self, ticker: str) -> ConsensusResult:
        """Fetch `ticker` from Kalshi, then analyze it.

        Raises:
            ValueError: If the ticker is blank.
            MarketNotFoundError: If Kalshi has no market with this ticker.
            KalshiAPIError: On other Kalshi failures.
        """
        market = await fetch_market_snapshot(self.kalshi_client, ticker)
        logger.info("Analyzing market", ticker=market.ticker, providers=len(self.engine.providers))
        return await self.engine.analyze(market)

    async def scan(
        self,
        markets: Sequence[MarketSnapshot],
        on_batch: BatchCallback | None = None,
    ) -> list[ConsensusResult]:
        return await self.scanner.scan(markets, on_batch=on_batch)

    async def find_scan_candidates(
        self,
        *,
        events_limit: int = DEFAULT_EVENTS_LIMIT,
        candidates: int = DEFAULT_SCAN_CANDIDATES,
        min_volume: int = 0,
    ) -> list[MarketSnapshot]:
        """Highest-volume open markets across the first page of events."""
        events = await fetch_event_snapshots(self.kalshi_client, limit=events_limit)
        markets = flatten_markets(events)
        if min_volume > 0:
            markets = filter_high_volume_markets(markets, min_volume)
        picked = select_scan_candidates(markets, candidates)
        logger.info(
            "Selected scan candidates",
            events=len(events),
            markets=len(markets),
            candidates=len(picked),
        )
        return picked
