"""Batch scanner: run the consensus engine over many markets, politely."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterator, Sequence
from typing import TYPE_CHECKING, Protocol, TypeVar

import structlog

from kalshi_consensus.constants import DEFAULT_SCAN_BATCH_SIZE, DEFAULT_SCAN_DELAY_SECONDS

if TYPE_CHECKING:
    from kalshi_consensus.agent.schemas import ConsensusResult, MarketSnapshot

logger = structlog.get_logger()

T = TypeVar("T")

BatchCallback = Callable[[list["ConsensusResult"]], None]


class MarketAnalyzer(Protocol):
    """Anything that turns one market into a ConsensusResult."""

    async def analyze(self, market: MarketSnapshot) -> ConsensusResult: ...


def batches(items: Sequence[T], size: int) -> Iterator[list[T]]:
    """Yield consecutive chunks of `items`; the last may be shorter."""
    if size <= 0:
        raise ValueError("batch size must be positive")
    for start in range(0, len(items), size):
        yield list(items[start : start + size])


class BatchScanner:
    """Analyze markets in sequential batches with a pause between batches.

    Markets inside a batch are analyzed concurrently. The final list is ranked by
    mispricing score, highest first; ties keep input order.
    """

    def __init__(
        self,
        engine: MarketAnalyzer,
        *,
        batch_size: int = DEFAULT_SCAN_BATCH_SIZE,
        delay_seconds: float = DEFAULT_SCAN_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if delay_seconds < 0:
            raise ValueError("delay_seconds must be non-negative")
        self._engine = engine
        self._batch_size = batch_size
        self._delay_seconds = delay_seconds
        self._sleep = sleep

    @property
    def batch_size(self) -> int:
        return self._batch_size

    async def scan(
        self,
        markets: Sequence[MarketSnapshot],
        on_batch: BatchCallback | None = None,
    ) -> list[ConsensusResult]:
        if not markets:
            return []

        chunks = list(batches(markets, self._batch_size))
        results: list[ConsensusResult] = []
        for index, chunk in enumerate(chunks):
            if index > 0 and self._delay_seconds > 0:
                await self._sleep(self._delay_seconds)

            batch_results = list(await asyncio.gather(*(self._engine.analyze(m) for m in chunk)))
            results.extend(batch_results)
            logger.info(
                "Scan batch complete",
                batch=index + 1,
                batches=len(chunks),
                analyzed=len(results),
                total=len(markets),
            )
            if on_batch is not None:
                on_batch(batch_results)

        # sorted() is stable, so equal scores keep their scan order.
        return sorted(results, key=lambda r: r.mispricing_score, reverse=True)
