"""Top picks: the best actionable consensus results seen so far."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from kalshi_consensus.constants import TOP_PICKS_LIMIT, TOP_PICKS_MIN_EDGE

if TYPE_CHECKING:
    from kalshi_consensus.agent.schemas import ConsensusResult


class TopPicks:
    """Bounded, ticker-unique ranking of actionable results.

    A result is admitted when its absolute edge exceeds `min_edge`, at least one
    provider contributed confidence, and the recommendation is not neutral. A
    newer result for a ticker always replaces the older one; if the newer one
    is not admissible the ticker simply leaves the ranking.
    """

    def __init__(self, limit: int = TOP_PICKS_LIMIT, min_edge: float = TOP_PICKS_MIN_EDGE) -> None:
        if limit <= 0:
            raise ValueError("limit must be positive")
        self._limit = limit
        self._min_edge = min_edge
        self._by_ticker: dict[str, ConsensusResult] = {}

    def is_eligible(self, result: ConsensusResult) -> bool:
        return (
            abs(result.edge_percentage) > self._min_edge
            and result.has_signal
            and not result.recommendation.is_neutral
        )

    def add(self, result: ConsensusResult) -> None:
        if self.is_eligible(result):
            self._by_ticker[result.ticker] = result
        else:
            self._by_ticker.pop(result.ticker, None)

    def extend(self, results: Iterable[ConsensusResult]) -> None:
        for result in results:
            self.add(result)

    def ranked(self) -> list[ConsensusResult]:
        """Admitted results by mispricing score, highest first, at most `limit`."""
        ordered = sorted(self._by_ticker.values(), key=lambda r: r.mispricing_score, reverse=True)
        return ordered[: self._limit]

    def __len__(self) -> int:
        return len(self.ranked())
