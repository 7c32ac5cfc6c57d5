"""Consensus engine: fan out to every provider and combine their estimates.

Combination is a confidence-weighted mean. The market-implied probability is the
YES bid/ask midpoint; edge is the signed gap in percentage points, and the
mispricing score scales |edge| by how confident the providers were overall.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

import structlog

from .providers.llm import build_adapters
from .schemas import ConsensusResult, ProviderEstimate
from .taxonomy import get_taxonomy

if TYPE_CHECKING:
    from .providers.llm import ProviderAdapter
    from .schemas import MarketSnapshot, Provider
    from .taxonomy import RecommendationTaxonomy

logger = structlog.get_logger()

WeightFn = Callable[[ProviderEstimate], float]


def confidence_weight(estimate: ProviderEstimate) -> float:
    """Weight of one estimate in the consensus mean.

    Every status currently weighs by its own confidence, so failed providers
    (confidence 0) drop out and parse failures count a little.
    """
    return estimate.confidence


def _clamp_unit(value: float) -> float:
    return min(1.0, max(0.0, value))


def compute_consensus(
    estimates: Sequence[ProviderEstimate],
    market: MarketSnapshot,
    taxonomy: RecommendationTaxonomy,
    *,
    weight: WeightFn = confidence_weight,
) -> ConsensusResult:
    """Combine provider estimates for `market` into a ConsensusResult.

    Raises:
        ValueError: If `estimates` is empty.
    """
    if not estimates:
        raise ValueError("compute_consensus requires at least one estimate")

    count = len(estimates)
    total_confidence = sum(e.confidence for e in estimates)
    weights = [max(0.0, weight(e)) for e in estimates]
    total_weight = sum(weights)

    if total_weight == 0:
        consensus_probability = sum(e.estimated_probability for e in estimates) / count
    else:
        consensus_probability = (
            sum(e.estimated_probability * w for e, w in zip(estimates, weights, strict=True))
            / total_weight
        )
    consensus_probability = _clamp_unit(consensus_probability)
    consensus_confidence = _clamp_unit(total_confidence / count)

    implied = market.implied_probability
    edge = (consensus_probability - implied) * 100
    mispricing = abs(edge) * consensus_confidence

    return ConsensusResult(
        market=market,
        analyses=list(estimates),
        consensus_probability=consensus_probability,
        consensus_confidence=consensus_confidence,
        implied_probability=implied,
        edge_percentage=edge,
        recommendation=taxonomy.classify(edge, consensus_confidence),
        mispricing_score=mispricing,
    )


class ConsensusEngine:
    """Ask every configured provider about a market, concurrently, and combine."""

    def __init__(
        self,
        adapters: Sequence[ProviderAdapter],
        *,
        taxonomy: RecommendationTaxonomy | None = None,
        weight: WeightFn = confidence_weight,
    ) -> None:
        if not adapters:
            raise ValueError("ConsensusEngine needs at least one provider adapter")
        self._adapters = list(adapters)
        self._taxonomy = taxonomy or get_taxonomy()
        self._weight = weight

    @property
    def providers(self) -> list[Provider]:
        return [adapter.provider for adapter in self._adapters]

    @property
    def taxonomy(self) -> RecommendationTaxonomy:
        return self._taxonomy

    async def analyze(self, market: MarketSnapshot) -> ConsensusResult:
        """Run one market through every adapter and return the consensus."""
        # Adapters never raise, so gather keeps one estimate per adapter in order.
        estimates = await asyncio.gather(*(a.analyze(market) for a in self._adapters))
        result = compute_consensus(estimates, market, self._taxonomy, weight=self._weight)
        logger.info(
            "Consensus computed",
            ticker=market.ticker,
            consensus_probability=round(result.consensus_probability, 4),
            edge_percentage=round(result.edge_percentage, 2),
            recommendation=result.recommendation.value,
            failed_providers=[p.value for p in result.failed_providers],
        )
        return result


def build_engine(
    *,
    backend: str | None = None,
    taxonomy: RecommendationTaxonomy | None = None,
) -> ConsensusEngine:
    """Construct an engine over all three providers from environment config."""
    resolved = taxonomy or get_taxonomy()
    return ConsensusEngine(build_adapters(backend, resolved), taxonomy=resolved)
