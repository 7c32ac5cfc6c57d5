"""Multi-provider consensus analysis for Kalshi markets."""

from kalshi_consensus.agent.consensus import (
    ConsensusEngine,
    build_engine,
    compute_consensus,
    confidence_weight,
)
from kalshi_consensus.agent.orchestrator import ConsensusService
from kalshi_consensus.agent.schemas import (
    ConsensusResult,
    EstimateStatus,
    EventSnapshot,
    MarketSnapshot,
    Provider,
    ProviderEstimate,
    Recommendation,
)
from kalshi_consensus.agent.taxonomy import (
    DEFAULT_TAXONOMY,
    FIVE_WAY,
    THREE_WAY,
    EdgeThreshold,
    RecommendationTaxonomy,
    get_taxonomy,
)

__all__ = [
    "DEFAULT_TAXONOMY",
    "FIVE_WAY",
    "THREE_WAY",
    "ConsensusEngine",
    "ConsensusResult",
    "ConsensusService",
    "EdgeThreshold",
    "EstimateStatus",
    "EventSnapshot",
    "MarketSnapshot",
    "Provider",
    "ProviderEstimate",
    "Recommendation",
    "RecommendationTaxonomy",
    "build_engine",
    "compute_consensus",
    "confidence_weight",
    "get_taxonomy",
]
