"""Recommendation taxonomies: which actions exist and how edge maps onto them.

A taxonomy is chosen once at configuration time and shared by the prompt
builder, the response parser, and the consensus engine, so the three always
agree on the action vocabulary.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from kalshi_consensus.constants import (
    FIVE_WAY_CONFIDENCE_FLOOR,
    FIVE_WAY_EDGE,
    FIVE_WAY_STRONG_EDGE,
    THREE_WAY_EDGE,
)

from .schemas import Recommendation

TAXONOMY_ENV_VAR = "KALSHI_CONSENSUS_TAXONOMY"


@dataclass(frozen=True)
class EdgeThreshold:
    """One row of a threshold table: |edge| strictly above `min_edge` selects an action."""

    min_edge: float
    yes_action: Recommendation
    no_action: Recommendation


@dataclass(frozen=True)
class RecommendationTaxonomy:
    """Closed action space plus the thresholds that classify a consensus into it."""

    name: str
    neutral: Recommendation
    thresholds: tuple[EdgeThreshold, ...]
    provider_actions: tuple[Recommendation, ...]
    confidence_floor: float = 0.0
    include_key_factors: bool = True

    def __post_init__(self) -> None:
        if not self.neutral.is_neutral:
            raise ValueError(f"neutral action must be hold or skip, got {self.neutral.value!r}")
        edges = [row.min_edge for row in self.thresholds]
        if edges != sorted(edges, reverse=True):
            raise ValueError("thresholds must be ordered from the largest edge down")
        if self.neutral not in self.provider_actions:
            raise ValueError("provider_actions must include the neutral action")

    @property
    def actions(self) -> tuple[Recommendation, ...]:
        """Every value `classify` can return."""
        yes = [row.yes_action for row in self.thresholds]
        no = [row.no_action for row in reversed(self.thresholds)]
        return (*yes, self.neutral, *no)

    def classify(self, edge_percentage: float, consensus_confidence: float) -> Recommendation:
        """Map a signed edge (percentage points) and consensus confidence to an action.

        A consensus without any confidence is always neutral, as is one below the
        confidence floor.
        """
        if consensus_confidence <= 0 or consensus_confidence < self.confidence_floor:
            return self.neutral

        for row in self.thresholds:
            if edge_percentage > row.min_edge:
                return row.yes_action
            if edge_percentage < -row.min_edge:
                return row.no_action
        return self.neutral

    def normalize_provider_action(self, raw: object) -> Recommendation:
        """Normalize a provider's free-form recommendation into this taxonomy.

        Accepts case-insensitive variants and substrings ("STRONG_BUY_YES" and
        "yes" both mean buy_yes). Anything unrecognized is the neutral action.
        """
        if not isinstance(raw, str):
            return self.neutral
        value = raw.strip().lower().replace("-", "_").replace(" ", "_")
        if "buy_yes" in value or value == "yes":
            return Recommendation.BUY_YES
        if "buy_no" in value or value == "no":
            return Recommendation.BUY_NO
        return self.neutral

    def provider_vocabulary(self) -> str:
        """Pipe-joined provider action list, as shown in the prompt."""
        return "|".join(action.value for action in self.provider_actions)


FIVE_WAY = RecommendationTaxonomy(
    name="five_way",
    neutral=Recommendation.HOLD,
    thresholds=(
        EdgeThreshold(
            FIVE_WAY_STRONG_EDGE, Recommendation.STRONG_BUY_YES, Recommendation.STRONG_BUY_NO
        ),
        EdgeThreshold(FIVE_WAY_EDGE, Recommendation.BUY_YES, Recommendation.BUY_NO),
    ),
    provider_actions=(Recommendation.BUY_YES, Recommendation.BUY_NO, Recommendation.HOLD),
    confidence_floor=FIVE_WAY_CONFIDENCE_FLOOR,
    include_key_factors=True,
)

THREE_WAY = RecommendationTaxonomy(
    name="three_way",
    neutral=Recommendation.SKIP,
    thresholds=(EdgeThreshold(THREE_WAY_EDGE, Recommendation.BUY_YES, Recommendation.BUY_NO),),
    provider_actions=(Recommendation.BUY_YES, Recommendation.BUY_NO, Recommendation.SKIP),
    confidence_floor=0.0,
    include_key_factors=False,
)

TAXONOMIES: dict[str, RecommendationTaxonomy] = {
    FIVE_WAY.name: FIVE_WAY,
    THREE_WAY.name: THREE_WAY,
}

DEFAULT_TAXONOMY = FIVE_WAY


def get_taxonomy(name: str | None = None) -> RecommendationTaxonomy:
    """Resolve a taxonomy by name, falling back to `KALSHI_CONSENSUS_TAXONOMY` then five-way."""
    raw = name if name is not None else os.getenv(TAXONOMY_ENV_VAR)
    if raw is None or not raw.strip():
        return DEFAULT_TAXONOMY
    key = raw.strip().lower().replace("-", "_")
    try:
        return TAXONOMIES[key]
    except KeyError:
        raise ValueError(
            f"Unknown taxonomy: {raw!r} (expected one of: {', '.join(sorted(TAXONOMIES))})"
        ) from None
