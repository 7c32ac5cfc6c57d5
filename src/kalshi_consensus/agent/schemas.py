"""Shared Pydantic schemas for consensus analysis I/O.

These models are the normalized, immutable records that flow between the Kalshi
boundary, the per-provider adapters, and the consensus engine.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Provider(str, Enum):
    """Text-generation providers consulted for every market, in fixed consensus order."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"


class Recommendation(str, Enum):
    """Every action a provider or the consensus can express.

    A `RecommendationTaxonomy` selects the subset in use.
    """

    STRONG_BUY_YES = "strong_buy_yes"
    BUY_YES = "buy_yes"
    HOLD = "hold"
    SKIP = "skip"
    BUY_NO = "buy_no"
    STRONG_BUY_NO = "strong_buy_no"

    @property
    def is_neutral(self) -> bool:
        """True for the no-action values (hold / skip)."""
        return self in (Recommendation.HOLD, Recommendation.SKIP)

    @property
    def favors_yes(self) -> bool:
        return self in (Recommendation.STRONG_BUY_YES, Recommendation.BUY_YES)

    @property
    def favors_no(self) -> bool:
        return self in (Recommendation.STRONG_BUY_NO, Recommendation.BUY_NO)


class EstimateStatus(str, Enum):
    """How a provider estimate was obtained."""

    OK = "ok"
    PARSE_FAILED = "parse_failed"  # provider replied, but without usable JSON
    PROVIDER_FAILED = "provider_failed"  # provider unreachable or misconfigured


def _clamp_unit(value: float) -> float:
    return min(1.0, max(0.0, value))


class MarketSnapshot(BaseModel):
    """A market at fetch time, with every price normalized to a [0, 1] fraction."""

    model_config = ConfigDict(frozen=True)

    ticker: str
    title: str
    subtitle: str | None = None
    yes_sub_title: str | None = None
    no_sub_title: str | None = None
    event_ticker: str | None = None
    category: str = "Unknown"
    status: str

    # Bid <= ask is expected but not guaranteed upstream; never enforced here.
    yes_bid: float = Field(ge=0.0, le=1.0)
    yes_ask: float = Field(ge=0.0, le=1.0)
    no_bid: float = Field(ge=0.0, le=1.0)
    no_ask: float = Field(ge=0.0, le=1.0)
    last_price: float = Field(default=0.0, ge=0.0, le=1.0)

    volume: int = Field(default=0, ge=0)
    volume_24h: int = Field(default=0, ge=0)
    open_interest: int = Field(default=0, ge=0)
    close_time: datetime
    result: str | None = None
    rules_primary: str | None = None

    @field_validator("close_time", mode="after")
    @classmethod
    def ensure_utc_aware(cls, dt: datetime) -> datetime:
        """Normalize to timezone-aware UTC."""
        if dt.tzinfo is None:
            return dt.replace(tzinfo=UTC)
        return dt.astimezone(UTC)

    @property
    def implied_probability(self) -> float:
        """Market-implied YES probability: midpoint of the YES bid and ask."""
        return (self.yes_bid + self.yes_ask) / 2

    @property
    def outcome_label(self) -> str | None:
        """Most specific human label for the YES outcome, if any."""
        return self.yes_sub_title or self.subtitle or None


class EventSnapshot(BaseModel):
    """An event with its nested markets (the category source for every market)."""

    model_config = ConfigDict(frozen=True)

    event_ticker: str
    series_ticker: str = ""
    title: str
    subtitle: str | None = None
    category: str = "Unknown"
    markets: list[MarketSnapshot] = Field(default_factory=list)

    @property
    def total_volume(self) -> int:
        return sum(m.volume for m in self.markets)

    @property
    def total_volume_24h(self) -> int:
        return sum(m.volume_24h for m in self.markets)


class ProviderEstimate(BaseModel):
    """One provider's opinion on one market."""

    model_config = ConfigDict(frozen=True)

    provider: Provider
    estimated_probability: float = Field(description="Estimated YES probability (0..1)")
    confidence: float = Field(description="Provider confidence (0..1)")
    reasoning: str
    key_factors: list[str] = Field(default_factory=list)
    recommendation: Recommendation
    status: EstimateStatus = EstimateStatus.OK

    @field_validator("estimated_probability", "confidence", mode="after")
    @classmethod
    def clamp_to_unit_interval(cls, value: float) -> float:
        """Clamp into [0, 1] regardless of what the provider returned."""
        return _clamp_unit(value)


class ConsensusResult(BaseModel):
    """Aggregate of every configured provider's estimate for one market."""

    model_config = ConfigDict(frozen=True)

    market: MarketSnapshot
    analyses: list[ProviderEstimate] = Field(description="One estimate per provider, fixed order")
    consensus_probability: float
    consensus_confidence: float
    implied_probability: float
    edge_percentage: float = Field(description="Signed edge in percentage points")
    recommendation: Recommendation
    mispricing_score: float = Field(ge=0.0)
    analyzed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def ticker(self) -> str:
        return self.market.ticker

    @property
    def has_signal(self) -> bool:
        """False when no provider contributed any confidence."""
        return self.consensus_confidence > 0

    @property
    def failed_providers(self) -> list[Provider]:
        """Providers whose estimate is a failure sentinel."""
        return [a.provider for a in self.analyses if a.status is not EstimateStatus.OK]
