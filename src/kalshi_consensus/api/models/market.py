"""Market data models for Kalshi API."""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MarketStatus(str, Enum):
    """Market status as returned in API responses.

    Note: Filter params use different values (MarketFilterStatus).
    """

    INITIALIZED = "initialized"
    OPEN = "open"
    ACTIVE = "active"
    INACTIVE = "inactive"
    CLOSED = "closed"
    DETERMINED = "determined"
    DISPUTED = "disputed"
    AMENDED = "amended"
    SETTLED = "settled"
    FINALIZED = "finalized"


class MarketFilterStatus(str, Enum):
    """Market status values for API filter parameters."""

    UNOPENED = "unopened"
    OPEN = "open"
    PAUSED = "paused"
    CLOSED = "closed"
    SETTLED = "settled"


def _dollars_to_cents(value: str | None) -> int | None:
    if not value:
        return None
    try:
        return int(Decimal(value) * 100)
    except InvalidOperation:
        return None


class Market(BaseModel):
    """Raw Kalshi market record (prices in integer cents)."""

    model_config = ConfigDict(frozen=True)

    ticker: str = Field(..., description="Unique market identifier")
    event_ticker: str | None = Field(default=None, description="Parent event ticker")
    series_ticker: str | None = Field(default=None, description="Parent series ticker")

    title: str = Field(..., description="Market question/title")
    subtitle: str = Field(default="", description="Additional context")
    yes_sub_title: str | None = Field(default=None, description="Label of the YES outcome")
    no_sub_title: str | None = Field(default=None, description="Label of the NO outcome")
    # Only guaranteed on event listings; flat /markets responses often omit it.
    category: str | None = None

    status: MarketStatus
    result: str = ""
    rules_primary: str | None = None

    # Fixed-point dollar strings (format: "0.4500"), preferred when present.
    yes_bid_dollars: str | None = None
    yes_ask_dollars: str | None = None
    no_bid_dollars: str | None = None
    no_ask_dollars: str | None = None
    last_price_dollars: str | None = None

    # Legacy cent prices.
    yes_bid: int | None = Field(default=None, ge=0, le=100)
    yes_ask: int | None = Field(default=None, ge=0, le=100)
    no_bid: int | None = Field(default=None, ge=0, le=100)
    no_ask: int | None = Field(default=None, ge=0, le=100)
    last_price: int | None = Field(default=None, ge=0, le=100)

    volume: int = Field(default=0, ge=0, description="Total contracts traded")
    volume_24h: int = Field(default=0, ge=0, description="24h volume")
    open_interest: int = Field(default=0, ge=0, description="Open contracts")

    open_time: datetime | None = None
    close_time: datetime
    expiration_time: datetime | None = None

    @field_validator("open_time", "close_time", "expiration_time", mode="after")
    @classmethod
    def ensure_utc_aware(cls, dt: datetime | None) -> datetime | None:
        """Normalize datetime fields to timezone-aware UTC values."""
        if dt is None:
            return None
        if dt.tzinfo is None:
            return dt.replace(tzinfo=UTC)
        return dt.astimezone(UTC)

    @field_validator("result", mode="before")
    @classmethod
    def _none_result_to_empty(cls, value: object) -> object:
        return "" if value is None else value

    @property
    def yes_bid_cents(self) -> int:
        """Get yes_bid in cents, preferring dollars field over legacy cents field."""
        cents = _dollars_to_cents(self.yes_bid_dollars)
        return cents if cents is not None else self.yes_bid or 0

    @property
    def yes_ask_cents(self) -> int:
        """Get yes_ask in cents, preferring dollars field over legacy cents field."""
        cents = _dollars_to_cents(self.yes_ask_dollars)
        return cents if cents is not None else self.yes_ask or 0

    @property
    def no_bid_cents(self) -> int:
        """Get no_bid in cents, preferring dollars field over legacy cents field."""
        cents = _dollars_to_cents(self.no_bid_dollars)
        return cents if cents is not None else self.no_bid or 0

    @property
    def no_ask_cents(self) -> int:
        """Get no_ask in cents, preferring dollars field over legacy cents field."""
        cents = _dollars_to_cents(self.no_ask_dollars)
        return cents if cents is not None else self.no_ask or 0

    @property
    def last_price_cents(self) -> int:
        """Get last_price in cents, preferring dollars field over legacy cents field."""
        cents = _dollars_to_cents(self.last_price_dollars)
        return cents if cents is not None else self.last_price or 0
