"""Pydantic models for Kalshi API responses."""

from kalshi_consensus.api.models.event import Event
from kalshi_consensus.api.models.market import Market, MarketFilterStatus, MarketStatus

__all__ = [
    "Event",
    "Market",
    "MarketFilterStatus",
    "MarketStatus",
]
