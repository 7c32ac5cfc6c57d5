"""Kalshi API client module."""

from kalshi_consensus.api.auth import KalshiAuth
from kalshi_consensus.api.client import KalshiClient, KalshiPublicClient
from kalshi_consensus.api.exceptions import (
    AuthenticationError,
    KalshiAPIError,
    KalshiError,
    MarketNotFoundError,
    RateLimitError,
)
from kalshi_consensus.api.models import Event, Market, MarketFilterStatus, MarketStatus

__all__ = [
    # Clients
    "KalshiAuth",
    "KalshiClient",
    "KalshiPublicClient",
    # Exceptions
    "AuthenticationError",
    "KalshiAPIError",
    "KalshiError",
    "MarketNotFoundError",
    "RateLimitError",
    # Models
    "Event",
    "Market",
    "MarketFilterStatus",
    "MarketStatus",
]
