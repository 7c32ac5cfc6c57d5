"""
Kalshi Consensus.

Multi-model consensus scoring for Kalshi prediction markets: several LLM providers estimate
each market independently and their confidence-weighted consensus is ranked against the price.
"""

__version__ = "0.1.0"

from kalshi_consensus.api import KalshiClient, KalshiPublicClient
from kalshi_consensus.api.config import Environment

# Configure structlog once at import time (quiet by default).
from kalshi_consensus.logging import configure_structlog

configure_structlog()

__all__ = [
    "Environment",
    "KalshiClient",
    "KalshiPublicClient",
    "__version__",
]
