"""
Rate limiting for Kalshi API reads.

Implements a token bucket per tier; this package only issues read requests.
"""

import asyncio
import time
from enum import Enum

import structlog

logger = structlog.get_logger()


class RateTier(str, Enum):
    """Kalshi API rate limit tiers."""

    BASIC = "basic"
    ADVANCED = "advanced"
    PREMIER = "premier"
    PRIME = "prime"


# Reads per second allowed by each tier.
TIER_READ_LIMITS: dict[RateTier, int] = {
    RateTier.BASIC: 20,
    RateTier.ADVANCED: 30,
    RateTier.PREMIER: 100,
    RateTier.PRIME: 400,
}


class TokenBucket:
    """
    Token bucket rate limiter for smooth request throttling.
    """

    def __init__(self, tokens_per_second: float, burst_size: float | None = None) -> None:
        if tokens_per_second <= 0:
            raise ValueError("tokens_per_second must be positive")
        self._rate = tokens_per_second
        self._max_tokens = burst_size or tokens_per_second
        self._tokens = float(self._max_tokens)
        self._last_update = time.monotonic()
        self._lock = asyncio.Lock()

    async def acquire(self, tokens: float = 1.0) -> None:
        """
        Acquire tokens, waiting if necessary.

        Args:
            tokens: Number of tokens to acquire.
        """
        async with self._lock:
            now = time.monotonic()
            elapsed = now - self._last_update
            self._tokens = min(
                self._max_tokens,
                self._tokens + elapsed * self._rate,
            )
            self._last_update = now

            if self._tokens < tokens:
                wait_time = (tokens - self._tokens) / self._rate
                if wait_time > 0.1:  # Only log significant waits
                    logger.debug("Rate limit wait", wait_seconds=wait_time)
                await asyncio.sleep(wait_time)
                self._tokens = 0.0
                self._last_update = time.monotonic()
            else:
                self._tokens -= tokens


class RateLimiter:
    """
    Read-side rate limiting for Kalshi API requests.
    """

    def __init__(
        self,
        tier: RateTier = RateTier.BASIC,
        safety_margin: float = 0.9,  # Use 90% of limit
    ) -> None:
        """
        Initialize rate limiter.

        Args:
            tier: User's rate limit tier
            safety_margin: Fraction of limit to use (0.9 = 90%)
        """
        self._tier = tier
        read_limit = TIER_READ_LIMITS[tier] * safety_margin
        self._read_bucket = TokenBucket(read_limit)

        logger.debug("Rate limiter initialized", tier=tier.value, read_limit=read_limit)

    async def acquire_read(self) -> None:
        """Acquire permission for a read operation."""
        await self._read_bucket.acquire(1.0)

    @property
    def tier(self) -> RateTier:
        """Return the configured Kalshi rate limit tier."""
        return self._tier
