"""Factory functions for constructing Kalshi API clients.

CLI commands build clients only through this module, so tests can patch a
single place.
"""

from kalshi_consensus.api import KalshiClient, KalshiPublicClient
from kalshi_consensus.api.credentials import resolve_kalshi_auth_env
from kalshi_consensus.api.rate_limiter import RateTier


def public_client(
    *,
    environment: str | None = None,
    timeout: float = 30.0,
    max_retries: int = 5,
    rate_tier: str | RateTier = RateTier.BASIC,
) -> KalshiPublicClient:
    """Create a KalshiPublicClient with consistent defaults.

    Args:
        environment: Override global environment (demo or prod). If None, uses .env.
        timeout: Request timeout in seconds.
        max_retries: Maximum number of retry attempts on transient failures.
        rate_tier: API rate limit tier (basic/advanced/premier/prime).

    Returns:
        Configured KalshiPublicClient instance (use as async context manager).
    """
    return KalshiPublicClient(
        environment=environment,
        timeout=timeout,
        max_retries=max_retries,
        rate_tier=rate_tier,
    )


def authed_client(
    *,
    key_id: str,
    private_key_path: str | None = None,
    private_key_b64: str | None = None,
    environment: str | None = None,
    timeout: float = 30.0,
    max_retries: int = 5,
    rate_tier: str | RateTier = RateTier.BASIC,
) -> KalshiClient:
    """Create a KalshiClient (every request signed) with consistent defaults."""
    return KalshiClient(
        key_id=key_id,
        private_key_path=private_key_path,
        private_key_b64=private_key_b64,
        environment=environment,
        timeout=timeout,
        max_retries=max_retries,
        rate_tier=rate_tier,
    )


def market_client(*, environment: str | None = None) -> KalshiPublicClient:
    """Signed client when credentials resolve from the environment, else the public one."""
    key_id, private_key_path, private_key_b64 = resolve_kalshi_auth_env(environment=environment)
    if key_id and (private_key_path or private_key_b64):
        return authed_client(
            key_id=key_id,
            private_key_path=private_key_path,
            private_key_b64=private_key_b64,
            environment=environment,
        )
    return public_client(environment=environment)
