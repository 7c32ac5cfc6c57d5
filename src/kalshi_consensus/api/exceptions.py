"""Errors raised by the Kalshi market-data client.

Every failure a caller can see is a `KalshiError`; the CLI turns them into a
one-line message and exit code 1.
"""

from __future__ import annotations


class KalshiError(Exception):
    """Base class for Kalshi client failures."""


class KalshiAPIError(KalshiError):
    """Kalshi answered with a non-success HTTP status."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"API Error {status_code}: {message}")


class RateLimitError(KalshiAPIError):
    """HTTP 429. `retry_after` is the server's Retry-After in seconds, when sent."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: int | None = None,
    ) -> None:
        super().__init__(429, message)
        self.retry_after = retry_after


class AuthenticationError(KalshiAPIError):
    """HTTP 401: the signing key was rejected."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(401, message)


class MarketNotFoundError(KalshiAPIError):
    """No market exists for `ticker`."""

    def __init__(self, ticker: str) -> None:
        super().__init__(404, f"Market not found: {ticker}")
        self.ticker = ticker


def _parse_retry_after(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def api_error_for_status(
    status_code: int, text: str, *, retry_after: str | None = None
) -> KalshiAPIError:
    """Map an error response (status >= 400) onto the matching exception."""
    if status_code == 429:
        return RateLimitError(text or "Rate limit exceeded", _parse_retry_after(retry_after))
    if status_code == 401:
        return AuthenticationError(text or "Authentication failed")
    return KalshiAPIError(status_code, text)
