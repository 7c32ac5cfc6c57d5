"""Kalshi API clients - public (no auth) and authenticated."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from kalshi_consensus.api.auth import KalshiAuth
from kalshi_consensus.api.config import APIConfig, get_config, resolve_environment
from kalshi_consensus.api.exceptions import (
    KalshiAPIError,
    MarketNotFoundError,
    RateLimitError,
    api_error_for_status,
)
from kalshi_consensus.api.models.event import Event
from kalshi_consensus.api.models.market import Market, MarketFilterStatus
from kalshi_consensus.api.rate_limiter import RateLimiter, RateTier
from kalshi_consensus.constants import (
    DEFAULT_EVENTS_LIMIT,
    MAX_EVENTS_PAGE_LIMIT,
    MAX_MARKETS_PAGE_LIMIT,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from tenacity import RetryCallState


logger = structlog.get_logger()

_RETRY_WAIT = wait_exponential(multiplier=1, min=1, max=60)


def _wait_with_retry_after(retry_state: RetryCallState) -> float:
    """Wait using Retry-After header if available, else exponential backoff."""
    outcome = retry_state.outcome
    if outcome is not None:
        exc = outcome.exception()
        if isinstance(exc, RateLimitError) and exc.retry_after is not None:
            return float(exc.retry_after)
    return float(_RETRY_WAIT(retry_state))


def _status_param(status: MarketFilterStatus | str | None) -> str | None:
    if status is None:
        return None
    return status.value if isinstance(status, MarketFilterStatus) else status


class KalshiPublicClient:
    """
    Unauthenticated client for public Kalshi market-data endpoints.

    Use this for market research - no API keys required.
    """

    API_PATH = "/trade-api/v2"

    def __init__(
        self,
        environment: str | None = None,
        timeout: float = 30.0,
        max_retries: int = 5,
        rate_tier: str | RateTier = RateTier.BASIC,
    ) -> None:
        config = get_config()
        if environment:
            config = APIConfig(environment=resolve_environment(environment))

        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
        )
        self._max_retries = max_retries

        if isinstance(rate_tier, str):
            rate_tier = RateTier(rate_tier)
        self._rate_limiter = RateLimiter(tier=rate_tier)

    async def __aenter__(self) -> KalshiPublicClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    def _auth_headers(self, method: str, path: str) -> dict[str, str]:
        """Per-request auth headers. Public requests carry none."""
        return {}

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Make rate-limited GET request with retry.

        Returns:
            JSON response as dictionary.

        Raises:
            RateLimitError: If 429s persist past the retry budget.
            AuthenticationError: On HTTP 401.
            KalshiAPIError: On any other non-success status.
        """
        await self._rate_limiter.acquire_read()

        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(
                (
                    RateLimitError,
                    httpx.NetworkError,
                    httpx.TimeoutException,
                )
            ),
            stop=stop_after_attempt(self._max_retries),
            wait=_wait_with_retry_after,
            reraise=True,
        ):
            with attempt:
                # Signed per attempt so retries carry a fresh timestamp.
                headers = self._auth_headers("GET", self.API_PATH + path)
                response = await self._client.get(path, params=params, headers=headers)

                if response.status_code >= 400:
                    error = api_error_for_status(
                        response.status_code,
                        response.text,
                        retry_after=response.headers.get("Retry-After"),
                    )
                    if isinstance(error, RateLimitError):
                        logger.info(
                            "Kalshi rate limited", path=path, retry_after=error.retry_after
                        )
                    raise error
                result: dict[str, Any] = response.json()
                return result

        raise AssertionError("AsyncRetrying should have returned or raised")  # pragma: no cover

    # ==================== Markets ====================

    async def get_markets_page(
        self,
        status: MarketFilterStatus | str | None = MarketFilterStatus.OPEN,
        limit: int = 100,
        cursor: str | None = None,
        event_ticker: str | None = None,
    ) -> tuple[list[Market], str | None]:
        """
        Fetch a single page of markets and return the next cursor (if any).

        Note: status filter uses different values than response status field.
        Filter: unopened, open, closed, settled
        Response: active, closed, determined, finalized
        """
        params: dict[str, Any] = {"limit": max(1, min(limit, MAX_MARKETS_PAGE_LIMIT))}
        status_value = _status_param(status)
        if status_value:
            params["status"] = status_value
        if cursor:
            params["cursor"] = cursor
        if event_ticker:
            params["event_ticker"] = event_ticker

        data = await self._get("/markets", params)
        markets = [Market.model_validate(m) for m in data.get("markets") or []]
        return markets, data.get("cursor") or None

    async def get_all_markets(
        self,
        status: MarketFilterStatus | str | None = MarketFilterStatus.OPEN,
        limit: int = MAX_MARKETS_PAGE_LIMIT,
        max_pages: int | None = None,
    ) -> AsyncIterator[Market]:
        """
        Iterate through ALL markets with automatic pagination.

        Args:
            status: Filter by market status (open, closed, settled)
            limit: Page size (max 1000)
            max_pages: Optional safety limit. None = iterate until exhausted.

        Yields:
            Market objects
        """
        cursor: str | None = None
        pages = 0
        while True:
            markets, cursor = await self.get_markets_page(
                status=status,
                limit=limit,
                cursor=cursor,
            )

            for market in markets:
                yield market

            if not cursor or not markets:
                break

            pages += 1
            if max_pages is not None and pages >= max_pages:
                logger.warning(
                    "Pagination truncated: reached max_pages but cursor still present.",
                    endpoint="markets",
                    max_pages=max_pages,
                )
                break

    async def get_market(self, ticker: str) -> Market:
        """Fetch single market by ticker.

        Raises:
            ValueError: If the ticker is blank.
            MarketNotFoundError: If Kalshi has no market with this ticker.
        """
        clean_ticker = ticker.strip()
        if not clean_ticker or "/" in clean_ticker:
            raise ValueError(f"Invalid market ticker: {ticker!r}")

        try:
            data = await self._get(f"/markets/{clean_ticker}")
        except KalshiAPIError as e:
            if e.status_code == 404:
                raise MarketNotFoundError(clean_ticker) from e
            raise

        raw = data.get("market")
        if not isinstance(raw, dict):
            raise MarketNotFoundError(clean_ticker)
        return Market.model_validate(raw)

    # ==================== Events ====================

    async def get_events_page(
        self,
        status: MarketFilterStatus | str | None = MarketFilterStatus.OPEN,
        limit: int = 100,
        cursor: str | None = None,
        with_nested_markets: bool = True,
    ) -> tuple[list[Event], str | None]:
        """Fetch a single page of events and return the next cursor (if any)."""
        params: dict[str, Any] = {"limit": max(1, min(limit, MAX_EVENTS_PAGE_LIMIT))}
        status_value = _status_param(status)
        if status_value:
            params["status"] = status_value
        if cursor:
            params["cursor"] = cursor
        if with_nested_markets:
            params["with_nested_markets"] = "true"

        data = await self._get("/events", params)
        events = [Event.model_validate(e) for e in data.get("events") or []]
        return events, data.get("cursor") or None

    async def get_events(
        self,
        limit: int = DEFAULT_EVENTS_LIMIT,
        status: MarketFilterStatus | str | None = MarketFilterStatus.OPEN,
    ) -> list[Event]:
        """Fetch the first page of events, each with its nested markets."""
        events, _ = await self.get_events_page(status=status, limit=limit)
        return events

    async def get_all_events(
        self,
        status: MarketFilterStatus | str | None = MarketFilterStatus.OPEN,
        limit: int = MAX_EVENTS_PAGE_LIMIT,
        max_pages: int | None = None,
        with_nested_markets: bool = True,
    ) -> AsyncIterator[Event]:
        """
        Iterate through ALL events with automatic pagination.

        Args:
            status: Filter by event status
            limit: Page size (max 200 for events endpoint)
            max_pages: Optional safety limit. None = iterate until exhausted.
            with_nested_markets: Include each event's markets in the response.

        Yields:
            Event objects
        """
        cursor: str | None = None
        pages = 0
        while True:
            events, cursor = await self.get_events_page(
                status=status,
                limit=limit,
                cursor=cursor,
                with_nested_markets=with_nested_markets,
            )

            for event in events:
                yield event

            if not cursor or not events:
                break

            pages += 1
            if max_pages is not None and pages >= max_pages:
                logger.warning(
                    "Pagination truncated: reached max_pages but cursor still present.",
                    endpoint="events",
                    max_pages=max_pages,
                )
                break


class KalshiClient(KalshiPublicClient):
    """
    Authenticated client: every request is signed with the configured RSA key.

    IMPORTANT: Auth signing requires the FULL path including /trade-api/v2 prefix.
    The signature is computed over: timestamp + method + full_path (without query params).
    """

    def __init__(
        self,
        key_id: str,
        private_key_path: str | None = None,
        private_key_b64: str | None = None,
        environment: str | None = None,
        timeout: float = 30.0,
        max_retries: int = 5,
        rate_tier: str | RateTier = RateTier.BASIC,
        *,
        auth: KalshiAuth | None = None,
    ) -> None:
        super().__init__(
            environment=environment,
            timeout=timeout,
            max_retries=max_retries,
            rate_tier=rate_tier,
        )
        self._auth = auth or KalshiAuth(
            key_id, private_key_path=private_key_path, private_key_b64=private_key_b64
        )

    async def __aenter__(self) -> KalshiClient:
        return self

    def _auth_headers(self, method: str, path: str) -> dict[str, str]:
        return self._auth.get_headers(method, path)
