"""Market-data and text-generation providers for consensus analysis."""

from .kalshi import (
    event_snapshot_from_api,
    fetch_event_snapshots,
    fetch_market_snapshot,
    fetch_markets_page,
    flatten_markets,
    market_snapshot_from_api,
)
from .llm import (
    ClaudeGenerator,
    GeminiGenerator,
    MockGenerator,
    OpenAIGenerator,
    ProviderAdapter,
    ProviderConfigurationError,
    TextGenerator,
    build_adapters,
    get_generator,
    parse_provider_response,
)

__all__ = [
    "ClaudeGenerator",
    "GeminiGenerator",
    "MockGenerator",
    "OpenAIGenerator",
    "ProviderAdapter",
    "ProviderConfigurationError",
    "TextGenerator",
    "build_adapters",
    "event_snapshot_from_api",
    "fetch_event_snapshots",
    "fetch_market_snapshot",
    "fetch_markets_page",
    "flatten_markets",
    "get_generator",
    "market_snapshot_from_api",
    "parse_provider_response",
]
