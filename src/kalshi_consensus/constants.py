"""Centralized policy constants for the Kalshi Consensus platform.

Named constants for the policy-encoding literals shared by the API layer, the
LLM adapters, the consensus engine, and the CLI. Keeping them in one place makes
thresholds easy to audit and prevents the same concept drifting between modules.
"""

from __future__ import annotations

# =============================================================================
# Pagination & Fetch Limits
# =============================================================================

# Default page size for paginated market listings.
#
# Used by:
# - agent/providers/kalshi.py: fetch_markets_page()
# - cli/market.py: markets command
DEFAULT_MARKETS_LIMIT: int = 50

# Default page size for event listings with nested markets.
#
# Used by:
# - agent/providers/kalshi.py: fetch_event_snapshots()
# - cli/analyze.py: scan command
#
# The events endpoint caps a page at 200.
DEFAULT_EVENTS_LIMIT: int = 20
MAX_EVENTS_PAGE_LIMIT: int = 200

# 1000 is the Kalshi API max page size for /markets.
MAX_MARKETS_PAGE_LIMIT: int = 1000

# =============================================================================
# LLM Sampling
# =============================================================================

# Sampling settings sent to every text-generation provider.
#
# Used by:
# - agent/providers/llm/_adapter.py: ProviderAdapter
#
# Low temperature favors repeatable estimates; 1000 tokens is ample for the
# JSON reply the prompt asks for.
DEFAULT_LLM_TEMPERATURE: float = 0.3
DEFAULT_LLM_MAX_TOKENS: int = 1000

# Per-request timeout (seconds) for text-generation providers.
DEFAULT_LLM_TIMEOUT_SECONDS: float = 60.0

# =============================================================================
# Sentinel Estimates
# =============================================================================

# Values substituted when a provider cannot produce a usable estimate.
#
# Used by:
# - agent/providers/llm/_parser.py: reply without parseable JSON
# - agent/providers/llm/_adapter.py: provider unreachable / misconfigured
#
# A parse failure keeps a small nonzero confidence; an unreachable provider
# carries none.
NEUTRAL_PROBABILITY: float = 0.5
PARSE_FAILURE_CONFIDENCE: float = 0.2
PROVIDER_FAILURE_CONFIDENCE: float = 0.0

PARSE_FAILURE_REASONING: str = "Failed to parse AI response"
PROVIDER_FAILURE_REASONING: str = "API error occurred"
MISSING_REASONING: str = "No reasoning provided"

# =============================================================================
# Recommendation Thresholds (percentage points of edge)
# =============================================================================

# Five-way taxonomy: strong_buy_* beyond 15pp, buy_* beyond 5pp, and a
# consensus-confidence floor of 0.3 below which the result is forced to hold.
#
# Used by:
# - agent/taxonomy.py: FIVE_WAY
FIVE_WAY_STRONG_EDGE: float = 15.0
FIVE_WAY_EDGE: float = 5.0
FIVE_WAY_CONFIDENCE_FLOOR: float = 0.3

# Three-way taxonomy: buy_* beyond 10pp, skip otherwise.
#
# Used by:
# - agent/taxonomy.py: THREE_WAY
THREE_WAY_EDGE: float = 10.0

# =============================================================================
# Batch Scanning
# =============================================================================

# Markets analyzed concurrently per batch, and the pause between batches.
#
# Used by:
# - analysis/scanner.py: BatchScanner
#
# Batch size matches the provider fan-out width so at most 3 x 3 LLM calls are
# in flight at once; the delay is a coarse guard for provider rate limits.
DEFAULT_SCAN_BATCH_SIZE: int = 3
DEFAULT_SCAN_DELAY_SECONDS: float = 1.0

# Number of top-by-volume markets a CLI scan analyzes.
#
# Used by:
# - analysis/markets.py: select_scan_candidates()
# - cli/analyze.py: scan command
DEFAULT_SCAN_CANDIDATES: int = 10

# =============================================================================
# Market Filters & Top Picks
# =============================================================================

# Minimum total volume for a market to count as "high volume".
#
# Used by:
# - analysis/markets.py: filter_high_volume_markets()
DEFAULT_MIN_VOLUME: int = 100

# Top picks keep the best `TOP_PICKS_LIMIT` results whose absolute edge exceeds
# `TOP_PICKS_MIN_EDGE` percentage points.
#
# Used by:
# - analysis/top_picks.py: TopPicks
TOP_PICKS_LIMIT: int = 10
TOP_PICKS_MIN_EDGE: float = 3.0
