"""Response parser: raw provider text -> normalized ProviderEstimate.

Never raises. Replies without usable JSON become a low-confidence sentinel so a
single malformed reply cannot abort the surrounding fan-out.
"""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from kalshi_consensus.constants import (
    NEUTRAL_PROBABILITY,
    PARSE_FAILURE_CONFIDENCE,
    PARSE_FAILURE_REASONING,
)

from ...schemas import EstimateStatus, Provider, ProviderEstimate
from ._schemas import ProviderReply

if TYPE_CHECKING:
    from ...taxonomy import RecommendationTaxonomy

logger = structlog.get_logger()

# Greedy: first "{" through last "}" so nested objects stay intact.
_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def extract_json_object(text: str) -> dict[str, Any] | None:
    """Return the JSON object embedded in `text`, or None if there is no valid one."""
    match = _JSON_OBJECT_RE.search(text)
    if match is None:
        return None
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    if not isinstance(parsed, dict):
        return None
    return parsed


def parse_failure_estimate(
    provider: Provider, taxonomy: RecommendationTaxonomy
) -> ProviderEstimate:
    """Sentinel for a reply that carried no parseable JSON."""
    return ProviderEstimate(
        provider=provider,
        estimated_probability=NEUTRAL_PROBABILITY,
        confidence=PARSE_FAILURE_CONFIDENCE,
        reasoning=PARSE_FAILURE_REASONING,
        key_factors=[],
        recommendation=taxonomy.neutral,
        status=EstimateStatus.PARSE_FAILED,
    )


def parse_provider_response(
    text: str,
    provider: Provider,
    taxonomy: RecommendationTaxonomy,
) -> ProviderEstimate:
    """Parse a provider's raw reply into a ProviderEstimate."""
    payload = extract_json_object(text or "")
    if payload is None:
        logger.warning("Provider reply had no parseable JSON", provider=provider.value)
        return parse_failure_estimate(provider, taxonomy)

    try:
        reply = ProviderReply.model_validate(payload)
    except ValidationError as e:
        logger.warning("Provider reply failed validation", provider=provider.value, error=str(e))
        return parse_failure_estimate(provider, taxonomy)

    return ProviderEstimate(
        provider=provider,
        estimated_probability=reply.estimated_probability / 100,
        confidence=reply.confidence / 100,
        reasoning=reply.reasoning,
        key_factors=list(reply.key_factors) if taxonomy.include_key_factors else [],
        recommendation=taxonomy.normalize_provider_action(reply.recommendation),
        status=EstimateStatus.OK,
    )
