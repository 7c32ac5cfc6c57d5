"""Provider adapter: market snapshot -> prompt -> generator -> ProviderEstimate."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from kalshi_consensus.constants import (
    DEFAULT_LLM_MAX_TOKENS,
    DEFAULT_LLM_TEMPERATURE,
    NEUTRAL_PROBABILITY,
    PROVIDER_FAILURE_CONFIDENCE,
    PROVIDER_FAILURE_REASONING,
)

from ...schemas import EstimateStatus, Provider, ProviderEstimate
from ._parser import parse_provider_response
from ._prompts import SYSTEM_PROMPT, build_analysis_prompt
from ._schemas import GenerationRequest

if TYPE_CHECKING:
    from ...schemas import MarketSnapshot
    from ...taxonomy import RecommendationTaxonomy
    from ._schemas import TextGenerator

logger = structlog.get_logger()


def provider_failure_estimate(
    provider: Provider, taxonomy: RecommendationTaxonomy
) -> ProviderEstimate:
    """Sentinel for a provider that could not be reached or is not configured."""
    return ProviderEstimate(
        provider=provider,
        estimated_probability=NEUTRAL_PROBABILITY,
        confidence=PROVIDER_FAILURE_CONFIDENCE,
        reasoning=PROVIDER_FAILURE_REASONING,
        key_factors=[],
        recommendation=taxonomy.neutral,
        status=EstimateStatus.PROVIDER_FAILED,
    )


class ProviderAdapter:
    """Ask one provider about one market.

    `analyze()` never raises (cancellation aside): transport, provider and
    configuration errors all collapse into a zero-confidence estimate.
    """

    def __init__(
        self,
        provider: Provider,
        generator: TextGenerator,
        taxonomy: RecommendationTaxonomy,
        *,
        temperature: float = DEFAULT_LLM_TEMPERATURE,
        max_tokens: int = DEFAULT_LLM_MAX_TOKENS,
    ) -> None:
        self._provider = provider
        self._generator = generator
        self._taxonomy = taxonomy
        self._temperature = temperature
        self._max_tokens = max_tokens

    @property
    def provider(self) -> Provider:
        return self._provider

    @property
    def generator(self) -> TextGenerator:
        return self._generator

    def build_request(self, market: MarketSnapshot) -> GenerationRequest:
        return GenerationRequest(
            prompt=build_analysis_prompt(market, self._taxonomy),
            system=SYSTEM_PROMPT,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )

    async def analyze(self, market: MarketSnapshot) -> ProviderEstimate:
        request = self.build_request(market)
        try:
            text = await self._generator.generate(request)
        except Exception as e:
            logger.warning(
                "Provider call failed",
                provider=self._provider.value,
                ticker=market.ticker,
                error_type=type(e).__name__,
                error=str(e),
            )
            return provider_failure_estimate(self._provider, self._taxonomy)

        return parse_provider_response(text, self._provider, self._taxonomy)
