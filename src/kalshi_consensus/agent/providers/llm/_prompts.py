"""System and analysis prompts for per-provider market estimates."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...schemas import MarketSnapshot
    from ...taxonomy import RecommendationTaxonomy

SYSTEM_PROMPT = (
    "You are an expert prediction market analyst. "
    "Provide precise probability estimates based on available evidence."
)

ANALYSIS_PROMPT_TEMPLATE = """Analyze this prediction market and estimate the TRUE probability of the outcome.

Market: {title}
{details_line}Category: {category}
Current Market Implied Probability: {implied_pct}%
Market Closes: {close_date}
{rules_line}
Based on your knowledge of current events, historical patterns, and relevant data:

1. What is your estimated TRUE probability (0-100%) that this outcome will occur?
2. How confident are you in this estimate (0-100%)?
{factors_question}{recommendation_number}. Based on the difference between your estimate and market price, what is your recommendation?

IMPORTANT: Respond in this exact JSON format:
{{
  "estimatedProbability": <number 0-100>,
  "confidence": <number 0-100>,
  "reasoning": "<brief explanation>",
{factors_field}  "recommendation": "<{vocabulary}>"
}}

Be analytical and consider:
- Base rates and historical precedent
- Current news and developments
- Potential for surprise outcomes
- Time remaining until resolution"""


def build_analysis_prompt(market: MarketSnapshot, taxonomy: RecommendationTaxonomy) -> str:
    """Render the analysis prompt for one market under the given taxonomy."""
    label = market.outcome_label
    details_line = f"Details: {label}\n" if label else ""
    rules_line = f"Rules: {market.rules_primary}\n" if market.rules_primary else ""

    if taxonomy.include_key_factors:
        factors_question = "3. What are the key factors influencing this probability?\n"
        factors_field = '  "keyFactors": ["<factor1>", "<factor2>", "<factor3>"],\n'
        recommendation_number = 4
    else:
        factors_question = ""
        factors_field = ""
        recommendation_number = 3

    return ANALYSIS_PROMPT_TEMPLATE.format(
        title=market.title,
        details_line=details_line,
        category=market.category,
        implied_pct=f"{market.implied_probability * 100:.1f}",
        close_date=market.close_time.date().isoformat(),
        rules_line=rules_line,
        factors_question=factors_question,
        recommendation_number=recommendation_number,
        factors_field=factors_field,
        vocabulary=taxonomy.provider_vocabulary(),
    )
