"""Text-generation providers consulted for per-market probability estimates.

- `OpenAIGenerator`, `ClaudeGenerator` and `GeminiGenerator` wrap the vendor SDKs.
- `MockGenerator` stays available for tests/CI and offline runs.
- `ProviderAdapter` turns any generator into a failure-isolated estimator.
"""

from __future__ import annotations

from ._adapter import ProviderAdapter, provider_failure_estimate
from ._claude import ClaudeGenerator
from ._factory import build_adapters, get_generator, resolve_backend
from ._gemini import GeminiGenerator
from ._mock import MockGenerator
from ._openai import OpenAIGenerator
from ._parser import extract_json_object, parse_failure_estimate, parse_provider_response
from ._prompts import SYSTEM_PROMPT, build_analysis_prompt
from ._schemas import (
    GenerationRequest,
    ProviderConfigurationError,
    ProviderReply,
    TextGenerator,
)

__all__ = [
    "SYSTEM_PROMPT",
    "ClaudeGenerator",
    "GeminiGenerator",
    "GenerationRequest",
    "MockGenerator",
    "OpenAIGenerator",
    "ProviderAdapter",
    "ProviderConfigurationError",
    "ProviderReply",
    "TextGenerator",
    "build_adapters",
    "build_analysis_prompt",
    "extract_json_object",
    "get_generator",
    "parse_failure_estimate",
    "parse_provider_response",
    "provider_failure_estimate",
    "resolve_backend",
]
