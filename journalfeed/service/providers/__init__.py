"""Summary providers (hot-swappable AI backends)."""

from .base import ProviderInfo, SummaryProvider
from .litellm_provider import (
    ClaudeProvider,
    GeminiProvider,
    LiteLLMSummaryProvider,
    OpenAIProvider,
    normalize_response,
)
from .registry import ProviderRegistry

__all__ = [
    "ProviderInfo",
    "SummaryProvider",
    "LiteLLMSummaryProvider",
    "ClaudeProvider",
    "OpenAIProvider",
    "GeminiProvider",
    "normalize_response",
    "ProviderRegistry",
]
