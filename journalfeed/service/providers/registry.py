"""Provider registry: pick a summary backend by id at call time."""

from __future__ import annotations

from typing import Dict, List, Optional, Type

from journalfeed.config import Config, Settings
from journalfeed.errors import ConfigurationError
from .base import ProviderInfo, SummaryProvider
from .litellm_provider import ClaudeProvider, GeminiProvider, OpenAIProvider


_PROVIDER_CLASSES: Dict[str, Type[SummaryProvider]] = {
    "claude": ClaudeProvider,
    "openai": OpenAIProvider,
    "gemini": GeminiProvider,
}


class ProviderRegistry:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        providers: Optional[Dict[str, SummaryProvider]] = None,
        default: Optional[str] = None,
    ):
        settings = settings or Config
        if providers is None:
            providers = {
                name: cls(getattr(settings.providers, name))
                for name, cls in _PROVIDER_CLASSES.items()
            }
        self._providers = providers
        self._default = (default or settings.ai_provider).lower().strip()

    def get(self, name: Optional[str] = None) -> SummaryProvider:
        """
        Resolve a provider id (None -> configured default).

        Raises:
            ConfigurationError: unknown provider id
        """
        key = (name or self._default).lower().strip()
        provider = self._providers.get(key)
        if provider is None:
            supported = ", ".join(sorted(self._providers))
            raise ConfigurationError(f"Unsupported AI provider: {key}. Supported: {supported}")
        return provider

    def get_available_providers(self) -> List[ProviderInfo]:
        """Providers whose credential is configured."""
        return [p.info() for _, p in sorted(self._providers.items()) if p.is_configured]

    def get_current_provider(self) -> str:
        return self._default
