# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Provider registry.

Maps vendor tags to provider instances. Resolution never falls back to
another vendor: an unknown tag is a fatal ``unsupported_provider`` error.

Example:
    >>> registry = ProviderRegistry.with_defaults()
    >>> provider = registry.resolve("ollama")
    >>> provider.name
    'Ollama'
"""

import logging
from typing import Optional

from boardplay.core.config.llm_providers import AIProvider
from boardplay.core.config.settings import LLMSettings
from boardplay.core.errors import unsupported_provider
from boardplay.core.intelligence.llm.providers.anthropic import AnthropicProvider
from boardplay.core.intelligence.llm.providers.azure_openai import AzureOpenAIProvider
from boardplay.core.intelligence.llm.providers.base import BaseProvider
from boardplay.core.intelligence.llm.providers.bedrock import BedrockProvider
from boardplay.core.intelligence.llm.providers.google import GoogleProvider
from boardplay.core.intelligence.llm.providers.ollama import OllamaProvider
from boardplay.core.intelligence.llm.providers.openai import OpenAIProvider

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER_CLASSES: tuple[type[BaseProvider], ...] = (
    OllamaProvider,
    OpenAIProvider,
    AnthropicProvider,
    GoogleProvider,
    AzureOpenAIProvider,
    BedrockProvider,
)


class ProviderRegistry:
    """Registry of model vendors keyed by tag."""

    def __init__(self) -> None:
        self._providers: dict[str, BaseProvider] = {}

    @classmethod
    def with_defaults(cls, llm_settings: Optional[LLMSettings] = None) -> "ProviderRegistry":
        """Create a registry holding every built-in provider.

        Args:
            llm_settings: LLM settings passed to each provider.

        Returns:
            Populated registry.
        """
        registry = cls()
        for provider_cls in DEFAULT_PROVIDER_CLASSES:
            registry.register(provider_cls(llm_settings))
        return registry

    def register(self, provider: BaseProvider) -> None:
        """Register a provider.

        Raises:
            ValueError: If a provider is already registered for the tag.
        """
        tag = provider.provider.value
        if tag in self._providers:
            raise ValueError(f"Provider for '{tag}' is already registered")
        self._providers[tag] = provider
        logger.debug("Registered provider: %s", tag)

    def resolve(self, tag: AIProvider | str) -> BaseProvider:
        """Get the provider for a vendor tag.

        Args:
            tag: Vendor tag.

        Returns:
            Registered provider.

        Raises:
            GameError: With kind ``unsupported_provider`` for unknown tags.
        """
        key = tag.value if isinstance(tag, AIProvider) else str(tag)
        provider = self._providers.get(key)
        if provider is None:
            raise unsupported_provider(key)
        return provider
