# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Backend factory and cache.

The factory turns a ProviderConfig into an LLMBackend and memoizes the
result under a configuration fingerprint. The fingerprint records only
whether each secret is present, never its value, so two configurations
that differ only in a secret share one backend. Whoever changes
credentials outside the factory must call clear_cache().

Example:
    >>> factory = get_llm_factory()
    >>> backend = factory.get_current_backend(config)
    >>> text = await backend.invoke(prompt)
"""

import json
import logging
import threading
from typing import Optional

from boardplay.core.config.llm_providers import SECRET_FIELDS, ProviderConfig, ValidationResult
from boardplay.core.config.settings import LLMSettings, get_settings
from boardplay.core.errors import GameError
from boardplay.core.intelligence.llm.client import LLMBackend
from boardplay.core.intelligence.llm.providers.base import BaseProvider
from boardplay.core.intelligence.llm.providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)


def cache_key(config: ProviderConfig, temperature: float) -> str:
    """Build the deterministic cache fingerprint of a configuration.

    Args:
        config: Provider configuration.
        temperature: Sampling temperature.

    Returns:
        JSON string of routing fields plus presence flags for secrets.
    """
    fingerprint: dict[str, object] = {
        "provider": config.provider.value,
        "model": config.model,
        "temperature": temperature,
        "url": config.url,
        "region": config.region,
        "azureInstance": config.azure_instance,
        "azureDeployment": config.azure_deployment,
        "azureApiVersion": config.azure_api_version,
        "crossRegion": config.cross_region,
    }
    for name in SECRET_FIELDS:
        fingerprint[name] = "present" if config.has_secret(name) else "missing"
    return json.dumps(fingerprint, sort_keys=True)


class LLMFactory:
    """Builds and caches model backends.

    Lookups and clear_cache() are safe across threads. Clearing swaps in
    a fresh map, so backends already handed out keep working.

    Attributes:
        registry: Vendor registry used to resolve providers.
    """

    def __init__(
        self,
        registry: Optional[ProviderRegistry] = None,
        llm_settings: Optional[LLMSettings] = None,
    ):
        """Initialize the factory.

        Args:
            registry: Vendor registry. Built-in providers if None.
            llm_settings: LLM settings. Uses get_settings().llm if None.
        """
        self._settings = llm_settings or get_settings().llm
        self.registry = registry or ProviderRegistry.with_defaults(self._settings)
        self._cache: dict[str, LLMBackend] = {}
        self._lock = threading.Lock()

    def resolve_provider(self, config: ProviderConfig) -> BaseProvider:
        """Get the provider for a configuration.

        Raises:
            GameError: With kind ``unsupported_provider``.
        """
        return self.registry.resolve(config.provider)

    def create(self, config: ProviderConfig, temperature: Optional[float] = None) -> LLMBackend:
        """Get a cached backend for a configuration, building it on first use.

        Args:
            config: Provider configuration.
            temperature: Sampling temperature. Falls back to settings.

        Returns:
            Shared LLMBackend.

        Raises:
            GameError: With kind ``unsupported_provider``.
        """
        temp = self._settings.temperature if temperature is None else temperature
        key = cache_key(config, temp)

        with self._lock:
            backend = self._cache.get(key)
            if backend is not None:
                logger.debug("Backend cache hit: provider=%s, model=%s", config.provider.value, config.model)
                return backend

            backend = self.resolve_provider(config).build_backend(config, temp)
            self._cache[key] = backend

        logger.info(
            "Created backend: provider=%s, model=%s, temperature=%.2f",
            config.provider.value,
            config.model,
            temp,
        )
        return backend

    def create_ephemeral(
        self, config: ProviderConfig, temperature: Optional[float] = None
    ) -> LLMBackend:
        """Build an uncached backend, e.g. for connection tests.

        Args:
            config: Provider configuration.
            temperature: Sampling temperature. Falls back to the test temperature.

        Returns:
            New LLMBackend, not stored in the cache.
        """
        temp = self._settings.test_temperature if temperature is None else temperature
        return self.resolve_provider(config).build_backend(config, temp)

    def get_current_backend(self, config: ProviderConfig) -> LLMBackend:
        """Get the backend used for move generation."""
        return self.create(config, self._settings.temperature)

    def clear_cache(self) -> None:
        """Forget all cached backends. Only future lookups are affected."""
        with self._lock:
            count = len(self._cache)
            self._cache = {}
        logger.debug("Cleared backend cache (%d entries)", count)

    def cache_size(self) -> int:
        """Get the number of cached backends."""
        with self._lock:
            return len(self._cache)

    def validate_config(self, config: ProviderConfig) -> ValidationResult:
        """Validate a configuration locally.

        Never raises: an unsupported vendor becomes an invalid result.
        """
        try:
            provider = self.resolve_provider(config)
        except GameError as e:
            return ValidationResult.failure(e.message)
        return provider.validate_config(config)

    async def test_connection(self, config: ProviderConfig) -> ValidationResult:
        """Make one live call with a configuration.

        The call goes through an uncached backend so a failed test never
        leaves a client in the cache. Never raises: failures are returned
        as an invalid result.
        """
        try:
            provider = self.resolve_provider(config)
        except GameError as e:
            return ValidationResult.failure(e.message)
        return await provider.test_connection(config, backend=self.create_ephemeral(config))

    async def validate_and_test(self, config: ProviderConfig) -> ValidationResult:
        """Validate locally, then test the connection if validation passed.

        Warnings from both phases are kept, local ones first.

        Args:
            config: Provider configuration.

        Returns:
            ValidationResult of the first failing phase, or of the test.
        """
        validation = self.validate_config(config)
        if not validation.valid:
            return validation
        return await self.test_connection(config)


_llm_factory: Optional[LLMFactory] = None


def get_llm_factory() -> LLMFactory:
    """Get the process backend factory, creating it on first use."""
    global _llm_factory
    if _llm_factory is None:
        _llm_factory = LLMFactory()
    return _llm_factory


def reset_llm_factory() -> None:
    """Drop the process backend factory and its cache (for testing)."""
    global _llm_factory
    _llm_factory = None
