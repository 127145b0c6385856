# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Base class for model vendors.

A provider knows three things about its vendor:

- which configuration fields are required and how credentials look
  (validate_config, local and side-effect free)
- how to turn a configuration into LiteLLM parameters (build_backend)
- how to prove the configuration works (test_connection, one live call)
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from boardplay.core.config.llm_providers import AIProvider, ProviderConfig, ValidationResult
from boardplay.core.config.settings import LLMSettings, get_settings
from boardplay.core.intelligence.llm.client import LLMBackend

logger = logging.getLogger(__name__)

TEST_PROMPT = "Test connection"

_url_adapter = TypeAdapter(AnyHttpUrl)


class BaseProvider(ABC):
    """Abstract base class for model vendors.

    Subclasses declare their required fields and LiteLLM mapping, and may
    add vendor-specific checks via _check_config() and extra connection
    warnings via _preflight().

    Attributes:
        provider: Vendor tag.
        name: Display name.
        required_fields: (attribute, label) pairs that must be non-blank.
    """

    provider: AIProvider
    name: str
    required_fields: tuple[tuple[str, str], ...] = ()

    def __init__(self, llm_settings: Optional[LLMSettings] = None):
        """Initialize the provider.

        Args:
            llm_settings: LLM settings. Uses get_settings().llm if None.
        """
        self._settings = llm_settings or get_settings().llm

    # =========================================================================
    # LiteLLM mapping
    # =========================================================================

    @abstractmethod
    def litellm_model(self, config: ProviderConfig) -> str:
        """Get the LiteLLM model string for a configuration."""
        ...

    @abstractmethod
    def litellm_params(self, config: ProviderConfig) -> dict[str, Any]:
        """Get keyword parameters passed to acompletion() on every call."""
        ...

    def build_backend(self, config: ProviderConfig, temperature: float) -> LLMBackend:
        """Construct a backend for a configuration.

        Args:
            config: Provider configuration.
            temperature: Sampling temperature.

        Returns:
            A new LLMBackend.
        """
        return LLMBackend(
            model=self.litellm_model(config),
            params=self.litellm_params(config),
            temperature=temperature,
            max_tokens=self._settings.max_tokens,
            timeout=self._settings.request_timeout,
            num_retries=self._settings.transport_retries,
            provider=self.provider.value,
        )

    # =========================================================================
    # Validation
    # =========================================================================

    def validate_config(self, config: ProviderConfig) -> ValidationResult:
        """Validate a configuration without any network access.

        Args:
            config: Provider configuration.

        Returns:
            ValidationResult listing every problem found.
        """
        errors: list[str] = []
        warnings: list[str] = []

        for attr, label in self.required_fields:
            error = self._validate_required(self._field_value(config, attr), label)
            if error:
                errors.append(error)

        self._check_config(config, errors, warnings)

        if errors:
            return ValidationResult.failure(errors, warnings)
        return ValidationResult.success(warnings)

    def _check_config(
        self, config: ProviderConfig, errors: list[str], warnings: list[str]
    ) -> None:
        """Vendor-specific checks. Append to errors or warnings in place."""

    async def test_connection(
        self, config: ProviderConfig, backend: Optional[LLMBackend] = None
    ) -> ValidationResult:
        """Validate locally, then make one live call.

        Network and SDK failures are returned as an invalid result; no
        exception escapes. No I/O happens when local validation fails.

        Args:
            config: Provider configuration.
            backend: Uncached backend for the live call. Built at the test
                temperature if None.

        Returns:
            ValidationResult with local and pre-flight warnings merged.
        """
        validation = self.validate_config(config)
        if not validation.valid:
            return validation

        try:
            warnings = await self._preflight(config)
            if backend is None:
                backend = self.build_backend(config, self._settings.test_temperature)
            await backend.invoke(TEST_PROMPT)
        except Exception as e:
            logger.warning(
                "Connection test failed: provider=%s, model=%s, error=%s",
                self.provider.value,
                config.model,
                str(e),
            )
            message = str(e) or "Connection test failed"
            return ValidationResult.failure(message, validation.warnings)

        logger.info(
            "Connection test passed: provider=%s, model=%s",
            self.provider.value,
            config.model,
        )
        return validation.with_warnings(warnings)

    async def _preflight(self, config: ProviderConfig) -> list[str]:
        """Vendor-specific pre-flight checks returning warnings."""
        return []

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _field_value(config: ProviderConfig, attr: str) -> Optional[str]:
        value = getattr(config, attr)
        if value is None:
            return None
        if hasattr(value, "get_secret_value"):
            return value.get_secret_value()
        return str(value)

    @staticmethod
    def _validate_required(value: Optional[str], label: str) -> Optional[str]:
        """Return '<label> is required' when value is blank."""
        if not value or not value.strip():
            return f"{label} is required"
        return None

    @classmethod
    def _validate_url(cls, value: Optional[str], label: str) -> Optional[str]:
        """Return an error when value is blank or not an http(s) URL."""
        required = cls._validate_required(value, label)
        if required:
            return required
        try:
            _url_adapter.validate_python(value)
        except ValidationError:
            return f"Invalid {label} format"
        return None

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(provider='{self.provider.value}')>"
