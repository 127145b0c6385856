# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Provider configuration and validation results.

This module holds the data the model backend layer consumes:

- AIProvider: supported vendor tags
- ProviderConfig: vendor tag, model identifier and vendor credentials
- ValidationResult: outcome of configuration checks and connection tests
- ProviderConfigStore: the single active configuration, read per call

The active configuration is loaded from config/llm/provider.yaml when
present, otherwise it is seeded from LLMSettings.

Example:
    >>> from boardplay.core.config.llm_providers import get_provider_store
    >>> store = get_provider_store()
    >>> config = store.get_provider_config()
    >>> config.provider
    <AIProvider.OLLAMA: 'ollama'>
"""

import logging
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Self

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from boardplay.core.config.settings import LLMSettings, get_settings
from boardplay.core.config.yaml_loader import YAMLLoadError, dump_yaml, load_yaml
from boardplay.core.errors import GameError, GameErrorType, unsupported_provider

if TYPE_CHECKING:
    from boardplay.core.intelligence.llm.factory import LLMFactory

logger = logging.getLogger(__name__)


class AIProvider(str, Enum):
    """Supported model vendors."""

    OLLAMA = "ollama"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"
    AZURE_OPENAI = "azure-openai"
    BEDROCK = "bedrock"


DEFAULT_MODELS: dict[AIProvider, str] = {
    AIProvider.OLLAMA: "llama3.2:3b",
    AIProvider.OPENAI: "gpt-4o-mini",
    AIProvider.ANTHROPIC: "claude-3-haiku-20240307",
    AIProvider.GOOGLE: "gemini-1.5-flash",
    AIProvider.AZURE_OPENAI: "gpt-4o-mini",
    AIProvider.BEDROCK: "anthropic.claude-3-haiku-20240307-v1:0",
}

SECRET_FIELDS = ("api_key", "access_key_id", "secret_access_key")

# Secret field -> LLMSettings attribute read when the config has no value
ENV_SECRETS: dict[AIProvider, dict[str, str]] = {
    AIProvider.OPENAI: {"api_key": "openai_api_key"},
    AIProvider.ANTHROPIC: {"api_key": "anthropic_api_key"},
    AIProvider.GOOGLE: {"api_key": "google_api_key"},
    AIProvider.AZURE_OPENAI: {"api_key": "azure_api_key"},
    AIProvider.BEDROCK: {
        "access_key_id": "aws_access_key_id",
        "secret_access_key": "aws_secret_access_key",
    },
}


class ProviderConfig(BaseModel):
    """Configuration for a single model vendor.

    Accepts both snake_case and camelCase keys, so settings files written
    by other front ends (``apiKey``, ``azureInstance`` ...) load unchanged.

    Attributes:
        provider: Vendor tag.
        model: Model identifier as the vendor names it.
        url: Endpoint base URL (Ollama, OpenAI-compatible gateways).
        api_key: API key for key-authenticated vendors.
        region: Cloud region (Bedrock).
        access_key_id: AWS access key id (Bedrock).
        secret_access_key: AWS secret access key (Bedrock).
        azure_instance: Azure OpenAI resource name.
        azure_deployment: Azure OpenAI deployment name.
        azure_api_version: Azure OpenAI API version.
        cross_region: Route Bedrock calls through a cross-region profile.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    provider: AIProvider
    model: str = ""
    url: str | None = None
    api_key: SecretStr | None = None
    region: str | None = None
    access_key_id: SecretStr | None = None
    secret_access_key: SecretStr | None = None
    azure_instance: str | None = None
    azure_deployment: str | None = None
    azure_api_version: str | None = None
    cross_region: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProviderConfig":
        """Create a ProviderConfig from a settings mapping.

        Args:
            data: Mapping with snake_case or camelCase keys.

        Returns:
            ProviderConfig instance.

        Raises:
            GameError: ``unsupported_provider`` for an unknown vendor tag,
                ``config_error`` for any other invalid content.
        """
        if not isinstance(data, dict):
            raise GameError(
                message="Provider configuration must be a mapping",
                error_type=GameErrorType.CONFIG_ERROR,
            )
        tag = data.get("provider")
        if tag is None:
            raise GameError(
                message="Provider configuration has no provider",
                error_type=GameErrorType.CONFIG_ERROR,
            )
        if str(tag) not in {p.value for p in AIProvider}:
            raise unsupported_provider(str(tag))
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise GameError(
                message=f"Invalid provider configuration: {e.errors()[0]['msg']}",
                error_type=GameErrorType.CONFIG_ERROR,
                details={"errors": [err["msg"] for err in e.errors()]},
            ) from e

    def secret(self, name: str) -> str | None:
        """Get the plain value of a secret field, or None if unset."""
        value: SecretStr | None = getattr(self, name)
        if value is None:
            return None
        return value.get_secret_value()

    def has_secret(self, name: str) -> bool:
        """Check whether a secret field holds a non-blank value."""
        value = self.secret(name)
        return bool(value and value.strip())

    def to_public_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys and secret values removed.

        Returns:
            Mapping safe to log or display.
        """
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude=set(SECRET_FIELDS),
            exclude_none=True,
        )

    def to_storage_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys and secret values in plain text.

        Returns:
            Mapping written to the provider file.
        """
        data = self.to_public_dict()
        for name in SECRET_FIELDS:
            value = self.secret(name)
            if value:
                data[to_camel(name)] = value
        return data


class ValidationResult(BaseModel):
    """Result of a configuration check or connection test.

    A result is never partially valid: ``valid=False`` always carries at
    least one error.

    Attributes:
        valid: Whether the configuration is usable.
        errors: Human-readable problems, in discovery order.
        warnings: Non-fatal notes, in discovery order.
    """

    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_errors_present(self) -> Self:
        """Reject invalid results that carry no error."""
        if not self.valid and not self.errors:
            raise ValueError("An invalid result must carry at least one error")
        if self.valid and self.errors:
            raise ValueError("A valid result cannot carry errors")
        return self

    @classmethod
    def success(cls, warnings: list[str] | None = None) -> "ValidationResult":
        """Create a valid result with optional warnings."""
        return cls(valid=True, warnings=list(warnings or []))

    @classmethod
    def failure(
        cls, errors: list[str] | str, warnings: list[str] | None = None
    ) -> "ValidationResult":
        """Create an invalid result from one or more errors."""
        if isinstance(errors, str):
            errors = [errors]
        return cls(valid=False, errors=list(errors), warnings=list(warnings or []))

    def with_warnings(self, warnings: list[str]) -> "ValidationResult":
        """Return a copy with extra warnings appended after existing ones."""
        return self.model_copy(update={"warnings": [*self.warnings, *warnings]})


class ProviderConfigStore:
    """Holds the active provider configuration.

    The engine only reads the configuration through get_provider_config();
    set_ai_config() validates and tests a candidate before it replaces the
    active one.

    Attributes:
        path: YAML file backing the store.
    """

    def __init__(
        self,
        llm_settings: LLMSettings | None = None,
        path: Path | None = None,
        factory: "LLMFactory | None" = None,
    ) -> None:
        """Initialize the store.

        Args:
            llm_settings: LLM settings. Uses get_settings().llm if None.
            path: Provider YAML file. Falls back to settings.
            factory: Factory used to validate and test. Uses the
                process factory if None.
        """
        self._settings = llm_settings or get_settings().llm
        self.path = path or self._settings.provider_config_path
        self._factory = factory
        self._config = self._load()

    def _load(self) -> ProviderConfig:
        """Load the configuration file, or build one from settings.

        Raises:
            GameError: ``config_error`` if the file cannot be read or holds
                invalid content, ``unsupported_provider`` for an unknown tag.
        """
        if self.path.exists():
            try:
                data = load_yaml(self.path)
            except YAMLLoadError as e:
                raise GameError(
                    message=f"Cannot read provider configuration: {e.reason}",
                    error_type=GameErrorType.CONFIG_ERROR,
                    details={"path": str(self.path)},
                ) from e
            config = ProviderConfig.from_dict(data)
            logger.info(
                "Loaded provider config from %s: provider=%s, model=%s",
                self.path,
                config.provider.value,
                config.model,
            )
            return config

        logger.debug("Provider config %s not found, using settings", self.path)
        return self.default_config(self._settings)

    @staticmethod
    def default_config(llm_settings: LLMSettings) -> ProviderConfig:
        """Build the default configuration from settings.

        Args:
            llm_settings: LLM settings.

        Returns:
            ProviderConfig for the default provider.
        """
        provider = AIProvider(llm_settings.default_provider)
        return ProviderConfig(
            provider=provider,
            model=llm_settings.default_model or DEFAULT_MODELS[provider],
            url=llm_settings.ollama_base_url if provider == AIProvider.OLLAMA else None,
        )

    def _get_factory(self) -> "LLMFactory":
        if self._factory is None:
            from boardplay.core.intelligence.llm.factory import get_llm_factory

            self._factory = get_llm_factory()
        return self._factory

    def with_env_secrets(self, config: ProviderConfig) -> ProviderConfig:
        """Fill secrets the configuration lacks from vendor environment variables."""
        updates: dict[str, SecretStr] = {}
        for name, attr in ENV_SECRETS.get(config.provider, {}).items():
            value: SecretStr | None = getattr(self._settings, attr)
            if not config.has_secret(name) and value is not None:
                updates[name] = value
        if not updates:
            return config
        return config.model_copy(update=updates)

    def get_provider_config(self, with_env: bool = True) -> ProviderConfig:
        """Get the active provider configuration.

        Args:
            with_env: Fill secrets missing from the stored configuration
                from the vendor's environment variables (OPENAI_API_KEY,
                AWS_ACCESS_KEY_ID ...).

        Returns:
            Active configuration.
        """
        if not with_env:
            return self._config
        return self.with_env_secrets(self._config)

    async def set_ai_config(
        self, config: ProviderConfig, persist: bool = False
    ) -> ValidationResult:
        """Validate, test and activate a new provider configuration.

        The active configuration is only replaced when the candidate is
        valid. Replacing it clears the backend cache so no client built
        from the previous credentials is reused.

        The candidate is checked with environment secrets filled in, but
        stored and persisted without them.

        Args:
            config: Candidate configuration.
            persist: Also write the configuration to the store's file.

        Returns:
            Validation result of the candidate.
        """
        factory = self._get_factory()
        result = await factory.validate_and_test(self.with_env_secrets(config))
        if not result.valid:
            logger.warning(
                "Rejected provider config: provider=%s, errors=%s",
                config.provider.value,
                result.errors,
            )
            return result

        self._config = config
        factory.clear_cache()
        logger.info(
            "Activated provider config: provider=%s, model=%s",
            config.provider.value,
            config.model,
        )
        if persist:
            self.save()
        return result

    def save(self, path: Path | None = None) -> Path:
        """Write the active configuration to YAML.

        Secrets set on the configuration are written too, so the file is
        restricted to its owner. Secrets that only come from the
        environment are not written.

        Args:
            path: Destination. Defaults to the store's path.

        Returns:
            Path written.
        """
        target = path or self.path
        dump_yaml(target, self._config.to_storage_dict())
        target.chmod(0o600)
        return target


_provider_store: ProviderConfigStore | None = None


def get_provider_store() -> ProviderConfigStore:
    """Get the process provider store, creating it on first use."""
    global _provider_store
    if _provider_store is None:
        _provider_store = ProviderConfigStore()
    return _provider_store


def reset_provider_store() -> None:
    """Drop the process provider store (for testing)."""
    global _provider_store
    _provider_store = None
