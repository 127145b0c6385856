# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

Settings are loaded from environment variables (and an optional ``.env``
file) with sensible defaults. The Settings class aggregates all
subsettings, and a cached instance is provided via get_settings().

Example:
    >>> from boardplay.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> settings.llm.temperature
    0.3
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Self

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMSettings(BaseSettings):
    """Model backend configuration.

    These values seed the provider configuration when no provider file
    exists, and tune every backend built by the factory.

    Attributes:
        default_provider: Provider used when no provider file is present.
        ollama_base_url: Base URL for the Ollama server.
        default_model: Model identifier for the default provider.
        temperature: Sampling temperature for move generation.
        test_temperature: Sampling temperature for connection tests.
        max_tokens: Maximum tokens per completion.
        request_timeout: Per-request timeout in seconds.
        transport_retries: LiteLLM-level retries per request.
        provider_config_path: YAML file holding the active provider config.
        default_azure_api_version: API version used when none is configured.
        openai_api_key: OpenAI key used when the provider file has none.
        anthropic_api_key: Anthropic key used when the provider file has none.
        google_api_key: Google key used when the provider file has none.
        azure_api_key: Azure OpenAI key used when the provider file has none.
        aws_access_key_id: Bedrock access key id used when the provider file has none.
        aws_secret_access_key: Bedrock secret key used when the provider file has none.
    """

    model_config = SettingsConfigDict(
        env_prefix="BOARDPLAY_LLM_",
        extra="ignore",
    )

    default_provider: Literal[
        "ollama", "openai", "anthropic", "google", "azure-openai", "bedrock"
    ] = "ollama"

    ollama_base_url: str = Field(
        default="http://localhost:11434",
        validation_alias="OLLAMA_BASE_URL",
    )
    default_model: str = ""

    temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    test_temperature: float = Field(default=0.1, ge=0.0, le=2.0)
    max_tokens: int = 512
    request_timeout: float = 60.0
    # Move-level retries are owned by the orchestrator
    transport_retries: int = 0

    provider_config_path: Path = Path("config/llm/provider.yaml")
    default_azure_api_version: str = "2024-02-15-preview"

    # Vendor credentials read from their conventional variables
    openai_api_key: SecretStr | None = Field(default=None, validation_alias="OPENAI_API_KEY")
    anthropic_api_key: SecretStr | None = Field(
        default=None, validation_alias="ANTHROPIC_API_KEY"
    )
    google_api_key: SecretStr | None = Field(default=None, validation_alias="GOOGLE_API_KEY")
    azure_api_key: SecretStr | None = Field(default=None, validation_alias="AZURE_API_KEY")
    aws_access_key_id: SecretStr | None = Field(
        default=None, validation_alias="AWS_ACCESS_KEY_ID"
    )
    aws_secret_access_key: SecretStr | None = Field(
        default=None, validation_alias="AWS_SECRET_ACCESS_KEY"
    )


class GameSettings(BaseSettings):
    """Game orchestration configuration.

    Attributes:
        max_move_retries: Attempts the orchestrator makes per model move.
    """

    model_config = SettingsConfigDict(
        env_prefix="BOARDPLAY_GAME_",
        extra="ignore",
    )

    max_move_retries: int = Field(default=3, ge=1)


class Settings(BaseSettings):
    """Root application settings.

    Attributes:
        environment: Deployment environment name.
        debug: Enables verbose diagnostics.
        log_level: Minimum level for emitted log records.
        log_format: Renderer for log records.
        llm: Model backend settings.
        game: Game orchestration settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="BOARDPLAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["console", "json"] = "console"

    llm: LLMSettings = Field(default_factory=LLMSettings)
    game: GameSettings = Field(default_factory=GameSettings)

    @model_validator(mode="after")
    def validate_debug_level(self) -> Self:
        """Force DEBUG logging when debug mode is on."""
        if self.debug:
            self.log_level = "DEBUG"
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Useful for testing or after changing the environment.
    """
    get_settings.cache_clear()
