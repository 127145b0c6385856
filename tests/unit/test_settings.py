# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for application settings."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from boardplay.core.config.settings import (
    GameSettings,
    LLMSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)


class TestLLMSettings:
    """Tests for LLMSettings."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        with patch.dict(os.environ, {}, clear=True):
            settings = LLMSettings()

        assert settings.default_provider == "ollama"
        assert settings.ollama_base_url == "http://localhost:11434"
        assert settings.temperature == 0.3
        assert settings.transport_retries == 0
        assert settings.provider_config_path == Path("config/llm/provider.yaml")
        assert settings.default_azure_api_version == "2024-02-15-preview"

    def test_loads_from_environment(self) -> None:
        """Test that prefixed variables are read."""
        env = {
            "BOARDPLAY_LLM_DEFAULT_PROVIDER": "openai",
            "BOARDPLAY_LLM_TEMPERATURE": "0.7",
            "BOARDPLAY_LLM_REQUEST_TIMEOUT": "15",
        }

        with patch.dict(os.environ, env, clear=False):
            settings = LLMSettings()

        assert settings.default_provider == "openai"
        assert settings.temperature == 0.7
        assert settings.request_timeout == 15.0

    def test_ollama_url_uses_plain_variable(self) -> None:
        """Test that OLLAMA_BASE_URL is honoured without prefix."""
        with patch.dict(os.environ, {"OLLAMA_BASE_URL": "http://gpu-box:11434"}):
            settings = LLMSettings()

        assert settings.ollama_base_url == "http://gpu-box:11434"

    def test_vendor_keys_use_plain_variables(self) -> None:
        """Test that vendor credentials are read as secrets without prefix."""
        env = {"OPENAI_API_KEY": "sk-env", "AWS_SECRET_ACCESS_KEY": "aws-secret"}

        with patch.dict(os.environ, env):
            settings = LLMSettings()

        assert settings.openai_api_key is not None
        assert settings.openai_api_key.get_secret_value() == "sk-env"
        assert settings.aws_secret_access_key.get_secret_value() == "aws-secret"
        assert "sk-env" not in repr(settings)
        assert settings.anthropic_api_key is None

    def test_rejects_unknown_provider(self) -> None:
        """Test that unsupported provider tags fail validation."""
        with patch.dict(os.environ, {"BOARDPLAY_LLM_DEFAULT_PROVIDER": "mystery"}):
            with pytest.raises(ValidationError):
                LLMSettings()


class TestGameSettings:
    """Tests for GameSettings."""

    def test_default_retries(self) -> None:
        """Test default retry budget."""
        with patch.dict(os.environ, {}, clear=True):
            assert GameSettings().max_move_retries == 3

    def test_retries_from_environment(self) -> None:
        """Test retry budget from environment."""
        with patch.dict(os.environ, {"BOARDPLAY_GAME_MAX_MOVE_RETRIES": "5"}):
            assert GameSettings().max_move_retries == 5

    def test_retries_must_be_positive(self) -> None:
        """Test that a zero budget is rejected."""
        with patch.dict(os.environ, {"BOARDPLAY_GAME_MAX_MOVE_RETRIES": "0"}):
            with pytest.raises(ValidationError):
                GameSettings()


class TestSettings:
    """Tests for root Settings."""

    def test_aggregates_subsettings(self) -> None:
        """Test that subsettings are created."""
        settings = Settings()

        assert isinstance(settings.llm, LLMSettings)
        assert isinstance(settings.game, GameSettings)

    def test_debug_forces_debug_level(self) -> None:
        """Test that debug mode lowers the log level."""
        settings = Settings(debug=True, log_level="WARNING")

        assert settings.log_level == "DEBUG"

    def test_environment_properties(self) -> None:
        """Test environment helper properties."""
        assert Settings(environment="development").is_development is True
        assert Settings(environment="production").is_production is True
        assert Settings(environment="staging").is_production is False

    def test_invalid_log_format(self) -> None:
        """Test that unknown log formats are rejected."""
        with pytest.raises(ValidationError):
            Settings(log_format="xml")


class TestGetSettings:
    """Tests for get_settings caching."""

    def test_returns_cached_instance(self) -> None:
        """Test that repeated calls return the same object."""
        assert get_settings() is get_settings()

    def test_clear_cache_reloads(self) -> None:
        """Test that clearing the cache picks up new environment."""
        first = get_settings()

        with patch.dict(os.environ, {"BOARDPLAY_GAME_MAX_MOVE_RETRIES": "7"}):
            clear_settings_cache()
            second = get_settings()

        assert second is not first
        assert second.game.max_move_retries == 7
