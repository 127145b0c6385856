# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package.

- Settings: Pydantic-based settings loaded from environment variables
- Provider config: the active model vendor configuration and its store
- YAML loader: utilities for reading and writing YAML configuration files

Example:
    >>> from boardplay.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.game.max_move_retries
    3
"""

from boardplay.core.config.llm_providers import (
    DEFAULT_MODELS,
    AIProvider,
    ProviderConfig,
    ProviderConfigStore,
    ValidationResult,
    get_provider_store,
    reset_provider_store,
)
from boardplay.core.config.settings import (
    GameSettings,
    LLMSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from boardplay.core.config.yaml_loader import YAMLLoadError, dump_yaml, load_yaml

__all__ = [
    "AIProvider",
    "DEFAULT_MODELS",
    "GameSettings",
    "LLMSettings",
    "ProviderConfig",
    "ProviderConfigStore",
    "Settings",
    "ValidationResult",
    "YAMLLoadError",
    "clear_settings_cache",
    "dump_yaml",
    "get_provider_store",
    "get_settings",
    "load_yaml",
    "reset_provider_store",
]
