# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Ollama provider (local or remote Ollama server)."""

from typing import Any

from boardplay.core.config.llm_providers import AIProvider, ProviderConfig
from boardplay.core.intelligence.llm.ollama_manager import OllamaModelManager
from boardplay.core.intelligence.llm.providers.base import BaseProvider


class OllamaProvider(BaseProvider):
    """Ollama server reached through LiteLLM's ollama_chat route."""

    provider = AIProvider.OLLAMA
    name = "Ollama"
    required_fields = (("model", "Model name"),)

    def litellm_model(self, config: ProviderConfig) -> str:
        return f"ollama_chat/{config.model}"

    def litellm_params(self, config: ProviderConfig) -> dict[str, Any]:
        return {"api_base": (config.url or self._settings.ollama_base_url).rstrip("/")}

    def _check_config(
        self, config: ProviderConfig, errors: list[str], warnings: list[str]
    ) -> None:
        url_error = self._validate_url(config.url, "Ollama URL")
        if url_error:
            # URL comes first in the form
            errors.insert(0, url_error)

    async def _preflight(self, config: ProviderConfig) -> list[str]:
        """List installed models and warn when the requested one is missing."""
        manager = OllamaModelManager(config.url or self._settings.ollama_base_url)
        available = await manager.list_models()
        if manager.matches(config.model, available):
            return []
        return [
            f'Model "{config.model}" not found on Ollama instance. '
            f"Available models: {', '.join(available)}"
        ]
