# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Anthropic provider."""

from typing import Any

from boardplay.core.config.llm_providers import AIProvider, ProviderConfig
from boardplay.core.intelligence.llm.providers.base import BaseProvider


class AnthropicProvider(BaseProvider):
    """Anthropic Claude models."""

    provider = AIProvider.ANTHROPIC
    name = "Anthropic"
    required_fields = (("api_key", "API key"), ("model", "Model name"))

    def litellm_model(self, config: ProviderConfig) -> str:
        return f"anthropic/{config.model}"

    def litellm_params(self, config: ProviderConfig) -> dict[str, Any]:
        return {"api_key": config.secret("api_key")}

    def _check_config(
        self, config: ProviderConfig, errors: list[str], warnings: list[str]
    ) -> None:
        key = config.secret("api_key")
        if key and not key.startswith("sk-ant-"):
            errors.append('Anthropic API key should start with "sk-ant-"')
