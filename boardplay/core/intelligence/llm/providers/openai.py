# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""OpenAI provider."""

from typing import Any

from boardplay.core.config.llm_providers import AIProvider, ProviderConfig
from boardplay.core.intelligence.llm.providers.base import BaseProvider


class OpenAIProvider(BaseProvider):
    """OpenAI chat models, optionally through an OpenAI-compatible URL."""

    provider = AIProvider.OPENAI
    name = "OpenAI"
    required_fields = (("api_key", "API key"), ("model", "Model name"))

    def litellm_model(self, config: ProviderConfig) -> str:
        return f"openai/{config.model}"

    def litellm_params(self, config: ProviderConfig) -> dict[str, Any]:
        params: dict[str, Any] = {"api_key": config.secret("api_key")}
        if config.url:
            params["api_base"] = config.url
        return params

    def _check_config(
        self, config: ProviderConfig, errors: list[str], warnings: list[str]
    ) -> None:
        key = config.secret("api_key")
        if key and not key.startswith("sk-"):
            errors.append('OpenAI API key should start with "sk-"')
        if config.url:
            url_error = self._validate_url(config.url, "API base URL")
            if url_error:
                errors.append(url_error)
