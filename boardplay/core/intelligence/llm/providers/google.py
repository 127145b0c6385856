# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Google Gemini provider (Google AI Studio keys)."""

from typing import Any

from boardplay.core.config.llm_providers import AIProvider, ProviderConfig
from boardplay.core.intelligence.llm.providers.base import BaseProvider


class GoogleProvider(BaseProvider):
    """Gemini models through LiteLLM's gemini route."""

    provider = AIProvider.GOOGLE
    name = "Google Gemini"
    required_fields = (("api_key", "API key"), ("model", "Model name"))

    def litellm_model(self, config: ProviderConfig) -> str:
        return f"gemini/{config.model}"

    def litellm_params(self, config: ProviderConfig) -> dict[str, Any]:
        return {"api_key": config.secret("api_key")}
