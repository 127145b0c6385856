# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Azure OpenAI provider."""

from typing import Any

from boardplay.core.config.llm_providers import AIProvider, ProviderConfig
from boardplay.core.intelligence.llm.providers.base import BaseProvider


class AzureOpenAIProvider(BaseProvider):
    """Azure OpenAI deployments.

    LiteLLM addresses Azure models by deployment name; the resource
    instance becomes the API base URL.
    """

    provider = AIProvider.AZURE_OPENAI
    name = "Azure OpenAI"
    required_fields = (
        ("api_key", "API key"),
        ("azure_instance", "Instance name"),
        ("azure_deployment", "Deployment name"),
        ("model", "Model name"),
    )

    def litellm_model(self, config: ProviderConfig) -> str:
        return f"azure/{config.azure_deployment}"

    def litellm_params(self, config: ProviderConfig) -> dict[str, Any]:
        return {
            "api_key": config.secret("api_key"),
            "api_base": f"https://{config.azure_instance}.openai.azure.com",
            "api_version": config.azure_api_version
            or self._settings.default_azure_api_version,
        }
