# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Model vendor providers."""

from boardplay.core.intelligence.llm.providers.anthropic import AnthropicProvider
from boardplay.core.intelligence.llm.providers.azure_openai import AzureOpenAIProvider
from boardplay.core.intelligence.llm.providers.base import BaseProvider
from boardplay.core.intelligence.llm.providers.bedrock import BedrockProvider
from boardplay.core.intelligence.llm.providers.google import GoogleProvider
from boardplay.core.intelligence.llm.providers.ollama import OllamaProvider
from boardplay.core.intelligence.llm.providers.openai import OpenAIProvider
from boardplay.core.intelligence.llm.providers.registry import ProviderRegistry

__all__ = [
    "AnthropicProvider",
    "AzureOpenAIProvider",
    "BaseProvider",
    "BedrockProvider",
    "GoogleProvider",
    "OllamaProvider",
    "OpenAIProvider",
    "ProviderRegistry",
]
