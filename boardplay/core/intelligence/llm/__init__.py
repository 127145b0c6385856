# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Model backends: LiteLLM client, vendor providers, factory and cache.

Example:
    >>> from boardplay.core.intelligence.llm import get_llm_factory
    >>> backend = get_llm_factory().get_current_backend(config)
    >>> text = await backend.invoke("Your move")
"""

from boardplay.core.intelligence.llm.client import LLMBackend, LLMError, LLMResponse
from boardplay.core.intelligence.llm.factory import (
    LLMFactory,
    cache_key,
    get_llm_factory,
    reset_llm_factory,
)
from boardplay.core.intelligence.llm.ollama_manager import OllamaModelManager, PullProgress

__all__ = [
    "LLMBackend",
    "LLMError",
    "LLMFactory",
    "LLMResponse",
    "OllamaModelManager",
    "PullProgress",
    "cache_key",
    "get_llm_factory",
    "reset_llm_factory",
]
