# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Model backend using LiteLLM for multi-provider support.

An LLMBackend is a configured, callable model: it accepts a prompt and
returns the generated text. Provider-specific parameters (api_base,
api_key, AWS credentials ...) are resolved once by the provider classes
and passed directly to LiteLLM's acompletion() on every call.

Example:
    >>> backend = LLMBackend(
    ...     model="ollama_chat/llama3.2:3b",
    ...     params={"api_base": "http://localhost:11434"},
    ...     temperature=0.3,
    ... )
    >>> text = await backend.invoke("Reply with OK")
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import litellm
from litellm import acompletion

logger = logging.getLogger(__name__)


def _configure_litellm() -> None:
    """Configure LiteLLM global settings.

    Unsupported sampling parameters are dropped per provider instead of
    raising.
    """
    litellm.drop_params = True


@dataclass
class LLMResponse:
    """Response from a model completion.

    Attributes:
        content: The generated text content.
        model: The model that generated the response.
        tokens_input: Number of input tokens used.
        tokens_output: Number of output tokens generated.
        finish_reason: Why generation stopped (stop, length, etc.).
        raw_response: Original response object from LiteLLM.
    """

    content: str
    model: str
    tokens_input: int = 0
    tokens_output: int = 0
    finish_reason: str = "stop"
    raw_response: Optional[object] = field(default=None, repr=False)


class LLMError(Exception):
    """Exception raised when a backend call fails.

    Attributes:
        message: Error description.
        model: Model that caused the error.
        error_code: Error code if available.
        original_error: Original exception if any.
    """

    def __init__(
        self,
        message: str,
        model: Optional[str] = None,
        error_code: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        """Initialize LLMError.

        Args:
            message: Error description.
            model: Model that caused the error.
            error_code: Error code if available.
            original_error: Original exception if any.
        """
        self.message = message
        self.model = model
        self.error_code = error_code
        self.original_error = original_error
        super().__init__(self.message)


class LLMBackend:
    """A configured model reachable through LiteLLM.

    Instances are immutable once built; the factory caches and shares
    them across move requests.

    Attributes:
        model: Model string in LiteLLM format.
        provider: Vendor tag the backend was built for.
        temperature: Sampling temperature.
        max_tokens: Maximum tokens to generate.
        timeout: Request timeout in seconds.
        num_retries: LiteLLM transport retries.
    """

    def __init__(
        self,
        model: str,
        params: Optional[dict[str, Any]] = None,
        temperature: float = 0.3,
        max_tokens: int = 512,
        timeout: float = 60.0,
        num_retries: int = 0,
        provider: str = "",
    ):
        """Initialize the backend.

        Args:
            model: Model string in LiteLLM format (e.g. 'ollama_chat/llama3.2:3b').
            params: Provider parameters passed to acompletion (api_base, api_key ...).
            temperature: Sampling temperature.
            max_tokens: Maximum tokens to generate.
            timeout: Request timeout in seconds.
            num_retries: LiteLLM transport retries.
            provider: Vendor tag, for logging.
        """
        self.model = model
        self.provider = provider
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.num_retries = num_retries
        self._params = dict(params or {})

        _configure_litellm()

    async def complete(self, prompt: str) -> LLMResponse:
        """Generate a completion for the given prompt.

        Args:
            prompt: User prompt text.

        Returns:
            LLMResponse with generated content and metadata.

        Raises:
            LLMError: If generation fails.
            ValueError: If prompt is empty.
        """
        if not prompt or not prompt.strip():
            raise ValueError("Prompt cannot be empty")

        chat_messages = [{"role": "user", "content": prompt}]

        try:
            response = await acompletion(
                model=self.model,
                messages=chat_messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                timeout=self.timeout,
                num_retries=self.num_retries,
                **self._params,
            )

            content = response.choices[0].message.content or ""
            finish_reason = response.choices[0].finish_reason or "stop"

            usage = getattr(response, "usage", None)
            tokens_input = getattr(usage, "prompt_tokens", 0) or 0
            tokens_output = getattr(usage, "completion_tokens", 0) or 0

            logger.debug(
                "Completion generated: model=%s, tokens_in=%d, tokens_out=%d",
                self.model,
                tokens_input,
                tokens_output,
            )

            return LLMResponse(
                content=content,
                model=self.model,
                tokens_input=tokens_input,
                tokens_output=tokens_output,
                finish_reason=finish_reason,
                raw_response=response,
            )

        except Exception as e:
            logger.error(
                "Completion failed: model=%s, prompt_length=%d, error=%s",
                self.model,
                len(prompt),
                str(e),
            )
            raise LLMError(
                message=f"Completion failed: {str(e)}",
                model=self.model,
                original_error=e,
            ) from e

    async def invoke(self, prompt: str) -> str:
        """Send a prompt and return the response text.

        Args:
            prompt: Prompt text.

        Returns:
            Generated text.

        Raises:
            LLMError: If generation fails.
        """
        response = await self.complete(prompt)
        return response.content

    def __repr__(self) -> str:
        return (
            f"<LLMBackend(provider='{self.provider}', model='{self.model}', "
            f"temperature={self.temperature})>"
        )
