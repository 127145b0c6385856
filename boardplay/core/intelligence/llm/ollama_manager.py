# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Local model management for Ollama.

Talks to the Ollama HTTP API directly with aiohttp to list installed
models and to pull missing ones. Pull progress is exposed as an async
stream of PullProgress events that always ends with a ``complete`` or
``error`` event.

Example:
    >>> manager = OllamaModelManager("http://localhost:11434")
    >>> async for event in manager.pull_model("llama3.2:3b"):
    ...     print(event.status, event.progress_percent)
"""

import json
import logging
from typing import Any, AsyncIterator, Literal, Optional

import aiohttp
from pydantic import BaseModel

from boardplay.core.intelligence.llm.client import LLMError

logger = logging.getLogger(__name__)

PullStatus = Literal["downloading", "verifying", "writing", "complete", "error"]


class PullProgress(BaseModel):
    """One progress event of a model pull.

    Attributes:
        status: Normalized pull phase.
        digest: Layer digest being transferred.
        total: Layer size in bytes.
        completed: Bytes transferred so far.
        progress_percent: Rounded completion percentage.
        error: Failure description for ``error`` events.
    """

    status: PullStatus
    digest: Optional[str] = None
    total: Optional[int] = None
    completed: Optional[int] = None
    progress_percent: Optional[int] = None
    error: Optional[str] = None


def _normalize_status(raw: str) -> PullStatus:
    """Map an Ollama pull status line onto a pull phase."""
    lowered = raw.lower()
    if lowered == "success":
        return "complete"
    if lowered.startswith("verifying"):
        return "verifying"
    if lowered.startswith("writing"):
        return "writing"
    return "downloading"


def _progress_from_chunk(chunk: dict[str, Any]) -> PullProgress:
    """Build a progress event from one streamed status object."""
    total = chunk.get("total")
    completed = chunk.get("completed")
    percent = None
    if total and completed:
        percent = round(completed / total * 100)
    return PullProgress(
        status=_normalize_status(chunk.get("status", "")),
        digest=chunk.get("digest"),
        total=total,
        completed=completed,
        progress_percent=percent,
    )


class OllamaModelManager:
    """Lists and pulls models on an Ollama server.

    Attributes:
        base_url: Ollama server URL.
        timeout: Timeout in seconds for listing requests.
    """

    def __init__(self, base_url: str, timeout: float = 10.0):
        """Initialize the manager.

        Args:
            base_url: Ollama server URL.
            timeout: Timeout in seconds for listing requests. Pulls are
                not time-limited.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def list_models(self) -> list[str]:
        """List installed model names.

        Returns:
            Model names as reported by the server (e.g. 'llama3.2:3b').

        Raises:
            LLMError: If the server is unreachable or answers with an error.
        """
        url = f"{self.base_url}/api/tags"
        try:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(url) as resp:
                    if resp.status != 200:
                        error_text = await resp.text()
                        raise LLMError(
                            message=f"Ollama API returned {resp.status}: {error_text}",
                            error_code=str(resp.status),
                        )
                    data = await resp.json()
        except aiohttp.ClientError as e:
            raise LLMError(
                message=f"Ollama request failed: {str(e)}",
                original_error=e,
            ) from e

        return [m["name"] for m in data.get("models", []) if "name" in m]

    @staticmethod
    def matches(model: str, available: list[str]) -> bool:
        """Check whether a model name is present, allowing an implicit ':latest' tag."""
        return model in available or f"{model}:latest" in available

    async def check_model_exists(self, model: str) -> bool:
        """Check whether a model is installed.

        Args:
            model: Model name.

        Returns:
            True if installed.

        Raises:
            LLMError: If the server cannot be queried.
        """
        return self.matches(model, await self.list_models())

    async def pull_model(self, model: str) -> AsyncIterator[PullProgress]:
        """Pull a model, yielding progress events.

        The stream ends after the first ``complete`` or ``error`` event.
        Failures are reported as an ``error`` event rather than raised.

        Args:
            model: Model name to pull.

        Yields:
            PullProgress events in server order.
        """
        url = f"{self.base_url}/api/pull"
        payload = {"model": model, "stream": True}
        logger.info("Pulling Ollama model %s from %s", model, self.base_url)

        try:
            timeout = aiohttp.ClientTimeout(total=None, sock_connect=self.timeout)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(url, json=payload) as resp:
                    if resp.status != 200:
                        error_text = await resp.text()
                        yield self._error_event(f"Ollama API returned {resp.status}: {error_text}")
                        return

                    async for raw_line in resp.content:
                        line = raw_line.strip()
                        if not line:
                            continue
                        chunk = json.loads(line)
                        if "error" in chunk:
                            yield self._error_event(str(chunk["error"]))
                            return

                        progress = _progress_from_chunk(chunk)
                        if progress.status == "complete":
                            logger.info("Pulled Ollama model %s", model)
                            yield PullProgress(status="complete", progress_percent=100)
                            return
                        yield progress

        except (aiohttp.ClientError, json.JSONDecodeError) as e:
            yield self._error_event(str(e))
            return

        yield self._error_event("Pull stream ended before completion")

    @staticmethod
    def _error_event(message: str) -> PullProgress:
        logger.error("Model pull failed: %s", message)
        return PullProgress(status="error", progress_percent=0, error=message)

    async def ensure_model_exists(self, model: str, pull: bool = True) -> bool:
        """Make sure a model is installed.

        Args:
            model: Model name.
            pull: Pull the model when it is missing.

        Returns:
            True if the model is installed afterwards.
        """
        if await self.check_model_exists(model):
            logger.debug("Model %s already installed", model)
            return True
        if not pull:
            return False

        last: Optional[PullProgress] = None
        async for last in self.pull_model(model):
            pass
        return last is not None and last.status == "complete"
