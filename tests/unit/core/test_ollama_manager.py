# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for Ollama model management.

aiohttp.ClientSession is replaced by a small fake that serves canned
responses, so no server is needed.
"""

import json
from typing import Any
from unittest.mock import AsyncMock, patch

import aiohttp
import pytest

from boardplay.core.intelligence.llm.client import LLMError
from boardplay.core.intelligence.llm.ollama_manager import (
    OllamaModelManager,
    PullProgress,
    _normalize_status,
)

CLIENT_SESSION = "boardplay.core.intelligence.llm.ollama_manager.aiohttp.ClientSession"


class FakeStream:
    def __init__(self, lines: list[bytes]) -> None:
        self._lines = list(lines)

    def __aiter__(self) -> "FakeStream":
        return self

    async def __anext__(self) -> bytes:
        if not self._lines:
            raise StopAsyncIteration
        return self._lines.pop(0)


class FakeResponse:
    def __init__(
        self, status: int = 200, body: Any = None, lines: list[bytes] | None = None
    ) -> None:
        self.status = status
        self._body = body
        self.content = FakeStream(lines or [])

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, *exc: object) -> None:
        return None

    async def json(self) -> Any:
        return self._body

    async def text(self) -> str:
        return str(self._body)


class FakeSession:
    """Stand-in for aiohttp.ClientSession recording requests."""

    def __init__(self, response: FakeResponse | Exception) -> None:
        self.response = response
        self.requests: list[tuple[str, str, Any]] = []

    def __call__(self, *args: Any, **kwargs: Any) -> "FakeSession":
        return self

    async def __aenter__(self) -> "FakeSession":
        return self

    async def __aexit__(self, *exc: object) -> None:
        return None

    def _respond(self) -> FakeResponse:
        if isinstance(self.response, Exception):
            raise self.response
        return self.response

    def get(self, url: str) -> FakeResponse:
        self.requests.append(("GET", url, None))
        return self._respond()

    def post(self, url: str, json: Any = None) -> FakeResponse:
        self.requests.append(("POST", url, json))
        return self._respond()


def ndjson(*chunks: dict[str, Any]) -> list[bytes]:
    return [json.dumps(c).encode() + b"\n" for c in chunks]


async def collect(manager: OllamaModelManager, model: str) -> list[PullProgress]:
    return [event async for event in manager.pull_model(model)]


class TestNormalizeStatus:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("pulling manifest", "downloading"),
            ("pulling 6a0746a1ec1a", "downloading"),
            ("verifying sha256 digest", "verifying"),
            ("writing manifest", "writing"),
            ("success", "complete"),
        ],
    )
    def test_status_mapping(self, raw: str, expected: str) -> None:
        assert _normalize_status(raw) == expected


class TestListModels:
    """Tests for list_models and check_model_exists."""

    @pytest.mark.asyncio
    async def test_lists_names(self) -> None:
        session = FakeSession(
            FakeResponse(body={"models": [{"name": "llama3.2:3b"}, {"name": "mistral:latest"}]})
        )

        with patch(CLIENT_SESSION, session):
            models = await OllamaModelManager("http://localhost:11434/").list_models()

        assert models == ["llama3.2:3b", "mistral:latest"]
        assert session.requests == [("GET", "http://localhost:11434/api/tags", None)]

    @pytest.mark.asyncio
    async def test_http_error_raises(self) -> None:
        with patch(CLIENT_SESSION, FakeSession(FakeResponse(status=500, body="boom"))):
            with pytest.raises(LLMError) as exc_info:
                await OllamaModelManager("http://localhost:11434").list_models()

        assert exc_info.value.error_code == "500"

    @pytest.mark.asyncio
    async def test_unreachable_server_raises(self) -> None:
        session = FakeSession(aiohttp.ClientConnectionError("Connection refused"))

        with patch(CLIENT_SESSION, session):
            with pytest.raises(LLMError, match="Connection refused"):
                await OllamaModelManager("http://localhost:11434").list_models()

    @pytest.mark.asyncio
    async def test_check_model_exists_accepts_latest(self) -> None:
        manager = OllamaModelManager("http://localhost:11434")

        with patch.object(manager, "list_models", AsyncMock(return_value=["mistral:latest"])):
            assert await manager.check_model_exists("mistral") is True
            assert await manager.check_model_exists("llama3.2:3b") is False


class TestPullModel:
    """Tests for the pull progress stream."""

    @pytest.mark.asyncio
    async def test_progress_then_complete(self) -> None:
        lines = ndjson(
            {"status": "pulling manifest"},
            {"status": "pulling 6a07", "digest": "sha256:6a07", "total": 200, "completed": 50},
            {"status": "verifying sha256 digest"},
            {"status": "writing manifest"},
            {"status": "success"},
        )
        session = FakeSession(FakeResponse(lines=lines))

        with patch(CLIENT_SESSION, session):
            events = await collect(OllamaModelManager("http://localhost:11434"), "llama3.2:3b")

        assert [e.status for e in events] == [
            "downloading",
            "downloading",
            "verifying",
            "writing",
            "complete",
        ]
        assert events[1].progress_percent == 25
        assert events[1].digest == "sha256:6a07"
        assert events[-1].progress_percent == 100
        assert session.requests == [
            ("POST", "http://localhost:11434/api/pull", {"model": "llama3.2:3b", "stream": True})
        ]

    @pytest.mark.asyncio
    async def test_server_error_chunk_ends_stream(self) -> None:
        lines = ndjson(
            {"status": "pulling manifest"},
            {"error": "pull model manifest: file does not exist"},
            {"status": "success"},
        )

        with patch(CLIENT_SESSION, FakeSession(FakeResponse(lines=lines))):
            events = await collect(OllamaModelManager("http://localhost:11434"), "nope")

        assert events[-1].status == "error"
        assert events[-1].error == "pull model manifest: file does not exist"
        assert len(events) == 2

    @pytest.mark.asyncio
    async def test_truncated_stream_is_error(self) -> None:
        lines = ndjson({"status": "pulling manifest"})

        with patch(CLIENT_SESSION, FakeSession(FakeResponse(lines=lines))):
            events = await collect(OllamaModelManager("http://localhost:11434"), "llama3")

        assert events[-1].status == "error"
        assert events[-1].error == "Pull stream ended before completion"

    @pytest.mark.asyncio
    async def test_connection_error_is_event(self) -> None:
        session = FakeSession(aiohttp.ClientConnectionError("Connection refused"))

        with patch(CLIENT_SESSION, session):
            events = await collect(OllamaModelManager("http://localhost:11434"), "llama3")

        assert len(events) == 1
        assert events[0].status == "error"
        assert events[0].progress_percent == 0


class TestEnsureModelExists:
    @pytest.mark.asyncio
    async def test_installed_model_is_not_pulled(self) -> None:
        manager = OllamaModelManager("http://localhost:11434")

        with (
            patch.object(manager, "list_models", AsyncMock(return_value=["llama3.2:3b"])),
            patch.object(manager, "pull_model") as mock_pull,
        ):
            assert await manager.ensure_model_exists("llama3.2:3b") is True

        mock_pull.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_model_is_pulled(self) -> None:
        manager = OllamaModelManager("http://localhost:11434")
        lines = ndjson({"status": "pulling manifest"}, {"status": "success"})

        with (
            patch.object(manager, "list_models", AsyncMock(return_value=[])),
            patch(CLIENT_SESSION, FakeSession(FakeResponse(lines=lines))),
        ):
            assert await manager.ensure_model_exists("llama3.2:3b") is True

    @pytest.mark.asyncio
    async def test_missing_model_without_pull(self) -> None:
        manager = OllamaModelManager("http://localhost:11434")

        with patch.object(manager, "list_models", AsyncMock(return_value=[])):
            assert await manager.ensure_model_exists("llama3.2:3b", pull=False) is False
