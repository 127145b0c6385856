# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the error taxonomy."""

from boardplay.core.errors import GameError, GameErrorType


class TestGameErrorType:
    def test_retriable_kinds(self) -> None:
        """Test that only model output failures are retriable."""
        retriable = {kind for kind in GameErrorType if kind.retriable}

        assert retriable == {
            GameErrorType.INVALID_MOVE,
            GameErrorType.INVALID_JSON,
            GameErrorType.CONNECTION_FAILED,
        }


class TestGameError:
    def test_payload_includes_optional_fields(self) -> None:
        error = GameError(
            message="Invalid move after 3 attempts: Column 3 is full.",
            error_type=GameErrorType.INVALID_MOVE,
            llm_response='{"move": {"column": 3}}',
            game_type="connect4",
        )

        assert error.to_payload() == {
            "message": "Invalid move after 3 attempts: Column 3 is full.",
            "errorType": "invalid_move",
            "llmResponse": '{"move": {"column": 3}}',
            "gameType": "connect4",
        }

    def test_payload_omits_missing_fields(self) -> None:
        error = GameError("AI configuration is invalid", GameErrorType.CONFIG_ERROR)

        assert error.to_payload() == {
            "message": "AI configuration is invalid",
            "errorType": "config_error",
        }
        assert error.details == {}
        assert str(error) == "AI configuration is invalid"
