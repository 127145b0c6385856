# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for gaming data models."""

import pytest
from pydantic import ValidationError

from boardplay.domains.gaming.models import (
    Connect4Response,
    Connect4State,
    GameMode,
    GameStatus,
    GameType,
    TicTacToeResponse,
    TicTacToeState,
    state_from_storage_dict,
)


class TestTicTacToeState:
    """Tests for TicTacToeState."""

    def test_defaults(self) -> None:
        state = TicTacToeState()

        assert state.game_type is GameType.TICTACTOE
        assert state.current_player == "X"
        assert state.status is GameStatus.IN_PROGRESS
        assert state.board == (("", "", ""),) * 3
        assert state.winner is None

    def test_board_shape_enforced(self) -> None:
        with pytest.raises(ValidationError, match="3x3"):
            TicTacToeState(board=[["", ""], ["", ""]])

    def test_cell_values_enforced(self) -> None:
        with pytest.raises(ValidationError, match="Invalid cell value"):
            TicTacToeState(board=[["Z", "", ""], ["", "", ""], ["", "", ""]])

    def test_finished_game_needs_winner(self) -> None:
        """Test that game_over without a winner is rejected."""
        with pytest.raises(ValidationError, match="winner"):
            TicTacToeState(game_over=True)

    def test_states_are_frozen(self) -> None:
        state = TicTacToeState()

        with pytest.raises(ValidationError):
            state.current_player = "O"


class TestConnect4State:
    def test_defaults(self) -> None:
        state = Connect4State(mode=GameMode.AI_VS_AI)

        assert state.current_player == "red"
        assert len(state.board) == 6
        assert all(len(row) == 7 for row in state.board)
        assert state.last_column is None

    def test_player_values_enforced(self) -> None:
        with pytest.raises(ValidationError):
            Connect4State(current_player="X")


class TestStorage:
    """Tests for storage dictionaries."""

    def test_restore_dispatches_on_game_type(self) -> None:
        """Test that a stored state comes back as its own class, unchanged."""
        state = Connect4State(current_player="yellow", last_column=3)
        board = [list(row) for row in state.board]
        board[5][3] = "red"
        state = state.model_copy(update={"board": tuple(tuple(r) for r in board)})

        data = state.to_storage_dict()
        restored = state_from_storage_dict(data)

        assert data["game_type"] == "connect4"
        assert isinstance(restored, Connect4State)
        assert restored.model_dump() == state.model_dump()

    def test_missing_game_type(self) -> None:
        with pytest.raises(ValueError, match="game_type"):
            state_from_storage_dict({"current_player": "X"})

    def test_unknown_game_type(self) -> None:
        with pytest.raises(ValueError):
            state_from_storage_dict({"game_type": "chess"})


class TestResponseModels:
    """Tests for the structured responses models must return."""

    def test_tictactoe_bounds(self) -> None:
        with pytest.raises(ValidationError):
            TicTacToeResponse.model_validate({"move": {"row": 3, "col": 0}})

    def test_reasoning_is_optional(self) -> None:
        response = Connect4Response.model_validate({"move": {"column": 3, "player": "red"}})

        assert response.reasoning is None
        assert response.move.column == 3

    def test_schema_documents_fields(self) -> None:
        schema = TicTacToeResponse.model_json_schema()

        assert "move" in schema["required"]
        assert "reasoning" in schema["properties"]


class TestTimestamps:
    def test_naive_timestamps_become_utc(self) -> None:
        state = state_from_storage_dict(
            {"game_type": "tictactoe", "created_at": "2025-03-01T12:00:00"}
        )

        assert state.created_at.tzinfo is not None
        assert state.created_at.utcoffset().total_seconds() == 0
        assert state.created_at.hour == 12
