# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the tic-tac-toe adapter."""

import pytest

from boardplay.domains.gaming.engines.tictactoe import TicTacToeGame
from boardplay.domains.gaming.models import TicTacToeMove, TicTacToeState


def make_state(rows: list[str], current_player: str = "X") -> TicTacToeState:
    """Build a state from rows like 'XO.' where '.' is empty."""
    board = [["" if ch == "." else ch for ch in row] for row in rows]
    return TicTacToeState(board=board, current_player=current_player)


@pytest.fixture
def game() -> TicTacToeGame:
    return TicTacToeGame()


class TestLegality:
    def test_empty_cell_is_legal(self, game: TicTacToeGame) -> None:
        assert game.is_legal(game.initial_state(), TicTacToeMove(row=1, col=1))

    def test_occupied_cell(self, game: TicTacToeGame) -> None:
        state = make_state(["X..", "...", "..."], current_player="O")
        move = TicTacToeMove(row=0, col=0)

        assert not game.is_legal(state, move)
        assert game.invalid_move_reason(state, move) == "Position (0,0) is already occupied by X"

    def test_out_of_bounds(self, game: TicTacToeGame) -> None:
        move = TicTacToeMove(row=3, col=-1)

        assert not game.is_legal(game.initial_state(), move)
        assert game.invalid_move_reason(game.initial_state(), move) == (
            "Position (3,-1) is out of bounds. Use coordinates 0-2 only."
        )


class TestApply:
    def test_places_symbol_and_switches_player(self, game: TicTacToeGame) -> None:
        state = game.initial_state()

        next_state = game.apply(state, TicTacToeMove(row=1, col=1))

        assert next_state.board[1][1] == "X"
        assert next_state.current_player == "O"
        assert state.board[1][1] == ""
        assert next_state.id == state.id

    def test_illegal_move_raises(self, game: TicTacToeGame) -> None:
        state = make_state(["X..", "...", "..."], current_player="O")

        with pytest.raises(ValueError, match="occupied"):
            game.apply(state, TicTacToeMove(row=0, col=0))


class TestCheckTerminal:
    @pytest.mark.parametrize(
        "rows",
        [
            ["XXX", "OO.", "..."],
            ["XO.", "XO.", "X.."],
            ["X.O", ".XO", "..X"],
            ["O.X", ".XO", "X.."],
        ],
    )
    def test_x_wins(self, game: TicTacToeGame, rows: list[str]) -> None:
        end = game.check_terminal(make_state(rows, current_player="O"))

        assert end.ended is True
        assert end.winner == "X"

    def test_draw(self, game: TicTacToeGame) -> None:
        end = game.check_terminal(make_state(["XOX", "XOO", "OXX"]))

        assert end.ended is True
        assert end.winner == "draw"

    def test_ongoing(self, game: TicTacToeGame) -> None:
        end = game.check_terminal(make_state(["XO.", "...", "..."]))

        assert end.ended is False
        assert end.winner is None


class TestPromptText:
    def test_render_marks_empty_and_taken(self, game: TicTacToeGame) -> None:
        text = game.render_for_prompt(make_state(["X..", ".O.", "..."]))

        assert "TAKEN-X | EMPTY(0,1) | EMPTY(0,2)" in text
        assert "EMPTY(1,0) | TAKEN-O | EMPTY(1,2)" in text
        assert "-" * 50 in text

    def test_labels(self, game: TicTacToeGame) -> None:
        state = make_state(["X..", "...", "..."], current_player="O")

        assert game.current_player_label(state) == "O"
        assert game.opponent_label(state) == "X"
        assert "(0-2)" in game.move_instruction()
