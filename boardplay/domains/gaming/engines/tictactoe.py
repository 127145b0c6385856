# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tic-tac-toe game adapter.

Standard 3x3 rules. X moves first. Cells are addressed by (row, col)
with both coordinates in 0-2.
"""

import logging

from boardplay.domains.gaming.engines.base import replace_cell
from boardplay.domains.gaming.models import (
    DRAW,
    GameEnd,
    GameMode,
    GameType,
    TicTacToeMove,
    TicTacToeResponse,
    TicTacToeState,
)

logger = logging.getLogger(__name__)

SIZE = 3

# Rows, columns, then both diagonals
LINES: tuple[tuple[tuple[int, int], ...], ...] = (
    *(tuple((r, c) for c in range(SIZE)) for r in range(SIZE)),
    *(tuple((r, c) for r in range(SIZE)) for c in range(SIZE)),
    tuple((i, i) for i in range(SIZE)),
    tuple((i, SIZE - 1 - i) for i in range(SIZE)),
)

RULES = """Game Rules:
- ONLY choose coordinates from EMPTY(row,col) positions
- NEVER choose TAKEN positions
- Place your symbol in an empty cell
- Win by getting 3 in a row (horizontal, vertical, or diagonal)"""

STRATEGY = """Strategy Priority:
1. Win immediately if possible (complete 3 in a row)
2. Block opponent from winning (prevent their 3 in a row)
3. Play center (1,1) if available for better positioning
4. Play corners for strategic advantage
5. Avoid edges unless necessary"""


def _in_bounds(move: TicTacToeMove) -> bool:
    return 0 <= move.row < SIZE and 0 <= move.col < SIZE


class TicTacToeGame:
    """Tic-tac-toe adapter.

    Example:
        game = TicTacToeGame()
        state = game.initial_state()
        move = TicTacToeMove(row=1, col=1)
        if game.is_legal(state, move):
            state = game.apply(state, move)
    """

    game_type = GameType.TICTACTOE
    display_name = "Tic Tac Toe"
    state_model = TicTacToeState
    move_model = TicTacToeMove
    response_model = TicTacToeResponse

    def initial_state(self, mode: GameMode = GameMode.VS_AI) -> TicTacToeState:
        return TicTacToeState(mode=mode)

    def is_legal(self, state: TicTacToeState, move: TicTacToeMove) -> bool:
        return _in_bounds(move) and state.board[move.row][move.col] == ""

    def invalid_move_reason(self, state: TicTacToeState, move: TicTacToeMove) -> str:
        if not _in_bounds(move):
            return f"Position ({move.row},{move.col}) is out of bounds. Use coordinates 0-2 only."
        return f"Position ({move.row},{move.col}) is already occupied by {state.board[move.row][move.col]}"

    def apply(self, state: TicTacToeState, move: TicTacToeMove) -> TicTacToeState:
        """Place the current player's symbol and pass the turn.

        Raises:
            ValueError: If the move is illegal.
        """
        if not self.is_legal(state, move):
            raise ValueError(self.invalid_move_reason(state, move))

        return state.model_copy(
            update={
                "board": replace_cell(state.board, move.row, move.col, state.current_player),
                "current_player": self.opponent_label(state),
            }
        )

    def check_terminal(self, state: TicTacToeState) -> GameEnd:
        board = state.board
        for line in LINES:
            first = board[line[0][0]][line[0][1]]
            if first and all(board[r][c] == first for r, c in line):
                return GameEnd(ended=True, winner=first)

        if all(cell for row in board for cell in row):
            return GameEnd(ended=True, winner=DRAW)
        return GameEnd.ongoing()

    def render_for_prompt(self, state: TicTacToeState) -> str:
        rows = [
            " | ".join(
                f"EMPTY({r},{c})" if cell == "" else f"TAKEN-{cell}"
                for c, cell in enumerate(row)
            )
            for r, row in enumerate(state.board)
        ]
        separator = "\n" + "-" * 50 + "\n"
        return (
            "Current Board:\n"
            f"{separator.join(rows)}\n\n"
            "Legend: EMPTY(row,col) = available position, "
            "TAKEN-X/TAKEN-O = occupied positions"
        )

    def rules(self) -> str:
        return RULES

    def strategy_hints(self) -> str:
        return STRATEGY

    def move_instruction(self) -> str:
        return "Return your move as JSON with row and col coordinates (0-2)."

    def current_player_label(self, state: TicTacToeState) -> str:
        return state.current_player

    def opponent_label(self, state: TicTacToeState) -> str:
        return "O" if state.current_player == "X" else "X"

    def __repr__(self) -> str:
        return f"<TicTacToeGame(game_type='{self.game_type.value}')>"
