# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Connect 4 game adapter.

Standard rules on a 6-row, 7-column board. Red moves first.

The board is a tuple of rows where:
- Row 0 is the top row
- Row 5 is the bottom row
- Columns are 0-6 (left to right)

A piece dropped into a column lands in the lowest empty row, so a
column accepts pieces while its top cell is empty.
"""

import logging

from boardplay.domains.gaming.engines.base import replace_cell
from boardplay.domains.gaming.models import (
    DRAW,
    Board,
    Connect4Move,
    Connect4Response,
    Connect4State,
    GameEnd,
    GameMode,
    GameType,
)

logger = logging.getLogger(__name__)

# Board dimensions
ROWS = 6
COLS = 7
CONNECT = 4

PLAYERS = ("red", "yellow")

# Right, down, down-right, down-left
DIRECTIONS = ((0, 1), (1, 0), (1, 1), (1, -1))

RULES = """Game Rules:
- Drop pieces into columns (0-6)
- Pieces fall to the lowest available row in that column
- Win by connecting 4 pieces in a row (horizontal, vertical, or diagonal)
- ONLY choose columns marked as OPEN
- NEVER choose columns marked as FULL"""

STRATEGY = """Strategy Priority:
1. Win immediately if possible (connect 4 of your pieces)
2. Block opponent from winning (prevent their 4 in a row)
3. Build towards your own winning opportunities
4. Create multiple winning threats when possible
5. Play center columns (3,2,4) when possible for better positioning
6. Avoid giving opponent winning opportunities"""


def _other(player: str) -> str:
    return "yellow" if player == "red" else "red"


def find_landing_row(board: Board, col: int) -> int:
    """Find the row where a piece dropped in col lands, or -1 if full."""
    for row in range(ROWS - 1, -1, -1):
        if board[row][col] == "":
            return row
    return -1


def _line_from(board: Board, row: int, col: int, dr: int, dc: int) -> bool:
    """Check for CONNECT equal pieces starting at (row, col) along (dr, dc)."""
    player = board[row][col]
    for step in range(1, CONNECT):
        r, c = row + dr * step, col + dc * step
        if not (0 <= r < ROWS and 0 <= c < COLS) or board[r][c] != player:
            return False
    return True


class Connect4Game:
    """Connect 4 adapter.

    Example:
        game = Connect4Game()
        state = game.initial_state()
        state = game.apply(state, Connect4Move(column=3, player="red"))
        state.board[5][3]
        'red'
    """

    game_type = GameType.CONNECT4
    display_name = "Connect 4"
    state_model = Connect4State
    move_model = Connect4Move
    response_model = Connect4Response

    def initial_state(self, mode: GameMode = GameMode.VS_AI) -> Connect4State:
        return Connect4State(mode=mode)

    def is_legal(self, state: Connect4State, move: Connect4Move) -> bool:
        if not 0 <= move.column < COLS:
            return False
        if move.player != state.current_player:
            return False
        return state.board[0][move.column] == ""

    def invalid_move_reason(self, state: Connect4State, move: Connect4Move) -> str:
        if not 0 <= move.column < COLS:
            return f"Column {move.column} is out of bounds. Use columns 0-6 only."
        if move.player != state.current_player:
            return (
                f"It is {state.current_player.upper()}'s turn, "
                f"not {move.player.upper()}'s."
            )
        return f"Column {move.column} is full. Choose an OPEN column."

    def apply(self, state: Connect4State, move: Connect4Move) -> Connect4State:
        """Drop the current player's piece and pass the turn.

        Raises:
            ValueError: If the move is illegal.
        """
        if not self.is_legal(state, move):
            raise ValueError(self.invalid_move_reason(state, move))

        row = find_landing_row(state.board, move.column)
        return state.model_copy(
            update={
                "board": replace_cell(state.board, row, move.column, state.current_player),
                "current_player": _other(state.current_player),
                "last_column": move.column,
            }
        )

    def check_terminal(self, state: Connect4State) -> GameEnd:
        board = state.board
        for row in range(ROWS):
            for col in range(COLS):
                if board[row][col] == "":
                    continue
                for dr, dc in DIRECTIONS:
                    if _line_from(board, row, col, dr, dc):
                        return GameEnd(ended=True, winner=board[row][col])

        if all(cell != "" for cell in board[0]):
            return GameEnd(ended=True, winner=DRAW)
        return GameEnd.ongoing()

    def render_for_prompt(self, state: Connect4State) -> str:
        headers = "|".join(f"  {i}  " for i in range(COLS))
        separator = "-" * 35
        rows = [
            "|".join(
                f" E{r} " if cell == "" else f" {cell[:2].upper()} " for cell in cells
            )
            for r, cells in enumerate(state.board)
        ]
        status = " | ".join(
            f"Col{c}: {'FULL' if cell else 'OPEN'}" for c, cell in enumerate(state.board[0])
        )
        board_text = f"\n{separator}\n".join(rows)
        return (
            "Current Board (6 rows x 7 columns):\n"
            f"Columns: {headers}\n"
            f"{separator}\n"
            f"{board_text}\n\n"
            f"Column Status: {status}\n\n"
            "Legend:\n"
            "- E0-E5 = Empty cell (can drop piece)\n"
            "- RE = Red piece, YE = Yellow piece\n"
            "- OPEN = can drop piece, FULL = column is full"
        )

    def rules(self) -> str:
        return RULES

    def strategy_hints(self) -> str:
        return STRATEGY

    def move_instruction(self) -> str:
        return "Return your move as JSON with the column number (0-6) and your player color."

    def current_player_label(self, state: Connect4State) -> str:
        return state.current_player.upper()

    def opponent_label(self, state: Connect4State) -> str:
        return _other(state.current_player).upper()

    def __repr__(self) -> str:
        return f"<Connect4Game(game_type='{self.game_type.value}')>"
