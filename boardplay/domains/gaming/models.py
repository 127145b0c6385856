# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Data models for the gaming domain.

This module defines Pydantic models and enums for:
- Game types, modes and lifecycle status
- Immutable game states (one subclass per game)
- Move payloads and the structured responses models must return
- Terminal-state checks and generated moves

States are frozen: every transition produces a new state value.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Literal, Optional, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from boardplay.utils.datetime import ensure_utc, utc_now

DRAW = "draw"

Board = tuple[tuple[str, ...], ...]


class GameType(str, Enum):
    """Supported game types."""

    TICTACTOE = "tictactoe"
    CONNECT4 = "connect4"


class GameMode(str, Enum):
    """Who plays each side."""

    VS_AI = "vs-ai"
    VS_HUMAN = "vs-human"
    AI_VS_AI = "ai-vs-ai"


class GameStatus(str, Enum):
    """Game lifecycle status."""

    WAITING = "waiting"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    PAUSED = "paused"


def empty_board(rows: int, cols: int) -> Board:
    """Build an empty board of the given size."""
    return tuple(tuple("" for _ in range(cols)) for _ in range(rows))


def _check_board(board: Board, rows: int, cols: int, pieces: set[str]) -> Board:
    if len(board) != rows or any(len(row) != cols for row in board):
        raise ValueError(f"Board must be {rows}x{cols}")
    allowed = pieces | {""}
    for row in board:
        for cell in row:
            if cell not in allowed:
                raise ValueError(f"Invalid cell value: {cell!r}")
    return board


class BaseGameState(BaseModel):
    """Fields shared by every game state.

    Attributes:
        id: Game identifier.
        game_type: Type of game.
        status: Lifecycle status.
        mode: Who plays each side.
        current_player: Marker of the side to move.
        game_over: Whether the game has ended.
        winner: Winning marker or "draw"; required once the game is over.
        created_at: Creation timestamp.
        last_move: Timestamp of the most recent move.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Game identifier")
    game_type: GameType = Field(description="Type of game")
    status: GameStatus = Field(default=GameStatus.IN_PROGRESS, description="Lifecycle status")
    mode: GameMode = Field(default=GameMode.VS_AI, description="Who plays each side")
    current_player: str = Field(description="Marker of the side to move")
    game_over: bool = Field(default=False, description="Whether the game has ended")
    winner: Optional[str] = Field(default=None, description="Winning marker or 'draw'")
    created_at: datetime = Field(default_factory=utc_now, description="Creation timestamp")
    last_move: Optional[datetime] = Field(default=None, description="Last move timestamp")

    @field_validator("created_at", "last_move")
    @classmethod
    def normalize_timestamps(cls, value: Optional[datetime]) -> Optional[datetime]:
        """Store timestamps as aware UTC; naive values are taken as UTC."""
        return ensure_utc(value) if value is not None else None

    @model_validator(mode="after")
    def check_winner(self) -> Self:
        """A finished game always names its winner."""
        if self.game_over and self.winner is None:
            raise ValueError("A finished game must have a winner or 'draw'")
        return self

    def to_storage_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dictionary.

        Returns:
            Dictionary representation suitable for storage.
        """
        return self.model_dump(mode="json")

    @classmethod
    def from_storage_dict(cls, data: dict[str, Any]) -> Self:
        """Create from a storage dictionary.

        Args:
            data: Dictionary produced by to_storage_dict().

        Returns:
            State instance.
        """
        return cls.model_validate(data)


class TicTacToeState(BaseGameState):
    """Tic-tac-toe state. Cells hold "X", "O" or "" for empty."""

    game_type: GameType = GameType.TICTACTOE
    current_player: Literal["X", "O"] = "X"
    board: Board = Field(default_factory=lambda: empty_board(3, 3))

    @field_validator("board")
    @classmethod
    def check_board(cls, board: Board) -> Board:
        return _check_board(board, 3, 3, {"X", "O"})


class Connect4State(BaseGameState):
    """Connect 4 state.

    Row 0 is the top of the board. Cells hold "red", "yellow" or "" for
    empty.

    Attributes:
        last_column: Column of the most recent drop.
    """

    game_type: GameType = GameType.CONNECT4
    current_player: Literal["red", "yellow"] = "red"
    board: Board = Field(default_factory=lambda: empty_board(6, 7))
    last_column: Optional[int] = Field(default=None, description="Column of the last drop")

    @field_validator("board")
    @classmethod
    def check_board(cls, board: Board) -> Board:
        return _check_board(board, 6, 7, {"red", "yellow"})


STATE_MODELS: dict[GameType, type[BaseGameState]] = {
    GameType.TICTACTOE: TicTacToeState,
    GameType.CONNECT4: Connect4State,
}


def state_from_storage_dict(data: dict[str, Any]) -> BaseGameState:
    """Restore any game state, choosing the class from its game_type.

    Raises:
        ValueError: If game_type is missing or unknown.
    """
    if "game_type" not in data:
        raise ValueError("Stored state has no game_type")
    return STATE_MODELS[GameType(data["game_type"])].from_storage_dict(data)


# =============================================================================
# Moves
# =============================================================================


class TicTacToeMove(BaseModel):
    """A tic-tac-toe move. Bounds are checked by the game, not the model."""

    model_config = ConfigDict(frozen=True)

    row: int
    col: int


class Connect4Move(BaseModel):
    """A Connect 4 move: drop a piece of ``player`` into ``column``."""

    model_config = ConfigDict(frozen=True)

    column: int
    player: str


class TicTacToeMoveSchema(BaseModel):
    """Move shape a model must return for tic-tac-toe."""

    row: int = Field(ge=0, le=2, description="Row index (0-2)")
    col: int = Field(ge=0, le=2, description="Column index (0-2)")


class TicTacToeResponse(BaseModel):
    """Structured model response for tic-tac-toe."""

    move: TicTacToeMoveSchema
    reasoning: Optional[str] = Field(
        default=None, description="Brief explanation of the move choice"
    )


class Connect4MoveSchema(BaseModel):
    """Move shape a model must return for Connect 4."""

    column: int = Field(ge=0, le=6, description="Column index (0-6)")
    player: Literal["red", "yellow"] = Field(description="Player color")


class Connect4Response(BaseModel):
    """Structured model response for Connect 4."""

    move: Connect4MoveSchema
    reasoning: Optional[str] = Field(
        default=None, description="Brief explanation of the move choice"
    )


# =============================================================================
# Results
# =============================================================================


class GameEnd(BaseModel):
    """Outcome of a terminal-state check.

    Attributes:
        ended: Whether the game is over.
        winner: Winning marker or "draw" when ended.
    """

    model_config = ConfigDict(frozen=True)

    ended: bool
    winner: Optional[str] = None

    @classmethod
    def ongoing(cls) -> "GameEnd":
        return cls(ended=False)


@dataclass(frozen=True)
class GeneratedMove:
    """A legal move produced by a model.

    Attributes:
        move: Game-specific move payload.
        reasoning: Explanation the model gave, if any.
        raw_response: Raw model text the move was parsed from.
        attempts: Model calls used to obtain the move.
    """

    move: BaseModel
    reasoning: Optional[str]
    raw_response: str
    attempts: int
