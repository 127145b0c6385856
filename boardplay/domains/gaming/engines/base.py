# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Game adapter contract.

A game is playable by a model when it provides the capability set in
GameAdapter: move models, legality, application, terminal detection and
the text pieces the prompt is built from. Adapters satisfy the protocol
structurally; they do not inherit from a common base class.

All methods are pure. apply() returns a new state and never mutates its
argument.
"""

from typing import Protocol, runtime_checkable

from pydantic import BaseModel

from boardplay.domains.gaming.models import BaseGameState, Board, GameEnd, GameMode, GameType


@runtime_checkable
class GameAdapter(Protocol):
    """Capabilities a game must provide to be driven by a model.

    Attributes:
        game_type: Game type tag the adapter is registered under.
        display_name: Human-readable game name used in prompts.
        state_model: State class for this game.
        move_model: Move payload class (unbounded, legality is checked
            by is_legal).
        response_model: Structured response a model must return; its
            schema drives the format instructions and the parser.
    """

    game_type: GameType
    display_name: str
    state_model: type[BaseGameState]
    move_model: type[BaseModel]
    response_model: type[BaseModel]

    def initial_state(self, mode: GameMode = GameMode.VS_AI) -> BaseGameState:
        """Create the starting state."""
        ...

    def is_legal(self, state: BaseGameState, move: BaseModel) -> bool:
        """Check whether a move may be played on a state."""
        ...

    def invalid_move_reason(self, state: BaseGameState, move: BaseModel) -> str:
        """Explain why a move is illegal, specifically enough to correct it."""
        ...

    def apply(self, state: BaseGameState, move: BaseModel) -> BaseGameState:
        """Play a legal move, returning the next state."""
        ...

    def check_terminal(self, state: BaseGameState) -> GameEnd:
        """Compute whether the board is finished and who won."""
        ...

    def render_for_prompt(self, state: BaseGameState) -> str:
        """Render the board as prompt text."""
        ...

    def rules(self) -> str:
        """Rules text included in every prompt."""
        ...

    def strategy_hints(self) -> str:
        """Strategy text included in every prompt."""
        ...

    def move_instruction(self) -> str:
        """Closing instruction describing the JSON the model must return."""
        ...

    def current_player_label(self, state: BaseGameState) -> str:
        """Label of the side to move, as shown to the model."""
        ...

    def opponent_label(self, state: BaseGameState) -> str:
        """Label of the other side, as shown to the model."""
        ...


def replace_cell(board: Board, row: int, col: int, value: str) -> Board:
    """Return a copy of a board with one cell replaced."""
    return tuple(
        tuple(value if (r, c) == (row, col) else cell for c, cell in enumerate(cells))
        for r, cells in enumerate(board)
    )
