# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Game session manager.

Dispatches human and model moves to the right game adapter and stamps
every resulting state with a freshly computed terminal status. States are
never mutated; each call returns a new state.

Calls for one game must be serialized by the caller: the manager does not
guard against two model moves in flight for the same state.

Example:
    >>> manager = GameSessionManager()
    >>> state = manager.new_game(GameType.TICTACTOE)
    >>> state = manager.apply_move(state, {"row": 1, "col": 1})
    >>> state = await manager.request_model_move(state)
"""

import logging
from typing import Any, Optional

from pydantic import BaseModel, ValidationError

from boardplay.core.errors import GameError, GameErrorType
from boardplay.domains.gaming.engines.base import GameAdapter
from boardplay.domains.gaming.engines.registry import EngineRegistry, get_engine_registry
from boardplay.domains.gaming.models import (
    BaseGameState,
    GameMode,
    GameStatus,
    GameType,
    GeneratedMove,
)
from boardplay.domains.gaming.orchestrator import MoveOrchestrator, game_over_error
from boardplay.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class GameSessionManager:
    """Applies human and model moves to game states.

    Attributes:
        registry: Game adapters.
    """

    def __init__(
        self,
        registry: Optional[EngineRegistry] = None,
        orchestrator: Optional[MoveOrchestrator] = None,
    ):
        """Initialize the manager.

        Args:
            registry: Game adapters. Uses the process registry if None.
            orchestrator: Model move generator. Built on first model move
                if None.
        """
        self.registry = registry or get_engine_registry()
        self._orchestrator = orchestrator

    @property
    def orchestrator(self) -> MoveOrchestrator:
        if self._orchestrator is None:
            self._orchestrator = MoveOrchestrator(registry=self.registry)
        return self._orchestrator

    def new_game(
        self, game_type: GameType | str, mode: GameMode = GameMode.VS_AI
    ) -> BaseGameState:
        """Create a fresh game.

        Raises:
            GameError: With kind ``unknown_game_type``.
        """
        game = self.registry.get(game_type)
        state = game.initial_state(mode)
        logger.info("New game: id=%s, type=%s, mode=%s", state.id, game.game_type.value, mode.value)
        return state

    def apply_move(
        self, state: BaseGameState, move: BaseModel | dict[str, Any]
    ) -> BaseGameState:
        """Apply a caller-supplied move.

        Args:
            state: Current state.
            move: Move model or its mapping form.

        Returns:
            Next state with terminal status recomputed.

        Raises:
            GameError: ``unknown_game_type``, ``game_over``, or
                ``illegal_move`` when the adapter rejects the move. Never
                retried.
        """
        game = self.registry.get(state.game_type)
        if state.game_over:
            raise game_over_error(state)

        parsed = self._coerce_move(game, move)
        if not game.is_legal(state, parsed):
            reason = game.invalid_move_reason(state, parsed)
            logger.info("Rejected move: game=%s, reason=%s", state.id, reason)
            raise GameError(
                message=reason,
                error_type=GameErrorType.ILLEGAL_MOVE,
                game_type=game.game_type.value,
            )

        return self._transition(game, state, parsed)

    async def take_model_turn(
        self, state: BaseGameState, max_retries: Optional[int] = None
    ) -> tuple[BaseGameState, GeneratedMove]:
        """Ask the model for a move and apply it.

        Returns:
            Tuple of (next state, generated move).

        Raises:
            GameError: Any kind raised by the orchestrator, unchanged.
        """
        game = self.registry.get(state.game_type)
        if state.game_over:
            raise game_over_error(state)

        generated = await self.orchestrator.generate_move(state, max_retries)
        return self._transition(game, state, generated.move), generated

    async def request_model_move(
        self, state: BaseGameState, max_retries: Optional[int] = None
    ) -> BaseGameState:
        """Ask the model for a move and return the next state."""
        next_state, _ = await self.take_model_turn(state, max_retries)
        return next_state

    async def generate_next_state(self, state: BaseGameState) -> BaseGameState:
        """Advance a game by one model move, with default retry budget."""
        return await self.request_model_move(state)

    def check_terminal(self, state: BaseGameState) -> BaseGameState:
        """Recompute terminal status from the board without moving."""
        game = self.registry.get(state.game_type)
        return self._stamp_terminal(game, state, stamp_move=False)

    @staticmethod
    def _coerce_move(game: GameAdapter, move: BaseModel | dict[str, Any]) -> BaseModel:
        data = move.model_dump() if isinstance(move, BaseModel) else move
        try:
            return game.move_model.model_validate(data)
        except ValidationError as e:
            raise GameError(
                message=f"Malformed {game.display_name} move: {e.error_count()} validation error(s)",
                error_type=GameErrorType.ILLEGAL_MOVE,
                game_type=game.game_type.value,
            ) from e

    def _transition(
        self, game: GameAdapter, state: BaseGameState, move: BaseModel
    ) -> BaseGameState:
        next_state = game.apply(state, move)
        return self._stamp_terminal(game, next_state, stamp_move=True)

    @staticmethod
    def _stamp_terminal(
        game: GameAdapter, state: BaseGameState, stamp_move: bool
    ) -> BaseGameState:
        end = game.check_terminal(state)
        update: dict[str, Any] = {
            "game_over": end.ended,
            "winner": end.winner if end.ended else None,
            "status": GameStatus.COMPLETED if end.ended else GameStatus.IN_PROGRESS,
        }
        if stamp_move:
            update["last_move"] = utc_now()

        stamped = state.model_copy(update=update)
        if end.ended:
            logger.info("Game over: game=%s, winner=%s", state.id, end.winner)
        return stamped
