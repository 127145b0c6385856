# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Move orchestrator: turns free-form model output into a legal move.

One generate_move() call runs a bounded, sequential loop:

    validate config -> build prompt -> invoke -> parse -> check legality
        -> accept | retry with feedback | exhausted

Every attempt consumes one unit of the retry budget, whatever the reason
it failed. Only illegal moves add feedback for the next prompt; parse and
connection failures simply re-invoke. A backend error of a non-retriable
kind ends the request at once. Retries are immediate.

Example:
    >>> orchestrator = MoveOrchestrator()
    >>> generated = await orchestrator.generate_move(state, max_retries=3)
    >>> generated.move
    TicTacToeMove(row=0, col=2)
"""

import logging
from typing import Callable, Optional

from pydantic import ValidationError

from boardplay.core.config.llm_providers import ProviderConfig, get_provider_store
from boardplay.core.config.settings import GameSettings, get_settings
from boardplay.core.config.yaml_loader import YAMLLoadError
from boardplay.core.errors import GameError, GameErrorType
from boardplay.core.intelligence.llm.client import LLMBackend
from boardplay.core.intelligence.llm.factory import LLMFactory, get_llm_factory
from boardplay.domains.gaming.engines.base import GameAdapter
from boardplay.domains.gaming.engines.registry import EngineRegistry, get_engine_registry
from boardplay.domains.gaming.models import BaseGameState, GeneratedMove
from boardplay.domains.gaming.prompting import build_prompt, parse_move_response

logger = logging.getLogger(__name__)

ConfigSource = Callable[[], ProviderConfig]


def game_over_error(state: BaseGameState) -> GameError:
    """Build the error raised for moves requested on a finished game."""
    return GameError(
        message=f"Game {state.id} is already over (winner: {state.winner})",
        error_type=GameErrorType.GAME_OVER,
        game_type=state.game_type.value,
    )


class MoveOrchestrator:
    """Generates legal moves from a model with feedback-driven retries.

    Attributes:
        registry: Game adapters.
        factory: Backend factory.
    """

    def __init__(
        self,
        registry: Optional[EngineRegistry] = None,
        factory: Optional[LLMFactory] = None,
        config_source: Optional[ConfigSource] = None,
        game_settings: Optional[GameSettings] = None,
    ):
        """Initialize the orchestrator.

        Args:
            registry: Game adapters. Uses the process registry if None.
            factory: Backend factory. Uses the process factory if None.
            config_source: Returns the active provider configuration.
                Reads the process provider store if None.
            game_settings: Game settings. Uses get_settings().game if None.
        """
        self.registry = registry or get_engine_registry()
        self.factory = factory or get_llm_factory()
        self._config_source = config_source or (
            lambda: get_provider_store().get_provider_config()
        )
        self._settings = game_settings or get_settings().game

    def _backend_for_current_config(self, game: GameAdapter) -> LLMBackend:
        """Read and validate the active configuration, then get its backend.

        Raises:
            GameError: With kind ``config_error`` when the configuration is
                unreadable or invalid, ``unsupported_provider`` for an
                unknown vendor tag. Never retried.
        """
        try:
            config = self._config_source()
        except (YAMLLoadError, ValidationError) as e:
            raise GameError(
                message=f"AI configuration could not be read: {e}",
                error_type=GameErrorType.CONFIG_ERROR,
                game_type=game.game_type.value,
            ) from e
        validation = self.factory.validate_config(config)
        if not validation.valid:
            raise GameError(
                message=f"AI configuration is invalid: {', '.join(validation.errors)}",
                error_type=GameErrorType.CONFIG_ERROR,
                game_type=game.game_type.value,
                details={"errors": validation.errors},
            )
        return self.factory.get_current_backend(config)

    async def generate_move(
        self, state: BaseGameState, max_retries: Optional[int] = None
    ) -> GeneratedMove:
        """Ask the model for a legal move on a state.

        Args:
            state: Current state; not modified.
            max_retries: Model calls allowed. Falls back to settings.

        Returns:
            GeneratedMove holding a move that is legal on ``state``.

        Raises:
            GameError: ``unknown_game_type``, ``game_over``,
                ``config_error`` or ``unsupported_provider`` before any
                model call; after the budget is spent, the kind of the
                last failed attempt (``invalid_move``, ``invalid_json`` or
                ``connection_failed``) with the last raw response attached.
            ValueError: If max_retries is below 1.
        """
        attempts_allowed = self._settings.max_move_retries if max_retries is None else max_retries
        if attempts_allowed < 1:
            raise ValueError("max_retries must be at least 1")

        game = self.registry.get(state.game_type)
        if state.game_over:
            raise game_over_error(state)

        backend = self._backend_for_current_config(game)
        game_tag = game.game_type.value

        failures: list[str] = []
        last_response: Optional[str] = None
        attempt = 0

        while True:
            attempt += 1
            prompt = build_prompt(game, state, failures)

            try:
                text = await backend.invoke(prompt)
            except GameError as e:
                if not e.error_type.retriable:
                    raise
                error = e
            except Exception as e:
                error = GameError(
                    message=f"{game.display_name} model request failed: {e}",
                    error_type=GameErrorType.CONNECTION_FAILED,
                    llm_response=last_response,
                    game_type=game_tag,
                )
            else:
                last_response = text
                outcome = self._evaluate(game, state, text, attempt, failures)
                if isinstance(outcome, GeneratedMove):
                    logger.info(
                        "Model move accepted: game=%s, type=%s, attempt=%d/%d, move=%s",
                        state.id,
                        game_tag,
                        attempt,
                        attempts_allowed,
                        outcome.move.model_dump(),
                    )
                    return outcome
                error = outcome

            self._log_attempt_failure(attempt, attempts_allowed, error)
            if attempt >= attempts_allowed:
                logger.error(
                    "Move generation exhausted: game=%s, type=%s, attempts=%d, kind=%s",
                    state.id,
                    game_tag,
                    attempts_allowed,
                    error.error_type.value,
                )
                raise error

    @staticmethod
    def _evaluate(
        game: GameAdapter,
        state: BaseGameState,
        text: str,
        attempt: int,
        failures: list[str],
    ) -> GeneratedMove | GameError:
        """Parse one response and check the move, recording illegal-move feedback."""
        try:
            move, reasoning = parse_move_response(game, text)
        except GameError as e:
            return e

        if not game.is_legal(state, move):
            reason = game.invalid_move_reason(state, move)
            failures.append(reason)
            return GameError(
                message=f"Invalid move after {attempt} attempts: {reason}",
                error_type=GameErrorType.INVALID_MOVE,
                llm_response=text,
                game_type=game.game_type.value,
                details={"failures": list(failures)},
            )

        return GeneratedMove(
            move=move,
            reasoning=reasoning,
            raw_response=text,
            attempts=attempt,
        )

    @staticmethod
    def _log_attempt_failure(attempt: int, allowed: int, error: GameError) -> None:
        logger.warning(
            "Move attempt %d/%d failed: kind=%s, message=%s",
            attempt,
            allowed,
            error.error_type.value,
            error.message,
        )
