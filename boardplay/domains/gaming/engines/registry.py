# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Game adapter registry.

Maps game type tags to GameAdapter instances. Lookup of an unregistered
tag is a fatal ``unknown_game_type`` error; the registry never guesses.

Usage:
    from boardplay.domains.gaming.engines import get_engine_registry

    registry = get_engine_registry()
    game = registry.get(GameType.CONNECT4)
"""

import logging

from boardplay.core.errors import GameError, GameErrorType
from boardplay.domains.gaming.engines.base import GameAdapter
from boardplay.domains.gaming.models import GameType

logger = logging.getLogger(__name__)


class EngineNotRegisteredError(GameError):
    """Raised when no adapter is registered for a game type.

    Attributes:
        requested: The game type tag that was not found.
        available: Registered game types.
    """

    def __init__(self, requested: str, available: list[GameType]) -> None:
        self.requested = requested
        self.available = available
        available_str = ", ".join(t.value for t in available)
        super().__init__(
            message=(
                f"Game '{requested}' not registered. "
                f"Available: {available_str or 'none'}"
            ),
            error_type=GameErrorType.UNKNOWN_GAME_TYPE,
            game_type=requested,
        )


class EngineRegistry:
    """Registry of game adapters keyed by game type.

    Example:
        registry = EngineRegistry()
        registry.register(TicTacToeGame())
        game = registry.get(GameType.TICTACTOE)
    """

    def __init__(self) -> None:
        self._engines: dict[GameType, GameAdapter] = {}

    def register(self, engine: GameAdapter) -> None:
        """Register an adapter.

        Raises:
            TypeError: If the object does not satisfy GameAdapter.
            ValueError: If an adapter is already registered for its type.
        """
        if not isinstance(engine, GameAdapter):
            raise TypeError(f"{engine!r} does not implement the game adapter contract")

        game_type = engine.game_type
        if game_type in self._engines:
            raise ValueError(f"Engine for '{game_type.value}' is already registered")

        self._engines[game_type] = engine
        logger.info("Registered game adapter: %s (%s)", engine.display_name, game_type.value)

    def get(self, game_type: GameType | str) -> GameAdapter:
        """Get the adapter for a game type tag.

        Args:
            game_type: Game type or its tag string.

        Returns:
            Registered adapter.

        Raises:
            EngineNotRegisteredError: If no adapter is registered.
        """
        try:
            key = GameType(game_type)
        except ValueError:
            raise EngineNotRegisteredError(str(game_type), self.list_types()) from None

        engine = self._engines.get(key)
        if engine is None:
            raise EngineNotRegisteredError(key.value, self.list_types())
        return engine

    def list_types(self) -> list[GameType]:
        return list(self._engines.keys())

    def __repr__(self) -> str:
        types = ", ".join(t.value for t in self._engines)
        return f"<EngineRegistry(engines=[{types}])>"


_default_registry: EngineRegistry | None = None


def create_default_registry() -> EngineRegistry:
    """Create a registry holding every built-in game."""
    from boardplay.domains.gaming.engines.connect4 import Connect4Game
    from boardplay.domains.gaming.engines.tictactoe import TicTacToeGame

    registry = EngineRegistry()
    registry.register(TicTacToeGame())
    registry.register(Connect4Game())
    return registry


def get_engine_registry() -> EngineRegistry:
    """Get or create the process game registry."""
    global _default_registry

    if _default_registry is None:
        _default_registry = create_default_registry()

    return _default_registry


def reset_engine_registry() -> None:
    """Drop the process game registry (for testing)."""
    global _default_registry
    _default_registry = None
    logger.debug("Engine registry reset")
