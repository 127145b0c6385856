# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Gaming domain: game adapters, move orchestration and sessions.

Example:
    >>> from boardplay.domains.gaming import GameSessionManager, GameType
    >>> manager = GameSessionManager()
    >>> state = manager.new_game(GameType.CONNECT4)
    >>> state = await manager.request_model_move(state)
"""

from boardplay.domains.gaming.models import (
    BaseGameState,
    Connect4Move,
    Connect4State,
    GameEnd,
    GameMode,
    GameStatus,
    GameType,
    GeneratedMove,
    TicTacToeMove,
    TicTacToeState,
    state_from_storage_dict,
)
from boardplay.domains.gaming.orchestrator import MoveOrchestrator
from boardplay.domains.gaming.service import GameSessionManager

__all__ = [
    "BaseGameState",
    "Connect4Move",
    "Connect4State",
    "GameEnd",
    "GameMode",
    "GameSessionManager",
    "GameStatus",
    "GameType",
    "GeneratedMove",
    "MoveOrchestrator",
    "TicTacToeMove",
    "TicTacToeState",
    "state_from_storage_dict",
]
