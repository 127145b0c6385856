# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Game adapters and their registry."""

from boardplay.domains.gaming.engines.base import GameAdapter
from boardplay.domains.gaming.engines.connect4 import Connect4Game
from boardplay.domains.gaming.engines.registry import (
    EngineNotRegisteredError,
    EngineRegistry,
    create_default_registry,
    get_engine_registry,
    reset_engine_registry,
)
from boardplay.domains.gaming.engines.tictactoe import TicTacToeGame

__all__ = [
    "Connect4Game",
    "EngineNotRegisteredError",
    "EngineRegistry",
    "GameAdapter",
    "TicTacToeGame",
    "create_default_registry",
    "get_engine_registry",
    "reset_engine_registry",
]
