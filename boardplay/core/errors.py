# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Error taxonomy shared by the backend layer and the game layer.

Every failure a caller can act on is a GameError tagged with a
GameErrorType. Callers branch on ``error.error_type``; the kind assigned
where an error is first classified is never changed by outer layers.

Example:
    >>> try:
    ...     await orchestrator.generate_move(state)
    ... except GameError as e:
    ...     if e.error_type is GameErrorType.INVALID_MOVE:
    ...         show_feedback(e.to_payload())
"""

from enum import Enum
from typing import Any, Optional


class GameErrorType(str, Enum):
    """Kinds of failure surfaced to callers."""

    # Model output failures (retried within one move request)
    INVALID_MOVE = "invalid_move"
    INVALID_JSON = "invalid_json"
    CONNECTION_FAILED = "connection_failed"
    # Fatal, surfaced immediately
    CONFIG_ERROR = "config_error"
    ILLEGAL_MOVE = "illegal_move"
    UNKNOWN_GAME_TYPE = "unknown_game_type"
    UNSUPPORTED_PROVIDER = "unsupported_provider"
    GAME_OVER = "game_over"

    @property
    def retriable(self) -> bool:
        """Whether the orchestrator may retry after this kind."""
        return self in _RETRIABLE


_RETRIABLE = frozenset(
    {
        GameErrorType.INVALID_MOVE,
        GameErrorType.INVALID_JSON,
        GameErrorType.CONNECTION_FAILED,
    }
)


class GameError(Exception):
    """Tagged, diagnosable failure.

    Attributes:
        message: Human-readable description.
        error_type: Failure kind.
        llm_response: Last raw model response, if one was produced.
        game_type: Game type tag the failure relates to.
        details: Additional structured context.
    """

    def __init__(
        self,
        message: str,
        error_type: GameErrorType,
        llm_response: Optional[str] = None,
        game_type: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """Initialize GameError.

        Args:
            message: Human-readable description.
            error_type: Failure kind.
            llm_response: Last raw model response.
            game_type: Game type tag.
            details: Additional structured context.
        """
        self.message = message
        self.error_type = error_type
        self.llm_response = llm_response
        self.game_type = game_type
        self.details = details or {}
        super().__init__(message)

    def to_payload(self) -> dict[str, Any]:
        """Serialize for callers and UIs.

        Returns:
            Mapping with message, errorType and, when present,
            llmResponse and gameType.
        """
        payload: dict[str, Any] = {
            "message": self.message,
            "errorType": self.error_type.value,
        }
        if self.llm_response is not None:
            payload["llmResponse"] = self.llm_response
        if self.game_type is not None:
            payload["gameType"] = self.game_type
        return payload

    def __repr__(self) -> str:
        return f"GameError({self.error_type.value!r}, {self.message!r})"


def unsupported_provider(tag: str) -> GameError:
    """Build the error raised for an unknown vendor tag."""
    return GameError(
        message=f"Unsupported AI provider: {tag}",
        error_type=GameErrorType.UNSUPPORTED_PROVIDER,
    )
