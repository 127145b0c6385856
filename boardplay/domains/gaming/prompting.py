# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Prompt assembly and structured response parsing for model moves.

The prompt is composed from the game adapter's text pieces plus a
feedback block listing earlier illegal moves. The response is parsed
against the adapter's response model, whose JSON schema is also what the
format instructions show the model.
"""

import json
import re
from typing import Optional

from pydantic import BaseModel, ValidationError

from boardplay.core.errors import GameError, GameErrorType
from boardplay.domains.gaming.engines.base import GameAdapter
from boardplay.domains.gaming.models import BaseGameState

PROMPT_TEMPLATE = """You are playing {game_name} as {player} against {opponent}.

{board}

{rules}

{strategy}

{feedback}

{format_instructions}

{move_instruction}
"""

FORMAT_INSTRUCTIONS = """The output should be formatted as a JSON instance that conforms to the JSON schema below.

Here is the output schema:
```json
{schema}
```"""

_FENCED_JSON = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


def build_feedback_section(failures: list[str]) -> str:
    """Render earlier failures as a block the model is told to avoid.

    Args:
        failures: Failure messages in the order they occurred.

    Returns:
        Feedback text, or an empty string when there are no failures.
    """
    if not failures:
        return ""
    lines = "\n".join(f"- {failure}" for failure in failures)
    return (
        "\nPREVIOUS MISTAKES TO AVOID:\n"
        f"{lines}\n\n"
        "Please learn from these mistakes and make a valid move.\n"
    )


def format_instructions(response_model: type[BaseModel]) -> str:
    """Describe the JSON a model must return, from the response model's schema."""
    schema = json.dumps(response_model.model_json_schema(), indent=2)
    return FORMAT_INSTRUCTIONS.format(schema=schema)


def build_prompt(
    game: GameAdapter, state: BaseGameState, failures: Optional[list[str]] = None
) -> str:
    """Compose the full move prompt.

    Args:
        game: Adapter of the game being played.
        state: Current state.
        failures: Earlier failure messages for this move request.

    Returns:
        Prompt text.
    """
    return PROMPT_TEMPLATE.format(
        game_name=game.display_name,
        player=game.current_player_label(state),
        opponent=game.opponent_label(state),
        board=game.render_for_prompt(state),
        rules=game.rules(),
        strategy=game.strategy_hints(),
        feedback=build_feedback_section(failures or []),
        format_instructions=format_instructions(game.response_model),
        move_instruction=game.move_instruction(),
    )


def extract_json(text: str) -> Optional[str]:
    """Pull the JSON object out of a model response.

    Prefers a fenced code block; otherwise takes the span from the first
    '{' to the last '}'.

    Returns:
        JSON candidate text, or None if the response holds no object.
    """
    fenced = _FENCED_JSON.search(text)
    if fenced:
        return fenced.group(1).strip()

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    return text[start : end + 1]


def parse_move_response(game: GameAdapter, text: str) -> tuple[BaseModel, Optional[str]]:
    """Parse a model response into a move and optional reasoning.

    Schema bounds (e.g. a row outside 0-2) are enforced here, so an
    out-of-range field fails parsing rather than legality.

    Args:
        game: Adapter of the game being played.
        text: Raw model response.

    Returns:
        Tuple of (move, reasoning).

    Raises:
        GameError: With kind ``invalid_json`` and the raw text attached.
    """
    candidate = extract_json(text)
    if candidate is None:
        raise GameError(
            message="Failed to parse model response: no JSON object found",
            error_type=GameErrorType.INVALID_JSON,
            llm_response=text,
            game_type=game.game_type.value,
        )

    try:
        parsed = game.response_model.model_validate_json(candidate)
    except ValidationError as e:
        raise GameError(
            message=f"Failed to parse model response: {e.error_count()} validation error(s)",
            error_type=GameErrorType.INVALID_JSON,
            llm_response=text,
            game_type=game.game_type.value,
            details={"errors": e.errors(include_url=False)},
        ) from e

    move = game.move_model.model_validate(parsed.move.model_dump())
    return move, getattr(parsed, "reasoning", None)
