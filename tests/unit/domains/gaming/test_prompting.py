# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for prompt assembly and response parsing."""

import pytest

from boardplay.core.errors import GameError, GameErrorType
from boardplay.domains.gaming.engines.connect4 import Connect4Game
from boardplay.domains.gaming.engines.tictactoe import TicTacToeGame
from boardplay.domains.gaming.models import Connect4Move, TicTacToeMove
from boardplay.domains.gaming.prompting import (
    build_feedback_section,
    build_prompt,
    extract_json,
    parse_move_response,
)


class TestBuildFeedbackSection:
    def test_empty(self) -> None:
        assert build_feedback_section([]) == ""

    def test_lists_failures_in_order(self) -> None:
        text = build_feedback_section(["first mistake", "second mistake"])

        assert text == (
            "\nPREVIOUS MISTAKES TO AVOID:\n"
            "- first mistake\n"
            "- second mistake\n\n"
            "Please learn from these mistakes and make a valid move.\n"
        )


class TestBuildPrompt:
    def test_contains_every_section(self) -> None:
        game = Connect4Game()
        state = game.initial_state()

        prompt = build_prompt(game, state, ["Column 3 is full. Choose an OPEN column."])

        assert prompt.startswith("You are playing Connect 4 as RED against YELLOW.")
        assert "Column Status:" in prompt
        assert game.rules() in prompt
        assert game.strategy_hints() in prompt
        assert "- Column 3 is full. Choose an OPEN column." in prompt
        assert '"column"' in prompt
        assert prompt.rstrip().endswith(game.move_instruction())

    def test_board_precedes_instructions(self) -> None:
        game = TicTacToeGame()

        prompt = build_prompt(game, game.initial_state())

        assert prompt.index("Current Board") < prompt.index("Game Rules")
        assert prompt.index("Game Rules") < prompt.index("```json")


class TestExtractJson:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ('{"a": 1}', '{"a": 1}'),
            ('Sure! {"a": {"b": 2}} hope that helps', '{"a": {"b": 2}}'),
            ('```json\n{"a": 1}\n```', '{"a": 1}'),
            ('```\n{"a": 1}\n```', '{"a": 1}'),
            ("no json here", None),
            ("} backwards {", None),
        ],
    )
    def test_extraction(self, text: str, expected: str | None) -> None:
        assert extract_json(text) == expected


class TestParseMoveResponse:
    def test_tictactoe(self) -> None:
        move, reasoning = parse_move_response(
            TicTacToeGame(), '{"move": {"row": 1, "col": 1}, "reasoning": "center"}'
        )

        assert move == TicTacToeMove(row=1, col=1)
        assert reasoning == "center"

    def test_connect4_without_reasoning(self) -> None:
        move, reasoning = parse_move_response(
            Connect4Game(), '{"move": {"column": 4, "player": "yellow"}}'
        )

        assert move == Connect4Move(column=4, player="yellow")
        assert reasoning is None

    def test_no_json(self) -> None:
        with pytest.raises(GameError) as exc_info:
            parse_move_response(TicTacToeGame(), "center please")

        assert exc_info.value.error_type is GameErrorType.INVALID_JSON
        assert exc_info.value.llm_response == "center please"

    @pytest.mark.parametrize(
        "text",
        [
            '{"move": {"row": 1}}',
            '{"move": {"row": "one", "col": 1}}',
            '{"row": 1, "col": 1}',
            '{"move": {"row": 1, "col": 1,}}',
        ],
    )
    def test_invalid_shapes(self, text: str) -> None:
        with pytest.raises(GameError) as exc_info:
            parse_move_response(TicTacToeGame(), text)

        assert exc_info.value.error_type is GameErrorType.INVALID_JSON
        assert exc_info.value.llm_response == text
