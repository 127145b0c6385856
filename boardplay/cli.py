# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Boardplay CLI.

Usage:
    boardplay check-config [--provider P] [--model M] [--url U] [--api-key K]
                           [--region R] [--access-key-id I] [--secret-access-key S]
                           [--azure-instance N] [--azure-deployment D]
                           [--azure-api-version V] [--cross-region] [--save]
    boardplay pull-model MODEL [--url U]
    boardplay play {tictactoe,connect4} [--max-retries N]
"""

import argparse
import asyncio
import json
import sys
from typing import Optional

from pydantic import SecretStr

from boardplay.core.config import (
    DEFAULT_MODELS,
    AIProvider,
    ProviderConfig,
    get_provider_store,
    get_settings,
)
from boardplay.core.errors import GameError
from boardplay.core.intelligence.llm.factory import get_llm_factory
from boardplay.core.intelligence.llm.ollama_manager import OllamaModelManager
from boardplay.domains.gaming.models import BaseGameState, GameMode, GameType
from boardplay.domains.gaming.service import GameSessionManager
from boardplay.utils.logging import bind_context, clear_context, get_logger, setup_logging

logger = get_logger(__name__)

TEXT_OPTIONS = (
    "model",
    "url",
    "region",
    "azure_instance",
    "azure_deployment",
    "azure_api_version",
)
SECRET_OPTIONS = ("api_key", "access_key_id", "secret_access_key")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Boardplay - language-model board game players",
        prog="boardplay",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    check_parser = subparsers.add_parser(
        "check-config", help="Validate and test the provider configuration"
    )
    check_parser.add_argument(
        "--provider", choices=[p.value for p in AIProvider], help="Provider tag"
    )
    check_parser.add_argument("--model", help="Model identifier")
    check_parser.add_argument("--url", help="Endpoint base URL")
    check_parser.add_argument("--api-key", help="API key")
    check_parser.add_argument("--region", help="AWS region (bedrock)")
    check_parser.add_argument("--access-key-id", help="AWS access key id (bedrock)")
    check_parser.add_argument("--secret-access-key", help="AWS secret access key (bedrock)")
    check_parser.add_argument("--azure-instance", help="Azure OpenAI resource name")
    check_parser.add_argument("--azure-deployment", help="Azure OpenAI deployment name")
    check_parser.add_argument("--azure-api-version", help="Azure OpenAI API version")
    check_parser.add_argument(
        "--cross-region",
        action="store_true",
        default=None,
        help="Use a cross-region inference profile (bedrock)",
    )
    check_parser.add_argument(
        "--save", action="store_true", help="Activate and save the configuration if valid"
    )

    pull_parser = subparsers.add_parser("pull-model", help="Pull a model into Ollama")
    pull_parser.add_argument("model", help="Model name, e.g. llama3.2:3b")
    pull_parser.add_argument("--url", help="Ollama server URL")

    play_parser = subparsers.add_parser("play", help="Let the model play both sides")
    play_parser.add_argument("game", choices=[g.value for g in GameType], help="Game type")
    play_parser.add_argument("--max-retries", type=int, default=None, help="Attempts per move")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(get_settings())

    if args.command == "check-config":
        return asyncio.run(cmd_check_config(args))
    if args.command == "pull-model":
        return asyncio.run(cmd_pull_model(args))
    if args.command == "play":
        return asyncio.run(cmd_play(args))

    parser.print_help()
    return 1


def config_from_args(base: ProviderConfig, args: argparse.Namespace) -> ProviderConfig:
    """Overlay command-line options on a provider configuration."""
    data = base.model_dump()
    if args.provider and AIProvider(args.provider) is not base.provider:
        # Another vendor's endpoint and credentials never carry over
        provider = AIProvider(args.provider)
        data = {"provider": provider, "model": DEFAULT_MODELS[provider]}
    for name in TEXT_OPTIONS:
        value = getattr(args, name)
        if value:
            data[name] = value
    for name in SECRET_OPTIONS:
        value = getattr(args, name)
        if value:
            data[name] = SecretStr(value)
    if args.cross_region is not None:
        data["cross_region"] = args.cross_region
    return ProviderConfig.model_validate(data)


async def cmd_check_config(args: argparse.Namespace) -> int:
    """Validate and test a provider configuration."""
    try:
        store = get_provider_store()
    except GameError as e:
        print(json.dumps(e.to_payload(), indent=2), file=sys.stderr)
        return 1
    config = config_from_args(store.get_provider_config(with_env=False), args)

    print(f"Provider: {config.provider.value}")
    print(f"Model: {config.model or '(none)'}")

    if args.save:
        result = await store.set_ai_config(config, persist=True)
    else:
        result = await get_llm_factory().validate_and_test(store.with_env_secrets(config))

    if result.warnings:
        print("\nWarnings:")
        for w in result.warnings:
            print(f"  - {w}")

    if result.errors:
        print("\nErrors:")
        for e in result.errors:
            print(f"  - {e}")

    print("\nConfiguration is valid" if result.valid else "\nConfiguration is invalid")
    if result.valid and args.save:
        print(f"Saved to {store.path}")
    return 0 if result.valid else 1


async def cmd_pull_model(args: argparse.Namespace) -> int:
    """Pull a model into Ollama, printing progress."""
    manager = OllamaModelManager(args.url or get_settings().llm.ollama_base_url)
    status = "error"
    async for event in manager.pull_model(args.model):
        status = event.status
        percent = f" {event.progress_percent}%" if event.progress_percent is not None else ""
        detail = f" ({event.error})" if event.error else ""
        print(f"{event.status}{percent}{detail}")
    return 0 if status == "complete" else 1


def render_board(state: BaseGameState) -> str:
    """Render a board as plain text rows."""
    board = getattr(state, "board", ())
    return "\n".join(
        " ".join((cell[:1].upper() if cell else ".") for cell in row) for row in board
    )


async def cmd_play(args: argparse.Namespace) -> int:
    """Let the configured model play both sides until the game ends."""
    manager = GameSessionManager()
    state = manager.new_game(args.game, mode=GameMode.AI_VS_AI)
    bind_context(game_id=state.id, game_type=state.game_type.value)
    print(render_board(state))

    try:
        while not state.game_over:
            player = state.current_player
            try:
                state, generated = await manager.take_model_turn(state, args.max_retries)
            except GameError as e:
                print(json.dumps(e.to_payload(), indent=2), file=sys.stderr)
                return 1

            print(f"\n{player}: {generated.move.model_dump()} ({generated.attempts} attempt(s))")
            if generated.reasoning:
                print(f"  {generated.reasoning}")
            print(render_board(state))

        print(f"\nWinner: {state.winner}")
        logger.info("Game finished", winner=state.winner)
        return 0
    finally:
        clear_context()


if __name__ == "__main__":
    sys.exit(main())
