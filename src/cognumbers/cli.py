# Area: Shared
"""
cognumbers.cli — Command-line interface
=======================================

Read and administer games from the terminal.

Usage:
    python -m cognumbers list                       # All games, newest first
    python -m cognumbers list --status open         # Filter by status
    python -m cognumbers show 3                     # One game with its players
    python -m cognumbers leaderboard                # Top winners
    python -m cognumbers summary                    # Counts by status and prizes paid
    python -m cognumbers finalize 3                 # Close an expired game
    python -m cognumbers cancel 3                   # Cancel an open game
    python -m cognumbers refund 3                   # Claim a refund
    python -m cognumbers watch                      # Follow contract events

Settings come from --config (JSON), COGNUMBERS_* environment variables,
or a .env file. Joining and resolving need encryption/attestation
services and are available from Python code only.
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from ._config import load_config
from ._lifecycle.enums import GameStatus
from ._shared.logging_config import log_error, setup_logging
from .client import CognumbersClient
from .errors import CognumbersError
from .stats import (
    describe_winner,
    format_deadline,
    format_entry_fee,
    format_prize,
    is_expired,
    leaderboard,
    mask_address,
    summarize,
    time_remaining,
)
from .types import Game

LIBRARY_ONLY = {"join", "resolve"}


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="cognumbers",
        description="Cognumbers - sealed-choice minimum unique number game client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m cognumbers list --status calculating
  python -m cognumbers --config config.json finalize 3
  COGNUMBERS_CONTRACT_ADDRESS=0x... python -m cognumbers watch
        """,
    )
    parser.add_argument("--config", type=str, help="Path to JSON config file")
    parser.add_argument("--env-file", type=str, help="Path to .env file")

    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="List games, newest first")
    list_cmd.add_argument(
        "--status",
        choices=[s.name.lower() for s in GameStatus],
        help="Only games with this status",
    )

    for name, help_text in (
        ("show", "Show one game"),
        ("finalize", "Finalize a game whose deadline has passed"),
        ("cancel", "Cancel an open game (creator or admin)"),
        ("refund", "Claim a refund for a cancelled or refunded game"),
        ("join", "Join a game (library only)"),
        ("resolve", "Resolve a calculating game (library only)"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("game_id", type=int)

    board = sub.add_parser("leaderboard", help="Top winners by earnings")
    board.add_argument("--limit", type=int, default=10)

    sub.add_parser("summary", help="Game counts by status and total prizes paid")

    sub.add_parser("watch", help="Follow contract events and refresh the game list")

    return parser.parse_args(argv)


def format_game_line(game: Game, now: Optional[float] = None) -> str:
    status = game.status.name
    if game.status == GameStatus.OPEN and is_expired(game.deadline, now):
        status = "OPEN (ended)"
    return (
        f"#{game.game_id:<4} {status:<12} "
        f"fee={format_entry_fee(game.entry_fee)} ETH  "
        f"players={game.player_count:<3} "
        f"prize={format_prize(game.entry_fee, game.player_count)} ETH  "
        f"winner={describe_winner(game)}"
    )


async def _run(args: argparse.Namespace, client: CognumbersClient) -> int:
    if args.command == "list":
        status = GameStatus[args.status.upper()] if args.status else None
        games = await client.list_games(status=status)
        if not games:
            print("No games.")
        for game in games:
            print(format_game_line(game))
    elif args.command == "show":
        game = await client.get_game(args.game_id)
        players = await client.get_players(args.game_id)
        print(format_game_line(game))
        print(f"  creator:   {game.creator}")
        print(f"  deadline:  {format_deadline(game.deadline)} ({time_remaining(game.deadline)})")
        for player in players:
            print(f"  player:    {player}")
    elif args.command == "leaderboard":
        games = await client.list_games()
        for rank, entry in enumerate(leaderboard(games, limit=args.limit), start=1):
            print(f"{rank:>2}. {mask_address(entry.address)}  "
                  f"{entry.wins} win{'s' if entry.wins != 1 else ''}  "
                  f"{format_entry_fee(entry.earnings)} ETH")
    elif args.command == "summary":
        summary = summarize(await client.list_games())
        print(f"Games: {summary.total}")
        for status, count in summary.by_status.items():
            if count:
                print(f"  {status.name.lower():<12} {count}")
        print(f"Prizes paid: {format_entry_fee(summary.total_prizes)} ETH")
    elif args.command == "finalize":
        print(await client.finalize_game(args.game_id))
    elif args.command == "cancel":
        print(await client.cancel_game(args.game_id))
    elif args.command == "refund":
        print(await client.claim_refund(args.game_id))
    elif args.command == "watch":
        client.subscribe_refresh(
            lambda games: print(f"{len(games)} games; newest: "
                                f"{format_game_line(games[0]) if games else '-'}")
        )
        await client.watch()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)

    if args.command in LIBRARY_ONLY:
        print(f"Error: '{args.command}' needs encryption/attestation services.", file=sys.stderr)
        print("Construct CognumbersClient from Python code with your service clients.",
              file=sys.stderr)
        return 1

    try:
        config = load_config(args.config, env_file=args.env_file)
    except CognumbersError as e:
        log_error(e)
        return 1

    setup_logging(log_file_path=config.log_file, level=config.log_level)
    client = CognumbersClient(config)

    try:
        return asyncio.run(_run(args, client))
    except KeyboardInterrupt:
        return 130
    except CognumbersError as e:
        log_error(e)
        return 1
