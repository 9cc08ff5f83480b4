"""
cognumbers.stats — Leaderboard, summaries and display formatting
================================================================

Derived views over a game listing. Amounts stay in wei until they are
formatted.
"""

import time
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from web3 import Web3

from ._lifecycle.enums import GameStatus
from .types import Game, ZERO_ADDRESS


@dataclass
class LeaderboardEntry:
    address: str
    wins: int
    earnings: int


@dataclass
class GamesSummary:
    total: int
    by_status: Dict[GameStatus, int]
    total_prizes: int


def leaderboard(games: Iterable[Game], limit: int = 10) -> List[LeaderboardEntry]:
    """Winners of finished games ranked by earnings (wei), then wins."""
    entries: Dict[str, LeaderboardEntry] = {}
    for game in games:
        if game.status != GameStatus.FINISHED or not game.has_winner:
            continue
        entry = entries.setdefault(game.winner, LeaderboardEntry(game.winner, 0, 0))
        entry.wins += 1
        entry.earnings += game.expected_prize_pool
    ranked = sorted(entries.values(), key=lambda e: (e.earnings, e.wins), reverse=True)
    return ranked[:limit]


def summarize(games: Iterable[Game]) -> GamesSummary:
    games = list(games)
    by_status = {status: 0 for status in GameStatus}
    for game in games:
        by_status[game.status] += 1
    total_prizes = sum(
        g.expected_prize_pool for g in games if g.status == GameStatus.FINISHED
    )
    return GamesSummary(total=len(games), by_status=by_status, total_prizes=total_prizes)


def format_entry_fee(entry_fee: int) -> str:
    """Wei -> ether string without trailing zeros."""
    ether = Web3.from_wei(entry_fee, "ether")
    return _plain(ether)


def format_prize(entry_fee: int, player_count: int, places: int = 4) -> str:
    ether = Web3.from_wei(entry_fee * player_count, "ether")
    return f"{Decimal(ether):.{places}f}"


def format_deadline(deadline: int) -> str:
    return datetime.fromtimestamp(deadline).strftime("%Y-%m-%d %H:%M:%S")


def is_expired(deadline: int, now: Optional[float] = None) -> bool:
    now = time.time() if now is None else now
    return now > deadline


def time_remaining(deadline: int, now: Optional[float] = None) -> str:
    now = time.time() if now is None else now
    diff = int(deadline - now)
    if diff <= 0:
        return "Expired"
    hours, rest = divmod(diff, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


def shorten_address(address: str, start_chars: int = 2, end_chars: int = 4) -> str:
    """0x1234abcd... -> 0x12...abcd"""
    if not address or len(address) < 10:
        return address
    return f"{address[:start_chars + 2]}...{address[-end_chars:]}"


def mask_address(address: str) -> str:
    """Minimal form for public leaderboards: 0x12••••cd"""
    if not address or len(address) < 10:
        return address
    return f"{address[:4]}••••{address[-2:]}"


def describe_winner(game: Game) -> str:
    if game.winner == ZERO_ADDRESS:
        return "none"
    return f"{shorten_address(game.winner)} ({game.winning_number})"


def _plain(value: Decimal) -> str:
    return format(Decimal(value).normalize(), "f")
