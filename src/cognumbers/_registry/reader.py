# Area: Registry
"""
cognumbers._registry.reader — Game Registry Reader
==================================================

Rebuilds the list of Game entities from the contract: one counter
read, then one ``getGame`` per index issued concurrently. A game whose
read fails is logged and left out; the listing still returns.

The last listing is kept as an advisory cache. It may be stale by the
time anyone looks at it, so operations that change state re-read the
game they act on instead of trusting the cache.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

from web3.exceptions import BadFunctionCallOutput

from .._lifecycle.enums import GameStatus
from ..errors import DataIntegrityError
from ..types import Game

logger = logging.getLogger("cognumbers.registry")


class GameRegistryReader:
    """
    Reads the game registry of one contract.

    Args:
        contract: Adapter exposing ``game_id_counter``, ``get_game`` and
            ``get_game_raw`` coroutines
        prefer_raw_reads: Skip the structured path and slice raw responses
    """

    def __init__(self, contract: Any, prefer_raw_reads: bool = False):
        self.contract = contract
        self.prefer_raw_reads = prefer_raw_reads
        self._cache: Dict[int, Game] = {}

    async def read_game(self, game_id: int) -> Game:
        """
        Read one game, falling back to the raw path when the structured
        response cannot be decoded.
        """
        if self.prefer_raw_reads:
            game = await self.contract.get_game_raw(game_id)
        else:
            try:
                game = await self.contract.get_game(game_id)
            except (BadFunctionCallOutput, DataIntegrityError) as e:
                logger.info("Structured decode of game %d unavailable (%s), using raw read",
                            game_id, e)
                game = await self.contract.get_game_raw(game_id)
        self._cache[game_id] = game
        return game

    async def read_all(self) -> List[Game]:
        """
        Read every game in index order (0..N-1), omitting failed reads.
        """
        total = await self.contract.game_id_counter()
        if total <= 0:
            self._cache = {}
            return []

        results = await asyncio.gather(
            *(self.read_game(game_id) for game_id in range(total)),
            return_exceptions=True,
        )

        games: List[Game] = []
        for game_id, result in enumerate(results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, BaseException):
                logger.warning("Failed to read game %d: %s", game_id, result)
                self._cache.pop(game_id, None)
                continue
            games.append(result)

        logger.info("Read %d of %d games", len(games), total)
        return games

    async def list_games(self, status: Optional[GameStatus] = None) -> List[Game]:
        """
        Caller-facing listing: most recent game first, optionally filtered.
        """
        games = await self.read_all()
        if status is not None:
            games = [g for g in games if g.status == status]
        return list(reversed(games))

    def cached_games(self) -> List[Game]:
        """Last known games, most recent first. May be stale."""
        return [self._cache[k] for k in sorted(self._cache, reverse=True)]

    def cached_game(self, game_id: int) -> Optional[Game]:
        return self._cache.get(game_id)

    def invalidate(self, game_id: Optional[int] = None) -> None:
        """Drop one cached game, or the whole cache."""
        if game_id is None:
            self._cache.clear()
        else:
            self._cache.pop(game_id, None)
