# Area: Resolution
"""Orchestrator — fetch handles, decrypt, compute the winner, submit on-chain."""

import asyncio
import functools
import logging
from typing import Any, Dict, List, Optional, Set, Tuple

from .attempt import PhaseListener, ResolutionAttempt
from .enums import ResolutionPhase
from .winner import minimum_unique_winner
from .._crypto.attested_decryption import AttestedDecryptionClient
from .._lifecycle.enums import GameStatus
from .._lifecycle.state_machine import check_can_resolve
from .._registry.reader import GameRegistryReader
from ..errors import CognumbersError, DataIntegrityError, ResolutionInProgressError
from ..types import Game, ResolutionOutcome, RevealedChoice, ZERO_HANDLE

logger = logging.getLogger("cognumbers.resolution")
HANDLE_BYTES = len(ZERO_HANDLE)


class ResolutionOrchestrator:
    """
    Runs resolution attempts for games in Calculating.

    Nothing touches the chain before SUBMITTING, so a failed or
    cancelled attempt can simply be run again. The in-process guard
    against two attempts on one game is advisory; the contract's
    status check decides.
    """

    def __init__(self, contract: Any, registry: GameRegistryReader,
                 decryption: AttestedDecryptionClient,
                 listener: Optional[PhaseListener] = None):
        self.contract, self.registry, self.decryption = contract, registry, decryption
        self.listener = listener
        self._in_flight: Set[int] = set()
        # Submissions whose caller was cancelled, kept until they settle
        self._detached: Dict[int, ResolutionAttempt] = {}

    def is_in_flight(self, game_id: int) -> bool:
        return game_id in self._in_flight

    async def resolve(self, game_id: int) -> ResolutionOutcome:
        if game_id in self._in_flight:
            raise ResolutionInProgressError(game_id)
        self._in_flight.add(game_id)
        attempt = ResolutionAttempt(game_id=game_id, listener=self.listener)
        release = True
        try:
            return await self._run(attempt)
        except asyncio.CancelledError as e:
            submission = attempt.submission
            if submission is None:
                attempt.fail(e)
            elif submission.done():
                self._settle(attempt, submission)
            else:
                release = False
                self._detached[game_id] = attempt
                submission.add_done_callback(functools.partial(self._settle, attempt))
                logger.warning("Game %d: caller cancelled while submitting; "
                               "holding the game until the transaction settles", game_id)
            raise
        except CognumbersError as e:
            attempt.fail(e)
            e.details.setdefault("failed_phase", attempt.failed_phase.value)
            e.details.setdefault("submitted", attempt.submitted)
            raise
        except Exception as e:
            attempt.fail(e)
            raise
        finally:
            if release:
                self._in_flight.discard(game_id)

    def _settle(self, attempt: ResolutionAttempt, submission: asyncio.Future) -> None:
        """Record the outcome of a submission nobody is awaiting, then release the game."""
        game_id = attempt.game_id
        try:
            if submission.cancelled():
                attempt.fail(asyncio.CancelledError())
            elif submission.exception() is not None:
                error = submission.exception()
                attempt.fail(error)
                logger.error("Game %d: detached resolveWinner failed: %s", game_id, error)
            else:
                attempt.tx_hash = submission.result()
                attempt.advance(ResolutionPhase.DONE)
                self.registry.invalidate(game_id)
                logger.info("Game %d: detached resolveWinner included in %s",
                            game_id, attempt.tx_hash)
        finally:
            self._detached.pop(game_id, None)
            self._in_flight.discard(game_id)

    async def _run(self, attempt: ResolutionAttempt) -> ResolutionOutcome:
        game_id = attempt.game_id
        game, players, handles = await self.fetch_handles(game_id)

        attempt.advance(ResolutionPhase.DECRYPTING)
        decrypted = await self.decryption.decrypt_batch(handles)
        if len(decrypted) != len(players):
            raise DataIntegrityError(
                f"Decrypted {len(decrypted)} values for {len(players)} players",
                identifier=game_id,
            )
        revealed = [RevealedChoice(player=p, value=d.value, signatures=d.signatures)
                    for p, d in zip(players, decrypted)]

        attempt.advance(ResolutionPhase.COMPUTING)
        result = minimum_unique_winner((r.player, r.value) for r in revealed)
        if result.has_winner:
            logger.info("Game %d: local winner %s with %d", game_id, result.winner, result.value)
        else:
            logger.info("Game %d: no unique number, submitting for settlement", game_id)
        check_can_resolve(game, len(revealed))

        attempt.advance(ResolutionPhase.SUBMITTING)
        # Once issued, the submission runs to completion even if the caller is cancelled.
        attempt.submission = asyncio.ensure_future(self.contract.resolve_winner(
            game_id,
            [r.value for r in revealed],
            [list(r.signatures) for r in revealed],
        ))
        tx_hash = await asyncio.shield(attempt.submission)
        attempt.tx_hash = tx_hash
        attempt.advance(ResolutionPhase.DONE)

        self.registry.invalidate(game_id)
        return ResolutionOutcome(
            game_id=game_id,
            winner=result.winner,
            winning_number=result.value,
            tx_hash=tx_hash,
            revealed=len(revealed),
            players=list(players),
        )

    async def fetch_handles(self, game_id: int) -> Tuple[Game, List[str], List[bytes]]:
        """
        Re-read the game and collect one non-zero handle per player.

        Raises:
            GameStateError: If the game is not in Calculating
            DataIntegrityError: If players are missing or a handle is zero/malformed
        """
        game = await self.registry.read_game(game_id)
        check_can_resolve(game)

        players = await self.contract.get_players(game_id)
        if not players or len(players) != game.player_count:
            raise DataIntegrityError(
                f"Game {game_id} lists {len(players)} players, record says {game.player_count}",
                identifier=game_id,
            )

        handles = await asyncio.gather(
            *(self.contract.get_player_choice_handle(game_id, p) for p in players)
        )
        for player, handle in zip(players, handles):
            if not handle or bytes(handle) == ZERO_HANDLE:
                raise DataIntegrityError(
                    f"No choice recorded for {player} in game {game_id}", identifier=player,
                )
            if len(handle) != HANDLE_BYTES:
                raise DataIntegrityError(
                    f"Malformed handle for {player}: {len(handle)} bytes", identifier=player,
                )
        logger.debug("Game %d: %d handles fetched", game_id, len(handles))
        return game, list(players), [bytes(h) for h in handles]

    async def read_final_status(self, game_id: int) -> GameStatus:
        """Status after inclusion, as recorded by the contract."""
        game = await self.registry.read_game(game_id)
        return game.status
