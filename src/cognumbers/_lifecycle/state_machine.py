# Area: Lifecycle
"""
cognumbers._lifecycle.state_machine — Game Lifecycle State Machine
==================================================================

Mirrors the contract's five-status model on the client so that
operations can be rejected before a transaction is built. The contract
remains authoritative; these checks only save a doomed round trip.
"""

import logging
from typing import Optional

from .enums import GameStatus, LifecycleEvent
from ..errors import GameStateError
from ..types import Game, MAX_PLAYERS

logger = logging.getLogger("cognumbers.lifecycle")


# Valid status transitions: {current_status: {event: next_status}}
TRANSITIONS = {
    GameStatus.OPEN: {
        LifecycleEvent.FINALIZE: GameStatus.CALCULATING,
        LifecycleEvent.CANCEL: GameStatus.CANCELLED,
    },
    GameStatus.CALCULATING: {
        LifecycleEvent.RESOLVE: GameStatus.FINISHED,
        LifecycleEvent.ABANDON: GameStatus.REFUNDED,
    },
    GameStatus.FINISHED: {},
    GameStatus.CANCELLED: {},
    GameStatus.REFUNDED: {},
}


class GameLifecycle:
    """
    State machine for one game's status.

    Attributes:
        game_id: The tracked game
        current_status: The status the machine is in
    """

    def __init__(self, game_id: int, status: GameStatus = GameStatus.OPEN):
        self.game_id = game_id
        self.current_status = GameStatus(status)

    @classmethod
    def for_game(cls, game: Game) -> "GameLifecycle":
        return cls(game.game_id, game.status)

    def can_transition(self, event: LifecycleEvent) -> bool:
        """
        Check if a transition is valid from the current status.

        Args:
            event: The event to check

        Returns:
            True if the transition is valid, False otherwise
        """
        return event in TRANSITIONS.get(self.current_status, {})

    def transition(self, event: LifecycleEvent) -> GameStatus:
        """
        Execute a status transition.

        Args:
            event: The event triggering the transition

        Returns:
            The new status after transition

        Raises:
            GameStateError: If the transition is not valid
        """
        if not self.can_transition(event):
            raise GameStateError(
                self.game_id,
                f"invalid transition {event.value} from {self.current_status.name}",
            )
        next_status = TRANSITIONS[self.current_status][event]
        logger.debug(
            "Game %s: %s -> %s (%s)",
            self.game_id, self.current_status.name, next_status.name, event.value,
        )
        self.current_status = next_status
        return next_status

    @property
    def is_terminal(self) -> bool:
        return self.current_status.is_terminal


def check_can_join(
    game: Game,
    player: str,
    now: int,
    already_joined: bool,
    max_players: int = MAX_PLAYERS,
) -> None:
    """Raise GameStateError unless ``player`` may join ``game`` at ``now``."""
    if game.status != GameStatus.OPEN:
        raise GameStateError(game.game_id, f"not open (status {game.status.name})")
    if now >= game.deadline:
        raise GameStateError(
            game.game_id, "deadline passed",
            details={"deadline": game.deadline, "now": now},
        )
    if game.player_count >= max_players:
        raise GameStateError(
            game.game_id, "game full", details={"max_players": max_players},
        )
    if already_joined:
        raise GameStateError(game.game_id, f"{player} already joined")


def check_can_finalize(game: Game, now: int) -> None:
    """Raise GameStateError unless ``game`` may move to Calculating at ``now``."""
    GameLifecycle.for_game(game).transition(LifecycleEvent.FINALIZE)
    if now < game.deadline:
        raise GameStateError(
            game.game_id, "deadline not passed",
            details={"deadline": game.deadline, "now": now},
        )
    if game.player_count <= 0:
        raise GameStateError(game.game_id, "no players joined")


def check_can_resolve(game: Game, revealed_count: Optional[int] = None) -> None:
    """
    Raise GameStateError unless ``game`` may be resolved.

    ``revealed_count`` is the number of decrypted values about to be
    submitted; when given it must cover every joined player.
    """
    GameLifecycle.for_game(game).transition(LifecycleEvent.RESOLVE)
    if revealed_count is not None and revealed_count != game.player_count:
        raise GameStateError(
            game.game_id, "decrypted values do not cover every player",
            details={"expected": game.player_count, "provided": revealed_count},
        )


def check_can_cancel(game: Game, caller: str, admin: Optional[str] = None) -> None:
    """Raise GameStateError unless ``caller`` may cancel ``game``."""
    GameLifecycle.for_game(game).transition(LifecycleEvent.CANCEL)
    allowed = {game.creator.lower()}
    if admin:
        allowed.add(admin.lower())
    if caller.lower() not in allowed:
        raise GameStateError(game.game_id, f"{caller} is neither creator nor admin")


def check_can_claim_refund(game: Game, eligible: bool) -> None:
    """Raise GameStateError unless a refund can be claimed for ``game``."""
    if game.status not in (GameStatus.CANCELLED, GameStatus.REFUNDED):
        raise GameStateError(
            game.game_id, f"not refundable (status {game.status.name})"
        )
    if not eligible:
        raise GameStateError(game.game_id, "not eligible for refund")
