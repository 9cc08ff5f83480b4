# Area: Lifecycle
"""
cognumbers._lifecycle.enums — Game Lifecycle Enums
==================================================

Defines the on-chain game statuses and the events that move a game
between them.
"""

from enum import Enum, IntEnum


class GameStatus(IntEnum):
    """
    Status of a game as stored by the contract (uint8).

    State transitions:
    OPEN -> CALCULATING (on FINALIZE)
    OPEN -> CANCELLED (on CANCEL)
    CALCULATING -> FINISHED (on RESOLVE, with or without a winner)
    CALCULATING -> REFUNDED (on ABANDON)
    FINISHED, CANCELLED and REFUNDED are terminal.
    """
    OPEN = 0
    CALCULATING = 1
    FINISHED = 2
    CANCELLED = 3
    REFUNDED = 4

    @property
    def label(self) -> str:
        return self.name

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({
    GameStatus.FINISHED,
    GameStatus.CANCELLED,
    GameStatus.REFUNDED,
})


class LifecycleEvent(Enum):
    """
    Events that trigger status transitions.

    Events are triggered by:
    - FINALIZE: finalizeGame() after the deadline
    - CANCEL: cancelGame() by the creator or an admin while open
    - RESOLVE: resolveWinner() with attested values
    - ABANDON: the contract's refund path for a stuck calculation
    """
    FINALIZE = "FINALIZE"
    CANCEL = "CANCEL"
    RESOLVE = "RESOLVE"
    ABANDON = "ABANDON"
