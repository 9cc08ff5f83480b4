# Area: Lifecycle
"""
Game lifecycle — the five-status model gating which operations are legal.
"""

from .enums import GameStatus, LifecycleEvent, TERMINAL_STATUSES
from .state_machine import (
    GameLifecycle,
    check_can_join,
    check_can_finalize,
    check_can_resolve,
    check_can_cancel,
    check_can_claim_refund,
)

__all__ = [
    "GameStatus",
    "LifecycleEvent",
    "TERMINAL_STATUSES",
    "GameLifecycle",
    "check_can_join",
    "check_can_finalize",
    "check_can_resolve",
    "check_can_cancel",
    "check_can_claim_refund",
]
