# Area: Resolution
"""
cognumbers._resolution.attempt — Resolution attempt tracking
============================================================

Transient phase state for one game's resolution. Owned by the call
that created it, or by the orchestrator until the submission settles
when that call is cancelled mid-submit. Nothing is persisted, so a
restarted client starts over from FETCHING_HANDLES.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .enums import PHASE_ORDER, ResolutionPhase
from ..errors import TransactionRevertedError

logger = logging.getLogger("cognumbers.resolution")

PhaseListener = Callable[[int, ResolutionPhase], None]


@dataclass
class ResolutionAttempt:
    """
    Phase tracker for a single resolution attempt.

    Attributes:
        game_id: Game being resolved
        phase: Current phase
        history: Phases entered so far, in order
        failed_phase: Phase that was running when the attempt failed
        error: The exception that ended the attempt
        tx_hash: Hash of the broadcast resolveWinner transaction, once known
        submission: The running resolveWinner task, set on entering SUBMITTING
        listener: Optional callback notified on every phase change
    """

    game_id: int
    phase: ResolutionPhase = ResolutionPhase.FETCHING_HANDLES
    history: List[ResolutionPhase] = field(default_factory=list)
    failed_phase: Optional[ResolutionPhase] = None
    error: Optional[BaseException] = None
    tx_hash: Optional[str] = None
    submission: Optional[asyncio.Future] = field(default=None, repr=False)
    listener: Optional[PhaseListener] = None

    def __post_init__(self):
        self.history.append(self.phase)
        self._notify()

    @property
    def submitted(self) -> bool:
        """True once a resolveWinner transaction reached the chain."""
        return self.tx_hash is not None

    @property
    def is_finished(self) -> bool:
        return self.phase in (ResolutionPhase.DONE, ResolutionPhase.FAILED)

    def advance(self, next_phase: ResolutionPhase) -> None:
        """
        Move to the next phase.

        Raises:
            ValueError: If ``next_phase`` does not directly follow the current phase
        """
        if PHASE_ORDER.get(self.phase) != next_phase:
            raise ValueError(
                f"Invalid phase change {self.phase.value} -> {next_phase.value}"
            )
        self.phase = next_phase
        self.history.append(next_phase)
        logger.info("Game %d: %s", self.game_id, next_phase.value)
        self._notify()

    def fail(self, error: BaseException) -> None:
        """End the attempt in FAILED, remembering where it broke."""
        if self.phase == ResolutionPhase.FAILED:
            return
        self.failed_phase = self.phase
        self.error = error
        if isinstance(error, TransactionRevertedError) and error.tx_hash:
            self.tx_hash = error.tx_hash
        self.phase = ResolutionPhase.FAILED
        self.history.append(ResolutionPhase.FAILED)
        logger.warning("Game %d: resolution failed during %s: %s",
                       self.game_id, self.failed_phase.value, error)
        self._notify()

    def _notify(self) -> None:
        if self.listener is not None:
            self.listener(self.game_id, self.phase)
