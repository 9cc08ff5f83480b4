# Area: Resolution
"""
cognumbers._resolution.enums — Resolution Phase Enum
====================================================

Phases of one resolution attempt. Phases run strictly in order; an
attempt ends in DONE or FAILED.
"""

from enum import Enum


class ResolutionPhase(Enum):
    """
    Phases of a resolution attempt.

    Phase transitions:
    FETCHING_HANDLES -> DECRYPTING (every player has a non-zero handle)
    DECRYPTING -> COMPUTING (whole batch decrypted)
    COMPUTING -> SUBMITTING (always, also when nobody wins)
    SUBMITTING -> DONE (transaction included)
    Any phase -> FAILED (on error)
    """
    FETCHING_HANDLES = "FETCHING_HANDLES"
    DECRYPTING = "DECRYPTING"
    COMPUTING = "COMPUTING"
    SUBMITTING = "SUBMITTING"
    DONE = "DONE"
    FAILED = "FAILED"


PHASE_ORDER = {
    ResolutionPhase.FETCHING_HANDLES: ResolutionPhase.DECRYPTING,
    ResolutionPhase.DECRYPTING: ResolutionPhase.COMPUTING,
    ResolutionPhase.COMPUTING: ResolutionPhase.SUBMITTING,
    ResolutionPhase.SUBMITTING: ResolutionPhase.DONE,
}
