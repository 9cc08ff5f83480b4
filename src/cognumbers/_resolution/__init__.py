# Area: Resolution
"""
Resolution pipeline — fetch handles, attested decrypt, compute the
minimum unique number, submit the attested values on-chain.
"""

from .enums import ResolutionPhase
from .attempt import ResolutionAttempt
from .winner import minimum_unique_winner
from .orchestrator import ResolutionOrchestrator

__all__ = [
    "ResolutionPhase",
    "ResolutionAttempt",
    "minimum_unique_winner",
    "ResolutionOrchestrator",
]
