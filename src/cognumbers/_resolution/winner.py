# Area: Resolution
"""
cognumbers._resolution.winner — Minimum unique number rule
==========================================================

Among the values picked by exactly one player, the smallest wins.
If every value was picked more than once there is no winner.
"""

from collections import Counter
from typing import Iterable, Tuple

from ..types import WinnerResult


def minimum_unique_winner(choices: Iterable[Tuple[str, int]]) -> WinnerResult:
    """
    Compute the winner of a set of (player, value) choices.

    Uniqueness means at most one player holds any candidate value, so no
    tie-break is needed and the result does not depend on input order.

    Args:
        choices: (player, value) pairs, one per joined player

    Returns:
        WinnerResult with the winning player and value, or an empty
        WinnerResult when no value is unique
    """
    pairs = list(choices)
    counts = Counter(value for _, value in pairs)

    best = None
    for player, value in pairs:
        if counts[value] != 1:
            continue
        if best is None or value < best[1]:
            best = (player, value)

    if best is None:
        return WinnerResult()
    return WinnerResult(winner=best[0], value=best[1])
