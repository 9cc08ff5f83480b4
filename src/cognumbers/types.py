"""
cognumbers.types — Game entities and resolution value types
===========================================================

Typed records shared by the registry reader, the crypto clients and
the resolution pipeline. All are importable from the package root:

    from cognumbers import Game, RevealedChoice, WinnerResult

Fixed-width on-chain fields have no null; absence is the all-zero
sentinel (``ZERO_ADDRESS`` for the winner, ``0`` for the winning
number, ``ZERO_HANDLE`` for a choice handle).
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, TypedDict

from ._lifecycle.enums import GameStatus

MIN_NUMBER = 1
MAX_NUMBER = 10
MAX_PLAYERS = 10
MIN_PLAYERS = 2

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
ZERO_HANDLE = b"\x00" * 32

CIPHERTEXT_VERSION = 1
HANDLE_TYPE_EUINT256 = 8


@dataclass(frozen=True)
class Game:
    """
    One game as reconstructed from the contract's ``getGame`` record.

    Attributes:
        game_id: Monotonic game identifier (index into the registry)
        creator: Checksum address of the creator
        status: Current lifecycle status
        entry_fee: Entry fee in wei
        deadline: Unix timestamp after which the game can be finalized
        player_count: Number of joined players
        winner: Checksum address of the winner, ZERO_ADDRESS when absent
        winning_number: Winning value, 0 when absent
        prize_pool: Prize pool in wei
    """

    game_id: int
    creator: str
    status: GameStatus
    entry_fee: int
    deadline: int
    player_count: int
    winner: str
    winning_number: int
    prize_pool: int

    @property
    def has_winner(self) -> bool:
        return self.winner != ZERO_ADDRESS

    @property
    def expected_prize_pool(self) -> int:
        return self.entry_fee * self.player_count

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal


@dataclass(frozen=True)
class Ciphertext:
    """
    Versioned ciphertext returned by the encryption service.

    ``raw`` is what joinGame() receives; the contract keeps only the
    32-byte ``handle``.
    """

    version: int
    handle: bytes
    payload: bytes
    raw: bytes

    @property
    def handle_hex(self) -> str:
        return "0x" + self.handle.hex()


@dataclass(frozen=True)
class DecryptedValue:
    """One plaintext with the attesting service's signatures."""

    value: int
    signatures: Tuple[bytes, ...] = ()


@dataclass(frozen=True)
class RevealedChoice:
    """A player's decrypted choice inside one resolution attempt."""

    player: str
    value: int
    signatures: Tuple[bytes, ...] = ()


@dataclass(frozen=True)
class WinnerResult:
    """Outcome of the minimum-unique-number rule. Both fields None when nobody wins."""

    winner: Optional[str] = None
    value: Optional[int] = None

    @property
    def has_winner(self) -> bool:
        return self.winner is not None


@dataclass
class ResolutionOutcome:
    """
    Result of a completed resolution attempt.

    Attributes:
        game_id: The resolved game
        winner: Locally computed winner (advisory; the contract decides)
        winning_number: Locally computed winning value
        tx_hash: Hash of the included resolveWinner transaction
        revealed: Number of decrypted choices submitted
        final_status: Status read back after inclusion, when available
    """

    game_id: int
    winner: Optional[str]
    winning_number: Optional[int]
    tx_hash: str
    revealed: int
    final_status: Optional[GameStatus] = None
    players: List[str] = field(default_factory=list)


class AttestedDecryptResult(TypedDict):
    """One entry of the attestation service's response.

    Fields
    ------
    value : int
        The plaintext. Missing or None means the service did not decrypt it.
    signatures : List[bytes]
        Signatures from the attesting service over the plaintext.
    """
    value: int
    signatures: List[bytes]
