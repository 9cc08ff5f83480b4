"""
cognumbers — Sealed-choice minimum unique number game client
============================================================

Client-side coordination for an on-chain game where players submit
encrypted choices (1-10), and after the deadline the smallest number
picked by exactly one player wins.

Quick Start (read-only):
    from cognumbers import CognumbersClient, load_config
    client = CognumbersClient(load_config("config.json"))
    games = await client.list_games()

Playing and resolving:
    from cognumbers import EncryptionService, AttestationService
    class MyEncryption(EncryptionService): ...
    class MyAttestation(AttestationService): ...
    client = CognumbersClient(config, encryption=MyEncryption(),
                              attestation=MyAttestation())
    await client.join_game(game_id, 7)
    outcome = await client.resolve_game(game_id)

Resolution runs FETCHING_HANDLES -> DECRYPTING -> COMPUTING ->
SUBMITTING -> DONE. Nothing reaches the chain before SUBMITTING, so a
failed attempt can be re-run from the start.
"""

from ._config import ClientConfig, load_config, build_config
from ._chain.contract import GameContract
from ._crypto.attested_decryption import AttestedDecryptionClient, backoff_delay_ms
from ._crypto.encryption_gateway import EncryptionGateway
from ._lifecycle.enums import GameStatus, LifecycleEvent
from ._lifecycle.state_machine import GameLifecycle
from ._registry.events import EventSubscriber
from ._registry.reader import GameRegistryReader
from ._resolution.enums import ResolutionPhase
from ._resolution.orchestrator import ResolutionOrchestrator
from ._resolution.winner import minimum_unique_winner
from ._shared.logging_config import setup_logging
from .client import CognumbersClient
from .services import AttestationService, EncryptionService
from .errors import (
    CognumbersError,
    ValidationError,
    CiphertextVersionError,
    ConfigError,
    DecryptionBatchError,
    DataIntegrityError,
    GameStateError,
    ResolutionInProgressError,
    TransactionNotSubmittedError,
    TransactionRevertedError,
)
from .types import (
    Game,
    Ciphertext,
    DecryptedValue,
    RevealedChoice,
    WinnerResult,
    ResolutionOutcome,
    MIN_NUMBER,
    MAX_NUMBER,
    MAX_PLAYERS,
    MIN_PLAYERS,
    ZERO_ADDRESS,
    ZERO_HANDLE,
)

__all__ = [
    # Main classes
    "CognumbersClient",
    "ClientConfig",
    "load_config",
    "build_config",
    "setup_logging",
    # Services
    "EncryptionService",
    "AttestationService",
    # Components
    "GameContract",
    "GameRegistryReader",
    "EventSubscriber",
    "EncryptionGateway",
    "AttestedDecryptionClient",
    "backoff_delay_ms",
    "ResolutionOrchestrator",
    "ResolutionPhase",
    "GameLifecycle",
    "GameStatus",
    "LifecycleEvent",
    "minimum_unique_winner",
    # Errors
    "CognumbersError",
    "ValidationError",
    "CiphertextVersionError",
    "ConfigError",
    "DecryptionBatchError",
    "DataIntegrityError",
    "GameStateError",
    "ResolutionInProgressError",
    "TransactionNotSubmittedError",
    "TransactionRevertedError",
    # Types
    "Game",
    "Ciphertext",
    "DecryptedValue",
    "RevealedChoice",
    "WinnerResult",
    "ResolutionOutcome",
    "MIN_NUMBER",
    "MAX_NUMBER",
    "MAX_PLAYERS",
    "MIN_PLAYERS",
    "ZERO_ADDRESS",
    "ZERO_HANDLE",
]
__version__ = "1.0.0"
