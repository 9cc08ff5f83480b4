"""
cognumbers.client — Game client facade
======================================

Wires the contract adapter, registry reader, crypto clients, lifecycle
guards and resolution orchestrator together. Each collaborator is
constructed once here and shared by every operation.

Usage:
    config = load_config("config.json")
    client = CognumbersClient(config, encryption=MyEncryption(),
                              attestation=MyAttestation())
    games = await client.list_games()
    await client.join_game(game_id, 7)
    outcome = await client.resolve_game(game_id)
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Optional

from ._chain.abi import GAME_EVENTS
from ._chain.contract import GameContract
from ._config import ClientConfig
from ._crypto.attested_decryption import AttestedDecryptionClient
from ._crypto.encryption_gateway import EncryptionGateway, validate_choice
from ._lifecycle.enums import GameStatus
from ._lifecycle.state_machine import (
    check_can_cancel,
    check_can_claim_refund,
    check_can_finalize,
    check_can_join,
)
from ._registry.events import EventSubscriber
from ._registry.reader import GameRegistryReader
from ._resolution.attempt import PhaseListener
from ._resolution.orchestrator import ResolutionOrchestrator
from .errors import ConfigError, ValidationError
from .services import AttestationService, EncryptionService
from .types import Game, ResolutionOutcome

logger = logging.getLogger("cognumbers.client")

# Events after which the cached registry is out of date
REFRESH_EVENTS = (
    "GameCreated",
    "PlayerJoined",
    "GameFinalized",
    "WinnerDetermined",
    "NoWinner",
    "GameCancelled",
    "RefundsInitiated",
)


class CognumbersClient:
    """
    One client per (contract, wallet).

    Join needs an EncryptionService and resolve needs an
    AttestationService; read-only use needs neither.
    """

    def __init__(
        self,
        config: ClientConfig,
        encryption: Optional[EncryptionService] = None,
        attestation: Optional[AttestationService] = None,
        contract: Any = None,
        wallet: Any = None,
        clock: Optional[Callable[[], float]] = None,
        sleep: Optional[Callable] = None,
        phase_listener: Optional[PhaseListener] = None,
    ):
        self.config = config
        self.contract = contract or GameContract.from_config(config)
        self.wallet = wallet if wallet is not None else getattr(self.contract, "account", None)
        self.registry = GameRegistryReader(self.contract, prefer_raw_reads=config.prefer_raw_reads)
        self.events = EventSubscriber(self.contract, poll_interval=config.poll_interval_seconds,
                                      sleep=sleep)
        self._clock = clock or time.time

        self.encryption: Optional[EncryptionGateway] = None
        if encryption is not None:
            self.encryption = EncryptionGateway(
                encryption, config.contract_address,
                expected_version=config.expected_ciphertext_version,
            )

        self.decryption: Optional[AttestedDecryptionClient] = None
        self.orchestrator: Optional[ResolutionOrchestrator] = None
        if attestation is not None:
            self.decryption = AttestedDecryptionClient(
                attestation, self.wallet,
                max_attempts=config.decrypt_max_attempts,
                base_delay_ms=config.decrypt_base_delay_ms,
                sleep=sleep,
            )
            self.orchestrator = ResolutionOrchestrator(
                self.contract, self.registry, self.decryption, listener=phase_listener,
            )

    @property
    def player_address(self) -> str:
        address = getattr(self.wallet, "address", None)
        if not address:
            raise ConfigError(["a wallet (private_key) is required for this operation"])
        return address

    def now(self) -> int:
        return int(self._clock())

    # ── Reads ─────────────────────────────────────────────────────

    async def list_games(self, status: Optional[GameStatus] = None) -> List[Game]:
        """All games, most recent first."""
        return await self.registry.list_games(status=status)

    async def get_game(self, game_id: int) -> Game:
        return await self.registry.read_game(game_id)

    async def get_players(self, game_id: int) -> List[str]:
        return await self.contract.get_players(game_id)

    # ── Writes ────────────────────────────────────────────────────

    async def create_game(self, entry_fee: int, duration_seconds: int) -> Optional[int]:
        if entry_fee < 0:
            raise ValidationError("Entry fee cannot be negative", identifier=entry_fee)
        if duration_seconds <= 0:
            raise ValidationError("Duration must be positive", identifier=duration_seconds)
        game_id = await self.contract.create_game(entry_fee, duration_seconds)
        logger.info("Created game %s (fee=%d wei, duration=%ds)", game_id, entry_fee,
                    duration_seconds)
        self.registry.invalidate()
        return game_id

    async def join_game(self, game_id: int, choice: int) -> str:
        """Encrypt ``choice`` and join ``game_id`` paying its entry fee."""
        if self.encryption is None:
            raise ConfigError(["an EncryptionService is required to join games"])
        validate_choice(choice)
        player = self.player_address

        game = await self.registry.read_game(game_id)
        joined = await self.contract.has_joined(game_id, player)
        check_can_join(game, player, self.now(), joined, max_players=self.config.max_players)

        ciphertext = await self.encryption.encrypt(choice, player)
        tx_hash = await self.contract.join_game(game_id, ciphertext.raw, game.entry_fee)
        logger.info("Joined game %d as %s (handle %s)", game_id, player, ciphertext.handle_hex)
        self.registry.invalidate(game_id)
        return tx_hash

    async def finalize_game(self, game_id: int) -> str:
        game = await self.registry.read_game(game_id)
        check_can_finalize(game, self.now())
        tx_hash = await self.contract.finalize_game(game_id)
        logger.info("Finalized game %d", game_id)
        self.registry.invalidate(game_id)
        return tx_hash

    async def resolve_game(self, game_id: int) -> ResolutionOutcome:
        """Run the full resolution pipeline for a game in Calculating."""
        if self.orchestrator is None:
            raise ConfigError(["an AttestationService is required to resolve games"])
        outcome = await self.orchestrator.resolve(game_id)
        try:
            outcome.final_status = await self.orchestrator.read_final_status(game_id)
        except Exception as e:
            logger.warning("Game %d resolved in %s but status read-back failed: %s",
                           game_id, outcome.tx_hash, e)
        return outcome

    async def claim_refund(self, game_id: int) -> str:
        player = self.player_address
        game = await self.registry.read_game(game_id)
        eligible = await self.contract.can_claim_refund(game_id, player)
        check_can_claim_refund(game, eligible)
        tx_hash = await self.contract.claim_refund(game_id)
        logger.info("Refund claimed for game %d by %s", game_id, player)
        self.registry.invalidate(game_id)
        return tx_hash

    async def cancel_game(self, game_id: int) -> str:
        game = await self.registry.read_game(game_id)
        check_can_cancel(game, self.player_address, admin=self.config.admin_address)
        tx_hash = await self.contract.cancel_game(game_id)
        logger.info("Cancelled game %d", game_id)
        self.registry.invalidate(game_id)
        return tx_hash

    # ── Events ────────────────────────────────────────────────────

    def subscribe_refresh(self, on_refresh: Optional[Callable[[List[Game]], Any]] = None) -> None:
        """Refresh the registry whenever a state-changing game event arrives."""

        async def refresh(event: Dict[str, Any]) -> None:
            game_id = event.get("args", {}).get("gameId")
            logger.info("%s for game %s, refreshing registry", event.get("event"), game_id)
            self.registry.invalidate(game_id)
            games = await self.registry.list_games()
            if on_refresh is not None:
                on_refresh(games)

        for topic in REFRESH_EVENTS:
            self.events.subscribe(topic, refresh)

    def subscribe(self, topic: str, callback: Callable) -> None:
        if topic not in GAME_EVENTS:
            raise ValidationError(f"Unknown event {topic}", identifier=topic)
        self.events.subscribe(topic, callback)

    async def watch(self) -> None:
        """Run the event loop until ``stop_watching()``."""
        await self.events.run()

    def stop_watching(self) -> None:
        self.events.stop()
