# Area: Crypto
"""
cognumbers._crypto.encryption_gateway — Encryption Gateway Client
=================================================================

Validates a player's choice, asks the encryption service for a
ciphertext bound to (player, contract), and checks the version tag of
what comes back. A version mismatch means a later decryption would
target the wrong key material, so it is an error, never a warning.
No retry here; the caller decides whether to retry the whole join.
"""

from __future__ import annotations

import logging
from typing import Union

from web3 import Web3

from ..errors import CiphertextVersionError, ValidationError
from ..services import EncryptionService
from ..types import (
    Ciphertext,
    CIPHERTEXT_VERSION,
    HANDLE_TYPE_EUINT256,
    MAX_NUMBER,
    MIN_NUMBER,
    ZERO_ADDRESS,
)

logger = logging.getLogger("cognumbers.encryption")

VERSION_BYTES = 4
HANDLE_BYTES = 32
HEADER_BYTES = VERSION_BYTES + HANDLE_BYTES


def require_address(address: str, role: str) -> str:
    """Return the checksum form of ``address``; reject malformed and zero addresses."""
    if not isinstance(address, str) or not Web3.is_address(address):
        raise ValidationError(f"Malformed {role} address: {address!r}", identifier=address)
    checksummed = Web3.to_checksum_address(address)
    if checksummed == ZERO_ADDRESS:
        raise ValidationError(f"Zero {role} address", identifier=address)
    return checksummed


def validate_choice(value: int) -> int:
    """Reject anything that is not an integer in [MIN_NUMBER, MAX_NUMBER]."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(
            f"Choice must be an integer, got {type(value).__name__}", identifier=value
        )
    if not MIN_NUMBER <= value <= MAX_NUMBER:
        raise ValidationError(
            f"Choice {value} outside [{MIN_NUMBER}, {MAX_NUMBER}]", identifier=value
        )
    return value


def parse_ciphertext(blob: Union[bytes, str], player: str = "",
                     expected_version: int = CIPHERTEXT_VERSION) -> Ciphertext:
    """
    Split a versioned ciphertext blob into version, handle and payload.

    Raises:
        ValidationError: If the blob is not hex/bytes or is too short
        CiphertextVersionError: If the version tag is not ``expected_version``
    """
    raw = _to_bytes(blob)
    if len(raw) < HEADER_BYTES:
        raise ValidationError(
            f"Ciphertext too short: {len(raw)} bytes, need at least {HEADER_BYTES}",
            identifier=player,
        )
    version = int.from_bytes(raw[:VERSION_BYTES], "big")
    if version != expected_version:
        raise CiphertextVersionError(expected=expected_version, actual=version, player=player)
    return Ciphertext(
        version=version,
        handle=raw[VERSION_BYTES:HEADER_BYTES],
        payload=raw[HEADER_BYTES:],
        raw=raw,
    )


def _to_bytes(blob: Union[bytes, str]) -> bytes:
    if isinstance(blob, (bytes, bytearray)):
        return bytes(blob)
    if isinstance(blob, str):
        text = blob[2:] if blob.startswith(("0x", "0X")) else blob
        try:
            return bytes.fromhex(text)
        except ValueError as e:
            raise ValidationError(f"Ciphertext is not valid hex: {e}") from e
    raise ValidationError(f"Unsupported ciphertext type {type(blob).__name__}")


class EncryptionGateway:
    """
    Wraps one injected EncryptionService for a given game contract.

    Usage:
        gateway = EncryptionGateway(service, contract_address)
        ciphertext = await gateway.encrypt(7, player_address)
        # ciphertext.raw goes to joinGame(); ciphertext.handle is stored on-chain
    """

    def __init__(self, service: EncryptionService, contract_address: str,
                 expected_version: int = CIPHERTEXT_VERSION,
                 handle_type: int = HANDLE_TYPE_EUINT256):
        self.service = service
        self.contract_address = require_address(contract_address, "contract")
        self.expected_version = expected_version
        self.handle_type = handle_type

    async def encrypt(self, value: int, player_address: str,
                      contract_address: str = None) -> Ciphertext:
        """
        Encrypt one choice for ``player_address``.

        Args:
            value: The choice, 1..10
            player_address: Address that will submit the ciphertext
            contract_address: Overrides the gateway's contract address

        Returns:
            The parsed, version-checked Ciphertext
        """
        validate_choice(value)
        player = require_address(player_address, "player")
        dapp = (require_address(contract_address, "contract")
                if contract_address else self.contract_address)

        logger.info("Encrypting choice for %s on %s", player, dapp)
        blob = await self.service.encrypt(value, player, dapp, self.handle_type)
        ciphertext = parse_ciphertext(blob, player=player,
                                      expected_version=self.expected_version)
        logger.debug(
            "Ciphertext v%d handle=%s payload=%d bytes",
            ciphertext.version, ciphertext.handle_hex, len(ciphertext.payload),
        )
        return ciphertext
