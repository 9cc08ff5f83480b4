# Area: Crypto
"""
cognumbers._crypto.attested_decryption — Attested Decryption Client
===================================================================

Bulk-decrypts ciphertext handles through the injected attestation
service, with bounded exponential backoff.

Atomic batches
--------------
Every retry reissues the whole batch and a failed batch yields no
values at all. Releasing some plaintexts while others are still
sealed would let whoever runs resolution learn part of the field
before payout.

Backoff
-------
Delay before attempt k (k >= 2) is ``base_delay_ms * 1.5 ** (k - 2)``:
1000, 1500, 2250, 3375 ms for the default five attempts.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional, Sequence

from ..errors import DataIntegrityError, DecryptionBatchError, ValidationError
from ..services import AttestationService
from ..types import DecryptedValue, ZERO_ADDRESS

logger = logging.getLogger("cognumbers.decryption")

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_BASE_DELAY_MS = 1000
BACKOFF_FACTOR = 1.5

SleepFn = Callable[[float], Awaitable[Any]]


def backoff_delay_ms(attempt: int, base_delay_ms: float = DEFAULT_BASE_DELAY_MS) -> float:
    """Delay in ms to wait before ``attempt`` (1-based). Zero before the first attempt."""
    if attempt <= 1:
        return 0
    return base_delay_ms * BACKOFF_FACTOR ** (attempt - 2)


def wallet_address(wallet: Any) -> str:
    """Return the address the wallet is bound to, or raise ValidationError."""
    address = getattr(wallet, "address", None)
    if not address or str(address).lower() == ZERO_ADDRESS:
        raise ValidationError("Wallet has no account bound to it", identifier=address)
    return str(address)


class AttestedDecryptionClient:
    """
    Decrypts batches of handles for one wallet-bound decryption channel.

    Attributes:
        service: The injected attestation service
        wallet: Wallet credential tied to an on-chain identity
        max_attempts: Attempt ceiling for one batch
        base_delay_ms: Delay before the second attempt
    """

    def __init__(
        self,
        service: AttestationService,
        wallet: Any,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        base_delay_ms: float = DEFAULT_BASE_DELAY_MS,
        sleep: Optional[SleepFn] = None,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.service = service
        self.wallet = wallet
        self.max_attempts = max_attempts
        self.base_delay_ms = base_delay_ms
        self._sleep = sleep or asyncio.sleep

    @property
    def address(self) -> str:
        return wallet_address(self.wallet)

    async def decrypt_batch(self, handles: Sequence[bytes]) -> List[DecryptedValue]:
        """
        Decrypt ``handles`` as one atomic batch.

        Args:
            handles: 32-byte handles, in the order their values are wanted

        Returns:
            One DecryptedValue per handle, positionally aligned

        Raises:
            ValidationError: If the wallet has no account
            DecryptionBatchError: If every attempt failed
            DataIntegrityError: If the service answered with the wrong
                number of entries or an entry without a plaintext
        """
        handles = list(handles)
        address = self.address
        if not handles:
            return []

        last_error: Optional[BaseException] = None
        results = None
        for attempt in range(1, self.max_attempts + 1):
            if attempt > 1:
                delay_ms = backoff_delay_ms(attempt, self.base_delay_ms)
                logger.warning(
                    "Decrypt attempt %d failed, retrying in %dms: %s",
                    attempt - 1, delay_ms, last_error,
                )
                await self._sleep(delay_ms / 1000)
            try:
                results = await self.service.attested_decrypt(self.wallet, handles)
                break
            except asyncio.CancelledError:
                raise
            except Exception as e:
                last_error = e
        else:
            logger.error(
                "Decryption of %d handles for %s failed after %d attempts",
                len(handles), address, self.max_attempts,
            )
            raise DecryptionBatchError(len(handles), self.max_attempts, last_error) from last_error

        logger.info("Decrypted %d handles for %s on attempt %d",
                    len(handles), address, attempt)
        return self._align(handles, results)

    def _align(self, handles: List[bytes], results: Any) -> List[DecryptedValue]:
        if results is None or len(results) != len(handles):
            got = None if results is None else len(results)
            raise DataIntegrityError(
                f"Decryption returned {got} results for {len(handles)} handles",
                identifier=f"batch[{len(handles)}]",
                details={"expected": len(handles), "received": got},
            )
        values: List[DecryptedValue] = []
        for handle, entry in zip(handles, results):
            value = _entry_value(entry)
            if value is None:
                raise DataIntegrityError(
                    "Decryption returned no plaintext for handle",
                    identifier="0x" + bytes(handle).hex(),
                )
            try:
                plaintext = int(value)
            except (TypeError, ValueError) as e:
                raise DataIntegrityError(
                    f"Decryption returned a non-integer plaintext: {value!r}",
                    identifier="0x" + bytes(handle).hex(),
                ) from e
            signatures = tuple(_entry_get(entry, "signatures") or ())
            values.append(DecryptedValue(value=plaintext, signatures=signatures))
        return values


def _entry_get(entry: Any, key: str) -> Any:
    if isinstance(entry, dict):
        return entry.get(key)
    return getattr(entry, key, None)


def _entry_value(entry: Any) -> Optional[int]:
    value = _entry_get(entry, "value")
    if value is None:
        plaintext = _entry_get(entry, "plaintext")
        if plaintext is not None:
            value = _entry_get(plaintext, "value")
    return value
