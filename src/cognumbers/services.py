"""
cognumbers.services — External encryption and attestation services
==================================================================

The cryptographic primitives live in external services. Integrators
subclass these two interfaces (for example around a vendor SDK or an
HTTP gateway), construct ONE instance of each, and pass it to
``CognumbersClient``. The package never creates service clients on its
own, so there is no hidden shared state to re-initialize.

    class MyEncryption(EncryptionService):
        async def encrypt(self, value, account_address, dapp_address, handle_type):
            ...

    class MyAttestation(AttestationService):
        async def attested_decrypt(self, wallet, handles):
            ...
"""

from abc import ABC, abstractmethod
from typing import Any, List, Sequence

from .types import AttestedDecryptResult


class EncryptionService(ABC):
    """
    Client-side encryption of a single plaintext integer.

    The returned blob is bound to (account, dapp): a 4-byte big-endian
    version tag, a 32-byte handle identifier, then the ciphertext body.
    """

    @abstractmethod
    async def encrypt(
        self,
        value: int,
        account_address: str,
        dapp_address: str,
        handle_type: int,
    ) -> bytes:
        """
        Encrypt ``value`` for ``account_address`` on contract ``dapp_address``.

        Parameters
        ----------
        value : int
            Plaintext, already validated by the caller.
        account_address : str
            Checksum address of the player who will submit the ciphertext.
        dapp_address : str
            Checksum address of the game contract.
        handle_type : int
            Encrypted type tag (8 = euint256).

        Returns
        -------
        bytes
            Versioned ciphertext blob. A ``0x``-prefixed hex string is
            also accepted by the gateway.
        """
        ...


class AttestationService(ABC):
    """
    Attested bulk decryption of on-chain ciphertext handles.

    Decryption is authorized per wallet: the service checks that the
    wallet's account may read the handles.
    """

    @abstractmethod
    async def attested_decrypt(
        self,
        wallet: Any,
        handles: Sequence[bytes],
    ) -> List[AttestedDecryptResult]:
        """
        Decrypt ``handles`` on behalf of ``wallet``.

        Parameters
        ----------
        wallet : Any
            Wallet credential bound to an on-chain identity; must expose
            ``address``.
        handles : Sequence[bytes]
            32-byte handles in the order their values are wanted.

        Returns
        -------
        List[AttestedDecryptResult]
            One ``{"value": int, "signatures": [bytes, ...]}`` per handle,
            in input order.
        """
        ...
