# Area: Crypto
"""
Clients for the external encryption and attested-decryption services.
"""

from .encryption_gateway import EncryptionGateway, parse_ciphertext, validate_choice
from .attested_decryption import AttestedDecryptionClient, backoff_delay_ms

__all__ = [
    "EncryptionGateway",
    "parse_ciphertext",
    "validate_choice",
    "AttestedDecryptionClient",
    "backoff_delay_ms",
]
