# Area: Crypto Tests
"""Tests for EncryptionGateway and ciphertext parsing."""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from cognumbers import (
    AttestedDecryptionClient,
    CiphertextVersionError,
    EncryptionGateway,
    EncryptionService,
    AttestationService,
    ValidationError,
)
from cognumbers._crypto.encryption_gateway import (
    parse_ciphertext,
    require_address,
    validate_choice,
)

PLAYER = "0x1111111111111111111111111111111111111111"
CONTRACT = "0x9999999999999999999999999999999999999999"
ZERO = "0x0000000000000000000000000000000000000000"
HANDLE = bytes(range(32))


def _blob(version=1, handle=HANDLE, payload=b"\xaa\xbb\xcc"):
    return version.to_bytes(4, "big") + handle + payload


class FakeVault(EncryptionService, AttestationService):
    """In-memory encryption service that remembers plaintexts by handle."""

    def __init__(self, version=1):
        self.version = version
        self.plaintexts = {}
        self.calls = []

    async def encrypt(self, value, account_address, dapp_address, handle_type):
        self.calls.append((value, account_address, dapp_address, handle_type))
        handle = len(self.plaintexts).to_bytes(32, "big")
        self.plaintexts[handle] = value
        return "0x" + _blob(self.version, handle, b"body").hex()

    async def attested_decrypt(self, wallet, handles):
        return [{"value": self.plaintexts[bytes(h)], "signatures": [b"att"]} for h in handles]


class TestValidateChoice:
    """Tests for validate_choice."""

    @pytest.mark.parametrize("value", [1, 5, 10])
    def test_accepts_range(self, value):
        assert validate_choice(value) == value

    @pytest.mark.parametrize("value", [0, 11, -3])
    def test_rejects_out_of_range(self, value):
        with pytest.raises(ValidationError):
            validate_choice(value)

    @pytest.mark.parametrize("value", [True, 2.0, "3", None])
    def test_rejects_non_integers(self, value):
        with pytest.raises(ValidationError):
            validate_choice(value)


class TestRequireAddress:
    """Tests for require_address."""

    def test_returns_checksum_form(self):
        assert require_address(PLAYER, "player") == PLAYER

    def test_rejects_zero_address(self):
        with pytest.raises(ValidationError):
            require_address(ZERO, "player")

    @pytest.mark.parametrize("address", ["", "0x1234", "not-an-address", None])
    def test_rejects_malformed(self, address):
        with pytest.raises(ValidationError):
            require_address(address, "player")


class TestParseCiphertext:
    """Tests for parse_ciphertext."""

    def test_splits_fields(self):
        ct = parse_ciphertext(_blob())
        assert ct.version == 1
        assert ct.handle == HANDLE
        assert ct.payload == b"\xaa\xbb\xcc"
        assert ct.raw == _blob()
        assert ct.handle_hex == "0x" + HANDLE.hex()

    def test_accepts_hex_string(self):
        assert parse_ciphertext("0x" + _blob().hex()).handle == HANDLE

    def test_version_mismatch(self):
        with pytest.raises(CiphertextVersionError) as exc_info:
            parse_ciphertext(_blob(version=2), player=PLAYER)
        err = exc_info.value
        assert err.expected == 1
        assert err.actual == 2
        assert err.identifier == PLAYER
        assert isinstance(err, ValidationError)

    def test_too_short(self):
        with pytest.raises(ValidationError):
            parse_ciphertext(b"\x00\x00\x00\x01" + b"\x01" * 10)

    def test_bad_hex(self):
        with pytest.raises(ValidationError):
            parse_ciphertext("0xzz")


class TestEncryptionGateway:
    """Tests for EncryptionGateway.encrypt."""

    def test_encrypt_passes_binding(self):
        """Test the service receives value, player, contract and type tag."""
        service = AsyncMock()
        service.encrypt.return_value = _blob()
        gateway = EncryptionGateway(service, CONTRACT)

        ct = asyncio.run(gateway.encrypt(7, PLAYER))

        service.encrypt.assert_awaited_once_with(7, PLAYER, CONTRACT, 8)
        assert ct.handle == HANDLE

    def test_out_of_range_never_reaches_service(self):
        service = AsyncMock()
        gateway = EncryptionGateway(service, CONTRACT)

        with pytest.raises(ValidationError):
            asyncio.run(gateway.encrypt(11, PLAYER))
        service.encrypt.assert_not_awaited()

    def test_zero_player_rejected(self):
        service = AsyncMock()
        gateway = EncryptionGateway(service, CONTRACT)

        with pytest.raises(ValidationError):
            asyncio.run(gateway.encrypt(3, ZERO))
        service.encrypt.assert_not_awaited()

    def test_zero_contract_rejected(self):
        with pytest.raises(ValidationError):
            EncryptionGateway(AsyncMock(), ZERO)

    def test_version_mismatch_is_error(self):
        service = AsyncMock()
        service.encrypt.return_value = _blob(version=7)
        gateway = EncryptionGateway(service, CONTRACT)

        with pytest.raises(CiphertextVersionError):
            asyncio.run(gateway.encrypt(3, PLAYER))

    def test_contract_override(self):
        other = "0x8888888888888888888888888888888888888888"
        service = AsyncMock()
        service.encrypt.return_value = _blob()
        gateway = EncryptionGateway(service, CONTRACT)

        asyncio.run(gateway.encrypt(2, PLAYER, contract_address=other))
        assert service.encrypt.await_args.args[2] == other

    def test_encrypt_then_decrypt_returns_choice(self):
        """Test a choice encrypted through the gateway decrypts to itself."""
        vault = FakeVault()
        gateway = EncryptionGateway(vault, CONTRACT)
        decryption = AttestedDecryptionClient(vault, SimpleNamespace(address=PLAYER))

        async def scenario():
            handles = []
            for choice in (4, 9, 1):
                ct = await gateway.encrypt(choice, PLAYER)
                handles.append(ct.handle)
            return await decryption.decrypt_batch(handles)

        values = asyncio.run(scenario())
        assert [v.value for v in values] == [4, 9, 1]
