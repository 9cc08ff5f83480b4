# Area: Chain Tests
"""Tests for GameContract — reads and write error classification."""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest
from web3.exceptions import ContractLogicError

from cognumbers import (
    ConfigError,
    GameContract,
    GameStatus,
    TransactionNotSubmittedError,
    TransactionRevertedError,
)
from cognumbers._registry.layout import encode_get_game_call

CONTRACT = "0x9999999999999999999999999999999999999999"
ME = "0x1111111111111111111111111111111111111111"
ZERO = "0x0000000000000000000000000000000000000000"
TX_HASH = b"\xab" * 32


def _make_contract(account=True, receipt_status=1):
    w3 = Mock()
    w3.eth.get_transaction_count = AsyncMock(return_value=7)
    w3.eth.send_raw_transaction = AsyncMock(return_value=TX_HASH)
    w3.eth.wait_for_transaction_receipt = AsyncMock(
        return_value={"status": receipt_status, "transactionHash": TX_HASH}
    )
    signer = None
    if account:
        signer = Mock()
        signer.address = ME
        signer.sign_transaction.return_value = SimpleNamespace(raw_transaction=b"signed")
    gc = GameContract(w3, CONTRACT, account=signer, chain_id=84532)
    return gc


def _stub_call(gc, fn_name, build=None, call_result=None):
    """Make ``gc.contract.functions.<fn_name>(...)`` return a stub call object."""
    call = Mock()
    call.build_transaction = AsyncMock(side_effect=build, return_value={"data": "0x"})
    call.call = AsyncMock(return_value=call_result)
    getattr(gc.contract.functions, fn_name).return_value = call
    return call


class TestReads:
    """Tests for read helpers."""

    def test_get_game_structured(self):
        gc = _make_contract()
        _stub_call(gc, "getGame", call_result=(
            2, ME, 1, 10**16, 1_760_000_000, 3, ZERO, 0, 3 * 10**16,
        ))
        game = asyncio.run(gc.get_game(2))
        assert game.game_id == 2
        assert game.status == GameStatus.CALCULATING
        assert game.player_count == 3

    def test_get_game_raw_uses_encoded_call(self):
        gc = _make_contract()
        words = [2, int(ME, 16), 0, 10**16, 1_760_000_000, 0, 0, 0, 0]
        gc.w3.eth.call = AsyncMock(return_value=b"".join(w.to_bytes(32, "big") for w in words))

        game = asyncio.run(gc.get_game_raw(2))

        gc.w3.eth.call.assert_awaited_once_with(
            {"to": CONTRACT, "data": encode_get_game_call(2)}
        )
        assert game.creator == ME
        assert game.winner == ZERO
        assert game.status == GameStatus.OPEN

    def test_get_player_choice_handle_returns_bytes(self):
        gc = _make_contract()
        _stub_call(gc, "getPlayerChoiceHandle", call_result="0x" + "01" * 32)
        assert asyncio.run(gc.get_player_choice_handle(1, ME)) == b"\x01" * 32

    def test_get_events_normalizes_logs(self):
        gc = _make_contract()
        event = Mock()
        event.get_logs = AsyncMock(return_value=[{
            "event": "GameCreated",
            "args": {"gameId": 4, "creator": ME},
            "blockNumber": 12,
            "logIndex": 3,
            "transactionHash": TX_HASH,
        }])
        gc.contract.events.GameCreated.return_value = event

        logs = asyncio.run(gc.get_events("GameCreated", 10, 20))

        event.get_logs.assert_awaited_once_with(from_block=10, to_block=20)
        assert logs == [{
            "event": "GameCreated",
            "args": {"gameId": 4, "creator": ME},
            "block_number": 12,
            "log_index": 3,
            "tx_hash": "0x" + "ab" * 32,
        }]


class TestWrites:
    """Tests for transaction submission and failure classification."""

    def test_successful_write(self):
        gc = _make_contract()
        call = _stub_call(gc, "finalizeGame")

        tx = asyncio.run(gc.finalize_game(3))

        assert tx == "0x" + "ab" * 32
        params = call.build_transaction.await_args.args[0]
        assert params["nonce"] == 7
        assert params["chainId"] == 84532
        assert params["from"] == ME
        gc.w3.eth.send_raw_transaction.assert_awaited_once_with(b"signed")

    def test_join_sends_entry_fee(self):
        gc = _make_contract()
        call = _stub_call(gc, "joinGame")

        asyncio.run(gc.join_game(3, b"\x00\x00\x00\x01" + b"\x02" * 32, 10**16))

        assert call.build_transaction.await_args.args[0]["value"] == 10**16

    def test_write_without_account(self):
        gc = _make_contract(account=False)
        _stub_call(gc, "cancelGame")
        with pytest.raises(ConfigError):
            asyncio.run(gc.cancel_game(3))

    def test_preflight_revert(self):
        """Test a contract rejection while building is a revert without tx hash."""
        gc = _make_contract()
        _stub_call(gc, "resolveWinner", build=ContractLogicError("execution reverted: Not calculating"))

        with pytest.raises(TransactionRevertedError) as exc_info:
            asyncio.run(gc.resolve_winner(3, [1, 2], [[b"s"], [b"s"]]))

        assert exc_info.value.tx_hash is None
        assert "Not calculating" in exc_info.value.reason
        gc.w3.eth.send_raw_transaction.assert_not_awaited()

    def test_transport_failure_not_submitted(self):
        gc = _make_contract()
        _stub_call(gc, "claimRefund")
        gc.w3.eth.send_raw_transaction.side_effect = ConnectionError("rpc down")

        with pytest.raises(TransactionNotSubmittedError) as exc_info:
            asyncio.run(gc.claim_refund(3))

        assert exc_info.value.function_name == "claimRefund"
        gc.w3.eth.wait_for_transaction_receipt.assert_not_awaited()

    def test_mined_revert(self):
        gc = _make_contract(receipt_status=0)
        _stub_call(gc, "finalizeGame")

        with pytest.raises(TransactionRevertedError) as exc_info:
            asyncio.run(gc.finalize_game(3))

        assert exc_info.value.tx_hash == "0x" + "ab" * 32

    def test_create_game_returns_id_from_event(self):
        gc = _make_contract()
        _stub_call(gc, "createGame")
        created = Mock()
        created.process_receipt.return_value = [{"args": {"gameId": 11}}]
        gc.contract.events.GameCreated.return_value = created

        assert asyncio.run(gc.create_game(10**16, 3600)) == 11
