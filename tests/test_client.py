# Area: Client Tests
"""Tests for CognumbersClient — operations wired end to end over a fake contract."""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest

from cognumbers import (
    CognumbersClient,
    ConfigError,
    Game,
    GameStateError,
    GameStatus,
    ValidationError,
    build_config,
)

CONTRACT = "0x9999999999999999999999999999999999999999"
ME = "0x1111111111111111111111111111111111111111"
OTHER = "0x2222222222222222222222222222222222222222"
ZERO = "0x0000000000000000000000000000000000000000"
NOW = 1_760_000_000
HANDLE = bytes(range(32))


def _game(game_id=0, status=GameStatus.OPEN, creator=ME, players=2, deadline=NOW + 600):
    return Game(
        game_id=game_id,
        creator=creator,
        status=status,
        entry_fee=10**16,
        deadline=deadline,
        player_count=players,
        winner=ZERO,
        winning_number=0,
        prize_pool=players * 10**16,
    )


def _make_contract(games):
    contract = Mock()
    contract.account = SimpleNamespace(address=ME)
    contract.game_id_counter = AsyncMock(return_value=len(games))
    contract.get_game = AsyncMock(side_effect=lambda game_id: games[game_id])
    contract.get_game_raw = AsyncMock(side_effect=lambda game_id: games[game_id])
    contract.get_players = AsyncMock(return_value=[ME, OTHER])
    contract.has_joined = AsyncMock(return_value=False)
    contract.can_claim_refund = AsyncMock(return_value=True)
    contract.create_game = AsyncMock(return_value=len(games))
    for name in ("join_game", "finalize_game", "claim_refund", "cancel_game", "resolve_winner"):
        setattr(contract, name, AsyncMock(return_value=f"0x{name}"))
    return contract


def _make_client(games, encryption=None, attestation=None, admin=None):
    config = build_config({"contract_address": CONTRACT, "admin_address": admin})
    return CognumbersClient(
        config,
        encryption=encryption,
        attestation=attestation,
        contract=_make_contract(games),
        clock=lambda: NOW,
    )


def _encryption():
    service = Mock()
    service.encrypt = AsyncMock(return_value=(1).to_bytes(4, "big") + HANDLE + b"body")
    return service


class TestReads:
    """Tests for list_games and get_game."""

    def test_list_games_newest_first(self):
        client = _make_client([_game(0), _game(1), _game(2, status=GameStatus.FINISHED)])
        games = asyncio.run(client.list_games())
        assert [g.game_id for g in games] == [2, 1, 0]

    def test_list_games_by_status(self):
        client = _make_client([_game(0), _game(1, status=GameStatus.FINISHED)])
        games = asyncio.run(client.list_games(status=GameStatus.OPEN))
        assert [g.game_id for g in games] == [0]


class TestJoin:
    """Tests for join_game."""

    def test_join_encrypts_and_pays_fee(self):
        encryption = _encryption()
        client = _make_client([_game(0)], encryption=encryption)

        tx = asyncio.run(client.join_game(0, 4))

        assert tx == "0xjoin_game"
        encryption.encrypt.assert_awaited_once_with(4, ME, CONTRACT, 8)
        raw = encryption.encrypt.return_value
        client.contract.join_game.assert_awaited_once_with(0, raw, 10**16)

    def test_join_requires_encryption_service(self):
        client = _make_client([_game(0)])
        with pytest.raises(ConfigError):
            asyncio.run(client.join_game(0, 4))

    def test_invalid_choice_rejected_before_reads(self):
        client = _make_client([_game(0)], encryption=_encryption())
        with pytest.raises(ValidationError):
            asyncio.run(client.join_game(0, 0))
        client.contract.get_game.assert_not_awaited()

    def test_already_joined(self):
        client = _make_client([_game(0)], encryption=_encryption())
        client.contract.has_joined.return_value = True
        with pytest.raises(GameStateError):
            asyncio.run(client.join_game(0, 4))
        client.contract.join_game.assert_not_awaited()

    def test_join_after_deadline(self):
        client = _make_client([_game(0, deadline=NOW - 1)], encryption=_encryption())
        with pytest.raises(GameStateError):
            asyncio.run(client.join_game(0, 4))

    def test_join_without_wallet(self):
        client = _make_client([_game(0)], encryption=_encryption())
        client.wallet = None
        with pytest.raises(ConfigError):
            asyncio.run(client.join_game(0, 4))


class TestAdminOperations:
    """Tests for create, finalize, cancel and refund."""

    def test_create_game(self):
        client = _make_client([_game(0)])
        assert asyncio.run(client.create_game(10**16, 3600)) == 1
        client.contract.create_game.assert_awaited_once_with(10**16, 3600)

    @pytest.mark.parametrize("fee,duration", [(-1, 3600), (10**16, 0)])
    def test_create_game_validation(self, fee, duration):
        client = _make_client([])
        with pytest.raises(ValidationError):
            asyncio.run(client.create_game(fee, duration))

    def test_finalize_after_deadline(self):
        client = _make_client([_game(0, deadline=NOW - 10)])
        assert asyncio.run(client.finalize_game(0)) == "0xfinalize_game"

    def test_finalize_before_deadline(self):
        client = _make_client([_game(0)])
        with pytest.raises(GameStateError):
            asyncio.run(client.finalize_game(0))
        client.contract.finalize_game.assert_not_awaited()

    def test_cancel_by_creator(self):
        client = _make_client([_game(0)])
        assert asyncio.run(client.cancel_game(0)) == "0xcancel_game"

    def test_cancel_by_admin(self):
        client = _make_client([_game(0, creator=OTHER)], admin=ME)
        assert asyncio.run(client.cancel_game(0)) == "0xcancel_game"

    def test_cancel_by_stranger(self):
        client = _make_client([_game(0, creator=OTHER)])
        with pytest.raises(GameStateError):
            asyncio.run(client.cancel_game(0))

    def test_claim_refund(self):
        client = _make_client([_game(0, status=GameStatus.CANCELLED)])
        assert asyncio.run(client.claim_refund(0)) == "0xclaim_refund"
        client.contract.can_claim_refund.assert_awaited_once_with(0, ME)

    def test_claim_refund_open_game(self):
        client = _make_client([_game(0)])
        with pytest.raises(GameStateError):
            asyncio.run(client.claim_refund(0))


class TestResolve:
    """Tests for resolve_game through the client."""

    def test_resolve_reads_back_final_status(self):
        games = [_game(0, status=GameStatus.CALCULATING)]
        attestation = Mock()
        attestation.attested_decrypt = AsyncMock(
            return_value=[{"value": 3, "signatures": []}, {"value": 5, "signatures": []}]
        )
        client = _make_client(games, attestation=attestation)
        contract = client.contract
        contract.get_player_choice_handle = AsyncMock(return_value=HANDLE)

        async def mark_finished(*args):
            games[0] = _game(0, status=GameStatus.FINISHED)
            return "0xresolved"

        contract.resolve_winner = AsyncMock(side_effect=mark_finished)

        outcome = asyncio.run(client.resolve_game(0))

        assert outcome.winner == ME
        assert outcome.winning_number == 3
        assert outcome.tx_hash == "0xresolved"
        assert outcome.final_status == GameStatus.FINISHED

    def test_resolve_requires_attestation(self):
        client = _make_client([_game(0, status=GameStatus.CALCULATING)])
        with pytest.raises(ConfigError):
            asyncio.run(client.resolve_game(0))


class TestEvents:
    """Tests for event subscription helpers."""

    def test_subscribe_unknown_event(self):
        client = _make_client([])
        with pytest.raises(ValidationError):
            client.subscribe("Transfer", Mock())

    def test_refresh_on_event(self):
        client = _make_client([_game(0), _game(1)])
        refreshed = []
        client.subscribe_refresh(refreshed.append)

        delivered = asyncio.run(client.events.dispatch(
            {"event": "PlayerJoined", "args": {"gameId": 1}, "block_number": 5}
        ))

        assert delivered == 1
        assert [g.game_id for g in refreshed[0]] == [1, 0]
