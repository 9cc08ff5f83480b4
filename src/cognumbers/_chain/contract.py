# Area: Chain
"""
cognumbers._chain.contract — Game contract adapter
==================================================

Thin async wrapper over the game contract using web3.py. Reads return
package types; writes are built, signed with the local account,
broadcast once, and awaited until inclusion.

Write failures come in two kinds the caller must be able to tell apart:

- TransactionNotSubmittedError: nothing reached the chain
  (signing, transport, or node refused the raw transaction);
- TransactionRevertedError: the contract rejected the call, either
  while the transaction was being built or in the mined receipt.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from eth_account import Account
from hexbytes import HexBytes
from web3 import AsyncWeb3, Web3
from web3.exceptions import ContractLogicError

from .abi import GAME_CONTRACT_ABI
from .._registry.layout import decode_game_bytes, decode_game_tuple, encode_get_game_call
from ..errors import ConfigError, TransactionNotSubmittedError, TransactionRevertedError
from ..types import Game

logger = logging.getLogger("cognumbers.chain")


class GameContract:
    """
    Async adapter for one deployed game contract.

    Attributes:
        w3: The AsyncWeb3 instance
        address: Checksum address of the contract
        account: Local signing account, or None for read-only use
        chain_id: Chain id used when building transactions
    """

    def __init__(self, w3: AsyncWeb3, address: str, account: Any = None,
                 chain_id: Optional[int] = None):
        self.w3 = w3
        self.address = Web3.to_checksum_address(address)
        self.account = account
        self.chain_id = chain_id
        self.contract = w3.eth.contract(address=self.address, abi=GAME_CONTRACT_ABI)

    @classmethod
    def from_config(cls, config: Any) -> "GameContract":
        """Build an adapter from a ClientConfig."""
        w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(config.rpc_url))
        account = Account.from_key(config.private_key) if config.private_key else None
        return cls(w3, config.contract_address, account=account, chain_id=config.chain_id)

    @property
    def sender(self) -> Optional[str]:
        return self.account.address if self.account is not None else None

    # ── Reads ─────────────────────────────────────────────────────

    async def game_id_counter(self) -> int:
        return int(await self.contract.functions.gameIdCounter().call())

    async def get_game(self, game_id: int) -> Game:
        """Read one game through the ABI-decoded return tuple."""
        values = await self.contract.functions.getGame(game_id).call()
        return decode_game_tuple(values)

    async def get_game_raw(self, game_id: int) -> Game:
        """Read one game with a hand-encoded eth_call and slice the raw result."""
        data = await self.w3.eth.call({"to": self.address, "data": encode_get_game_call(game_id)})
        return decode_game_bytes(data)

    async def get_players(self, game_id: int) -> List[str]:
        players = await self.contract.functions.getPlayers(game_id).call()
        return [Web3.to_checksum_address(p) for p in players]

    async def get_player_choice_handle(self, game_id: int, player: str) -> bytes:
        handle = await self.contract.functions.getPlayerChoiceHandle(
            game_id, Web3.to_checksum_address(player)
        ).call()
        return bytes(HexBytes(handle))

    async def has_joined(self, game_id: int, player: str) -> bool:
        return bool(await self.contract.functions.hasJoined(
            game_id, Web3.to_checksum_address(player)
        ).call())

    async def can_claim_refund(self, game_id: int, player: str) -> bool:
        return bool(await self.contract.functions.canClaimRefund(
            game_id, Web3.to_checksum_address(player)
        ).call())

    async def block_number(self) -> int:
        return int(await self.w3.eth.block_number)

    async def latest_timestamp(self) -> int:
        block = await self.w3.eth.get_block("latest")
        return int(block["timestamp"])

    async def get_events(self, event_name: str, from_block: int,
                         to_block: int) -> List[Dict[str, Any]]:
        """Fetch decoded logs of one event type in [from_block, to_block]."""
        event = getattr(self.contract.events, event_name)
        logs = await event().get_logs(from_block=from_block, to_block=to_block)
        return [
            {
                "event": log["event"],
                "args": dict(log["args"]),
                "block_number": log["blockNumber"],
                "log_index": log["logIndex"],
                "tx_hash": Web3.to_hex(log["transactionHash"]),
            }
            for log in logs
        ]

    # ── Writes ────────────────────────────────────────────────────

    async def create_game(self, entry_fee: int, duration_seconds: int) -> Optional[int]:
        """Create a game; return its id from the GameCreated event when present."""
        receipt = await self._transact(
            "createGame", None, self.contract.functions.createGame(entry_fee, duration_seconds)
        )
        created = self.contract.events.GameCreated().process_receipt(receipt)
        return int(created[0]["args"]["gameId"]) if created else None

    async def join_game(self, game_id: int, ciphertext: bytes, entry_fee: int) -> str:
        receipt = await self._transact(
            "joinGame", game_id,
            self.contract.functions.joinGame(game_id, bytes(ciphertext)),
            value=entry_fee,
        )
        return _tx_hash(receipt)

    async def finalize_game(self, game_id: int) -> str:
        receipt = await self._transact(
            "finalizeGame", game_id, self.contract.functions.finalizeGame(game_id)
        )
        return _tx_hash(receipt)

    async def resolve_winner(self, game_id: int, values: Sequence[int],
                             signatures: Sequence[Sequence[bytes]]) -> str:
        receipt = await self._transact(
            "resolveWinner", game_id,
            self.contract.functions.resolveWinner(
                game_id,
                [int(v) for v in values],
                [[bytes(s) for s in sigs] for sigs in signatures],
            ),
        )
        return _tx_hash(receipt)

    async def claim_refund(self, game_id: int) -> str:
        receipt = await self._transact(
            "claimRefund", game_id, self.contract.functions.claimRefund(game_id)
        )
        return _tx_hash(receipt)

    async def cancel_game(self, game_id: int) -> str:
        receipt = await self._transact(
            "cancelGame", game_id, self.contract.functions.cancelGame(game_id)
        )
        return _tx_hash(receipt)

    async def _transact(self, function_name: str, game_id: Optional[int],
                        call: Any, value: int = 0) -> Any:
        """Build, sign and send one transaction, then wait for its receipt."""
        if self.account is None:
            raise ConfigError([f"private_key is required to call {function_name}"])

        try:
            nonce = await self.w3.eth.get_transaction_count(self.account.address, "pending")
            params: Dict[str, Any] = {
                "from": self.account.address,
                "nonce": nonce,
                "value": value,
            }
            if self.chain_id is not None:
                params["chainId"] = self.chain_id
            tx = await call.build_transaction(params)
            signed = self.account.sign_transaction(tx)
            tx_hash = await self.w3.eth.send_raw_transaction(signed.raw_transaction)
        except ContractLogicError as e:
            logger.warning("%s for game %s rejected: %s", function_name, game_id, e)
            raise TransactionRevertedError(function_name, game_id, reason=str(e)) from e
        except Exception as e:
            logger.error("%s for game %s not submitted: %s", function_name, game_id, e)
            raise TransactionNotSubmittedError(function_name, game_id, e) from e

        logger.info("%s for game %s sent: %s", function_name, game_id, Web3.to_hex(tx_hash))
        receipt = await self.w3.eth.wait_for_transaction_receipt(tx_hash)
        if receipt["status"] == 0:
            raise TransactionRevertedError(
                function_name, game_id, tx_hash=Web3.to_hex(tx_hash)
            )
        return receipt


def _tx_hash(receipt: Any) -> str:
    return Web3.to_hex(receipt["transactionHash"])
