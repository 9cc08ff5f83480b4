# Area: Registry
"""
cognumbers._registry.layout — Game record field layout
======================================================

One descriptor drives both ways of turning a ``getGame`` response into
a Game:

- structured: the ABI-decoded return tuple, field by field;
- raw: the hex returned by ``eth_call``, sliced at fixed 32-byte slots.

The record is a static tuple, so each field occupies exactly one slot
in declaration order. Addresses sit in the last 20 bytes of their slot.
"""

from dataclasses import dataclass
from typing import Any, Dict, Sequence, Union

from hexbytes import HexBytes
from web3 import Web3

from .._lifecycle.enums import GameStatus
from ..errors import DataIntegrityError
from ..types import Game

SLOT_BYTES = 32
ADDRESS_BYTES = 20

GET_GAME_SIGNATURE = "getGame(uint256)"


@dataclass(frozen=True)
class FieldSlot:
    """Position and type of one Game field in the encoded record."""

    name: str
    offset: int
    width: int
    kind: str

    @property
    def end(self) -> int:
        return self.offset + self.width


def _slot(index: int, name: str, kind: str) -> FieldSlot:
    return FieldSlot(name=name, offset=index * SLOT_BYTES, width=SLOT_BYTES, kind=kind)


GAME_LAYOUT = (
    _slot(0, "game_id", "uint256"),
    _slot(1, "creator", "address"),
    _slot(2, "status", "uint8"),
    _slot(3, "entry_fee", "uint256"),
    _slot(4, "deadline", "uint256"),
    _slot(5, "player_count", "uint256"),
    _slot(6, "winner", "address"),
    _slot(7, "winning_number", "uint256"),
    _slot(8, "prize_pool", "uint256"),
)

RECORD_BYTES = GAME_LAYOUT[-1].end


def _convert(field: FieldSlot, value: Any) -> Any:
    if field.kind == "address":
        return Web3.to_checksum_address(value)
    if field.kind == "uint8" and field.name == "status":
        try:
            return GameStatus(int(value))
        except ValueError as e:
            raise DataIntegrityError(f"Unknown game status {value}", identifier=value) from e
    return int(value)


def _build(fields: Dict[str, Any]) -> Game:
    return Game(**fields)


def decode_game_tuple(values: Sequence[Any]) -> Game:
    """
    Build a Game from the structured (ABI-decoded) ``getGame`` tuple.

    Raises:
        DataIntegrityError: If the tuple does not have one entry per field
    """
    if len(values) != len(GAME_LAYOUT):
        raise DataIntegrityError(
            f"getGame tuple has {len(values)} fields, expected {len(GAME_LAYOUT)}",
            details={"received": len(values)},
        )
    return _build({
        field.name: _convert(field, value)
        for field, value in zip(GAME_LAYOUT, values)
    })


def decode_game_bytes(data: Union[bytes, str]) -> Game:
    """
    Build a Game by slicing the raw ``getGame`` return data.

    Raises:
        DataIntegrityError: If the response is shorter than one record
    """
    raw = bytes(HexBytes(data))
    if len(raw) < RECORD_BYTES:
        raise DataIntegrityError(
            f"getGame response has {len(raw)} bytes, expected {RECORD_BYTES}",
            details={"received": len(raw)},
        )
    fields: Dict[str, Any] = {}
    for field in GAME_LAYOUT:
        word = raw[field.offset:field.end]
        if field.kind == "address":
            value: Any = "0x" + word[-ADDRESS_BYTES:].hex()
        else:
            value = int.from_bytes(word, "big")
        fields[field.name] = _convert(field, value)
    return _build(fields)


def function_selector(signature: str) -> bytes:
    """First four bytes of keccak256 over the canonical signature."""
    return bytes(Web3.keccak(text=signature)[:4])


def encode_uint256(value: int) -> bytes:
    """Zero-padded big-endian 32-byte encoding of an unsigned integer."""
    if value < 0:
        raise ValueError("uint256 cannot be negative")
    return value.to_bytes(SLOT_BYTES, "big")


def encode_get_game_call(game_id: int) -> str:
    """Hex call data for ``getGame(game_id)``."""
    return "0x" + (function_selector(GET_GAME_SIGNATURE) + encode_uint256(game_id)).hex()
