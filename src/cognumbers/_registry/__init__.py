# Area: Registry
"""
Game registry — reading games from the contract and watching its events.
"""

from .layout import GAME_LAYOUT, FieldSlot, decode_game_bytes, decode_game_tuple, encode_get_game_call
from .reader import GameRegistryReader
from .events import EventSubscriber

__all__ = [
    "GAME_LAYOUT",
    "FieldSlot",
    "decode_game_bytes",
    "decode_game_tuple",
    "encode_get_game_call",
    "GameRegistryReader",
    "EventSubscriber",
]
