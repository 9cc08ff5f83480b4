# Area: Chain
"""
On-chain adapter for the game contract (web3.py).
"""

from .abi import GAME_CONTRACT_ABI, GAME_EVENTS
from .contract import GameContract

__all__ = ["GAME_CONTRACT_ABI", "GAME_EVENTS", "GameContract"]
