# Area: Chain
"""
cognumbers._chain.abi — Game contract ABI
=========================================

The subset of the game contract's ABI the client calls or listens to.
"""

_GAME_TUPLE = {
    "name": "",
    "type": "tuple",
    "components": [
        {"name": "gameId", "type": "uint256"},
        {"name": "creator", "type": "address"},
        {"name": "status", "type": "uint8"},
        {"name": "entryFee", "type": "uint256"},
        {"name": "deadline", "type": "uint256"},
        {"name": "playerCount", "type": "uint256"},
        {"name": "winner", "type": "address"},
        {"name": "winningNumber", "type": "uint256"},
        {"name": "prizePool", "type": "uint256"},
    ],
}


def _fn(name, inputs, outputs=(), mutability="view"):
    return {
        "type": "function",
        "name": name,
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "outputs": list(outputs),
        "stateMutability": mutability,
    }


def _event(name, inputs):
    return {
        "type": "event",
        "name": name,
        "anonymous": False,
        "inputs": [
            {"name": n, "type": t, "indexed": indexed} for n, t, indexed in inputs
        ],
    }


_UINT = {"name": "", "type": "uint256"}
_BOOL = {"name": "", "type": "bool"}

GAME_CONTRACT_ABI = [
    # Reads
    _fn("gameIdCounter", [], [_UINT]),
    _fn("getGame", [("_gameId", "uint256")], [_GAME_TUPLE]),
    _fn("getPlayers", [("_gameId", "uint256")], [{"name": "", "type": "address[]"}]),
    _fn("getPlayerChoiceHandle", [("_gameId", "uint256"), ("_player", "address")],
        [{"name": "", "type": "bytes32"}]),
    _fn("hasJoined", [("", "uint256"), ("", "address")], [_BOOL]),
    _fn("canClaimRefund", [("_gameId", "uint256"), ("_player", "address")],
        [{"name": "canClaim", "type": "bool"}]),
    # Writes
    _fn("createGame", [("_entryFee", "uint256"), ("_durationSeconds", "uint256")],
        [{"name": "gameId", "type": "uint256"}], "nonpayable"),
    _fn("joinGame", [("_gameId", "uint256"), ("_encryptedChoice", "bytes")], [], "payable"),
    _fn("finalizeGame", [("_gameId", "uint256")], [], "nonpayable"),
    _fn("resolveWinner", [("_gameId", "uint256"), ("_decryptedChoices", "uint256[]"),
                          ("_signatures", "bytes[][]")], [], "nonpayable"),
    _fn("claimRefund", [("_gameId", "uint256")], [], "nonpayable"),
    _fn("cancelGame", [("_gameId", "uint256")], [], "nonpayable"),
    # Events
    _event("GameCreated", [
        ("gameId", "uint256", True), ("creator", "address", True),
        ("entryFee", "uint256", False), ("deadline", "uint256", False),
    ]),
    _event("PlayerJoined", [
        ("gameId", "uint256", True), ("player", "address", True),
        ("playerCount", "uint256", False), ("prizePool", "uint256", False),
    ]),
    _event("GameFinalized", [
        ("gameId", "uint256", True), ("playerCount", "uint256", False),
        ("prizePool", "uint256", False),
    ]),
    _event("WinnerDetermined", [
        ("gameId", "uint256", True), ("winner", "address", True),
        ("winningNumber", "uint256", False), ("prize", "uint256", False),
    ]),
    _event("NoWinner", [
        ("gameId", "uint256", True), ("playerCount", "uint256", False),
        ("reason", "string", False),
    ]),
    _event("GameCancelled", [
        ("gameId", "uint256", True), ("cancelledBy", "address", True),
        ("reason", "string", False),
    ]),
    _event("RefundClaimed", [
        ("gameId", "uint256", True), ("player", "address", True),
        ("amount", "uint256", False),
    ]),
    _event("RefundsInitiated", [
        ("gameId", "uint256", True), ("playerCount", "uint256", False),
        ("totalRefund", "uint256", False),
    ]),
]

GAME_EVENTS = (
    "GameCreated",
    "PlayerJoined",
    "GameFinalized",
    "WinnerDetermined",
    "NoWinner",
    "GameCancelled",
    "RefundClaimed",
    "RefundsInitiated",
)
