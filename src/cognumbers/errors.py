"""
cognumbers.errors — Custom exception classes
============================================

Defines the exception hierarchy for the game client.
Each exception carries a kind and the offending identifier
(game id, player address or handle) for structured logging.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional
import json


class CognumbersError(Exception):
    """Base exception for all Cognumbers client errors."""

    kind = "ERROR"

    def __init__(self, message: str, identifier: Any = None,
                 details: Optional[Dict[str, Any]] = None):
        self.identifier = identifier
        self.details = details or {}
        super().__init__(message)

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type=self.kind,
            error_class=self.__class__.__name__,
            message=str(self),
            identifier=self.identifier,
            details=self.details,
        )


class ValidationError(CognumbersError):
    """Raised for bad input: out-of-range choice, zero address, malformed handle."""

    kind = "VALIDATION"


class CiphertextVersionError(ValidationError):
    """Raised when the encryption service answers with an unexpected version tag."""

    def __init__(self, expected: int, actual: int, player: str):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Ciphertext version {actual} does not match expected version {expected}",
            identifier=player,
            details={"expected_version": expected, "actual_version": actual},
        )


class ConfigError(CognumbersError):
    """Raised when the client configuration is missing or invalid."""

    kind = "CONFIG"

    def __init__(self, problems: List[str]):
        self.problems = problems
        super().__init__(
            f"Invalid configuration: {problems}",
            identifier="config",
            details={"problems": problems},
        )


class DecryptionBatchError(CognumbersError):
    """Raised when attested decryption of a batch fails on every attempt."""

    kind = "TRANSIENT"

    def __init__(self, handles_count: int, attempts: int, last_error: BaseException):
        self.handles_count = handles_count
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Attested decryption of {handles_count} handles failed after "
            f"{attempts} attempts: {last_error}",
            identifier=f"batch[{handles_count}]",
            details={"attempts": attempts, "last_error": repr(last_error)},
        )


class DataIntegrityError(CognumbersError):
    """Raised when on-chain or service data is inconsistent (missing handle, length mismatch)."""

    kind = "DATA_INTEGRITY"


class GameStateError(CognumbersError):
    """Raised when a lifecycle guard rejects an operation for the game's current state."""

    kind = "ILLEGAL_STATE"

    def __init__(self, game_id: Optional[int], reason: str,
                 details: Optional[Dict[str, Any]] = None):
        self.game_id = game_id
        self.reason = reason
        super().__init__(f"Game {game_id}: {reason}", identifier=game_id, details=details)


class ResolutionInProgressError(CognumbersError):
    """Raised when a resolution attempt for the same game is already running in-process."""

    kind = "CONCURRENCY"

    def __init__(self, game_id: int):
        self.game_id = game_id
        super().__init__(
            f"Resolution of game {game_id} is already in progress", identifier=game_id
        )


class TransactionNotSubmittedError(CognumbersError):
    """Raised when a contract write never reached the chain."""

    kind = "NOT_SUBMITTED"

    def __init__(self, function_name: str, game_id: Optional[int], cause: BaseException):
        self.function_name = function_name
        self.game_id = game_id
        self.cause = cause
        super().__init__(
            f"{function_name} for game {game_id} was not submitted: {cause}",
            identifier=game_id,
            details={"function": function_name, "cause": repr(cause)},
        )


class TransactionRevertedError(CognumbersError):
    """Raised when a contract write was rejected by the contract."""

    kind = "ONCHAIN_REJECTION"

    def __init__(self, function_name: str, game_id: Optional[int],
                 tx_hash: Optional[str] = None, reason: Optional[str] = None):
        self.function_name = function_name
        self.game_id = game_id
        self.tx_hash = tx_hash
        self.reason = reason
        super().__init__(
            f"{function_name} for game {game_id} reverted"
            + (f": {reason}" if reason else ""),
            identifier=game_id,
            details={"function": function_name, "tx_hash": tx_hash, "reason": reason},
        )


def _format_error_block(
    error_type: str,
    error_class: str,
    message: str,
    identifier: Any,
    details: Dict[str, Any],
) -> str:
    """Format a structured error block for terminal output."""
    from datetime import datetime, timezone

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    lines = [
        "",
        "=" * 64,
        " COGNUMBERS ERROR",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Error Type:   {error_type}",
        f" Class:        {error_class}",
        f" Identifier:   {identifier}",
        "",
        f" {message}",
    ]

    if details:
        lines.append("")
        lines.append(" ── DETAILS " + "─" * 52)
        lines.append(_indent_json(details))

    lines.append("")
    lines.append("=" * 64)
    lines.append("")

    return "\n".join(lines)


def _indent_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format JSON with indentation for error logs."""
    try:
        formatted = json.dumps(data, indent=indent, default=str)
        return "\n".join(" " + line for line in formatted.split("\n"))
    except (TypeError, ValueError):
        return f" {repr(data)}"
