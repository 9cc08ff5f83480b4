# Area: Shared Tests
"""Tests for the error hierarchy and structured error output."""

import logging

import pytest

from cognumbers import (
    CiphertextVersionError,
    CognumbersError,
    ConfigError,
    DataIntegrityError,
    DecryptionBatchError,
    GameStateError,
    ResolutionInProgressError,
    TransactionNotSubmittedError,
    TransactionRevertedError,
    ValidationError,
)
from cognumbers._shared.logging_config import JSONFormatter, log_error


class TestErrorKinds:
    """Tests that each error carries its kind."""

    @pytest.mark.parametrize("error,kind", [
        (ValidationError("bad"), "VALIDATION"),
        (CiphertextVersionError(1, 2, "0xabc"), "VALIDATION"),
        (ConfigError(["missing contract_address"]), "CONFIG"),
        (DecryptionBatchError(3, 5, RuntimeError("x")), "TRANSIENT"),
        (DataIntegrityError("zero handle"), "DATA_INTEGRITY"),
        (GameStateError(4, "not open"), "ILLEGAL_STATE"),
        (ResolutionInProgressError(4), "CONCURRENCY"),
        (TransactionNotSubmittedError("joinGame", 4, OSError("rpc")), "NOT_SUBMITTED"),
        (TransactionRevertedError("joinGame", 4, tx_hash="0x01"), "ONCHAIN_REJECTION"),
    ])
    def test_kind(self, error, kind):
        assert isinstance(error, CognumbersError)
        assert error.kind == kind

    def test_identifier_and_details(self):
        err = GameStateError(4, "deadline passed", details={"deadline": 10})
        assert err.identifier == 4
        assert err.details == {"deadline": 10}
        assert str(err) == "Game 4: deadline passed"

    def test_revert_message_includes_reason(self):
        err = TransactionRevertedError("cancelGame", 2, reason="Not creator")
        assert "Not creator" in str(err)
        assert err.tx_hash is None

    def test_config_error_lists_problems(self):
        err = ConfigError(["a: missing", "b: bad"])
        assert err.problems == ["a: missing", "b: bad"]


class TestFormatErrorLog:
    """Tests for format_error_log."""

    def test_block_contents(self):
        err = DataIntegrityError("No choice for player", identifier="0xabc",
                                 details={"game_id": 3})
        block = err.format_error_log()

        assert "COGNUMBERS ERROR" in block
        assert "DATA_INTEGRITY" in block
        assert "DataIntegrityError" in block
        assert "0xabc" in block
        assert '"game_id": 3' in block

    def test_block_without_details(self):
        block = ValidationError("bad").format_error_log()
        assert "DETAILS" not in block


class TestLogError:
    """Tests for log_error and the JSON formatter."""

    def test_log_error_prints_block_and_logs(self, capsys, caplog):
        err = ResolutionInProgressError(9)
        pkg_logger = logging.getLogger("cognumbers")
        pkg_logger.addHandler(caplog.handler)
        try:
            log_error(err)
        finally:
            pkg_logger.removeHandler(caplog.handler)

        assert "CONCURRENCY" in capsys.readouterr().err
        record = caplog.records[-1]
        assert record.error_kind == "CONCURRENCY"
        assert record.identifier == 9

    def test_json_formatter_includes_extras(self):
        record = logging.LogRecord("cognumbers.x", logging.ERROR, __file__, 1, "boom", None, None)
        record.error_kind = "VALIDATION"
        record.identifier = 7
        output = JSONFormatter().format(record)
        assert '"error_kind": "VALIDATION"' in output
        assert '"identifier": 7' in output
        assert '"message": "boom"' in output
