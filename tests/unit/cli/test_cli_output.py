"""Tests for cli/output.py module."""

import json

import pytest

from batch_encoder.cli.exit_codes import ExitCode
from batch_encoder.cli.output import error_exit, exit_code_for
from batch_encoder.exceptions import (
    BatchEncoderError,
    ConfigError,
    NoFilesFoundError,
    PlanConsistencyError,
    ProbeFailure,
    TargetError,
    UnknownProfileError,
    ValidationError,
)


class TestErrorExit:
    """Tests for error_exit function."""

    def test_human_format_exit(self, capsys) -> None:
        """Human format should print 'Error: message' and exit."""
        with pytest.raises(SystemExit) as exc_info:
            error_exit("Something failed", ExitCode.GENERAL_ERROR, json_output=False)

        assert exc_info.value.code == 1
        assert capsys.readouterr().err == "Error: Something failed\n"

    def test_json_format_exit(self, capsys) -> None:
        """JSON format should print JSON error and exit."""
        with pytest.raises(SystemExit) as exc_info:
            error_exit("Something failed", ExitCode.TARGET_NOT_FOUND, json_output=True)

        assert exc_info.value.code == 20

        parsed = json.loads(capsys.readouterr().err)
        assert parsed["status"] == "failed"
        assert parsed["error"]["code"] == "TARGET_NOT_FOUND"
        assert parsed["error"]["message"] == "Something failed"


class TestExitCodeFor:
    """Tests for exit_code_for function."""

    @pytest.mark.parametrize(
        "error,expected",
        [
            (UnknownProfileError("video", "x"), ExitCode.PROFILE_NOT_FOUND),
            (ConfigError("bad"), ExitCode.CONFIG_ERROR),
            (ValidationError("bad", field="crop"), ExitCode.VALIDATION_ERROR),
            (NoFilesFoundError("empty"), ExitCode.NO_FILES_FOUND),
            (TargetError("missing"), ExitCode.TARGET_NOT_FOUND),
            (ProbeFailure("probe"), ExitCode.OPERATION_FAILED),
            (PlanConsistencyError("bug"), ExitCode.GENERAL_ERROR),
            (BatchEncoderError("other"), ExitCode.GENERAL_ERROR),
        ],
    )
    def test_mapping(self, error, expected) -> None:
        assert exit_code_for(error) == expected
