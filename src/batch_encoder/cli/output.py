"""Shared CLI error output."""

from __future__ import annotations

import json
import sys
from typing import NoReturn

import click

from batch_encoder.cli.exit_codes import ExitCode
from batch_encoder.exceptions import (
    BatchEncoderError,
    ConfigError,
    NoFilesFoundError,
    ProbeFailure,
    TargetError,
    UnknownProfileError,
    ValidationError,
)


def error_exit(message: str, code: ExitCode, json_output: bool = False) -> NoReturn:
    """Print an error and exit with the given code.

    Args:
        message: Human-readable error description.
        code: Process exit code.
        json_output: Print a JSON error object instead of plain text.
    """
    if json_output:
        name = code.name if isinstance(code, ExitCode) else str(code)
        payload = {"status": "failed", "error": {"code": name, "message": message}}
        click.echo(json.dumps(payload, indent=2), err=True)
    else:
        click.echo(f"Error: {message}", err=True)
    sys.exit(code)


def exit_code_for(error: BatchEncoderError) -> ExitCode:
    """Map a batch-encoder exception to its exit code."""
    if isinstance(error, UnknownProfileError):
        return ExitCode.PROFILE_NOT_FOUND
    if isinstance(error, ConfigError):
        return ExitCode.CONFIG_ERROR
    if isinstance(error, ValidationError):
        return ExitCode.VALIDATION_ERROR
    if isinstance(error, NoFilesFoundError):
        return ExitCode.NO_FILES_FOUND
    if isinstance(error, TargetError):
        return ExitCode.TARGET_NOT_FOUND
    if isinstance(error, ProbeFailure):
        return ExitCode.OPERATION_FAILED
    return ExitCode.GENERAL_ERROR
