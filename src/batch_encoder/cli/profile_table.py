"""Shared profile table loading for CLI commands."""

from __future__ import annotations

from pathlib import Path

from batch_encoder.config import EncoderConfig
from batch_encoder.profiles import (
    ProfileTable,
    builtin_profile_table,
    load_profile_file,
)


def load_profile_table(
    config: EncoderConfig, profiles_path: Path | None = None
) -> ProfileTable:
    """Build the profile table for a command.

    Bundled profiles are extended by the --profiles file when given, else
    by the configured profiles_file.

    Raises:
        ConfigError: If the profile file is unreadable or invalid.
    """
    path = profiles_path or config.profiles_file
    if path is None:
        return builtin_profile_table()
    return load_profile_file(path)
