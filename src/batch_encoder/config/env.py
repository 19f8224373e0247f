"""Environment variable reader with dependency injection support.

EnvReader reads and converts environment variables. Tests pass an explicit
mapping instead of touching os.environ.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

ENV_PREFIX = "BATCH_ENCODER_"

TRUE_VALUES = ("true", "1", "yes", "on")


class EnvReader:
    """Environment variable reader with type conversion.

    Example:
        # Production usage (reads from os.environ)
        reader = EnvReader()
        level = reader.get_str("BATCH_ENCODER_LOG_LEVEL", "info")

        # Testing usage (inject custom env)
        reader = EnvReader(env={"BATCH_ENCODER_LOG_LEVEL": "debug"})
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        """Initialize the environment reader.

        Args:
            env: Optional mapping to use instead of os.environ.
        """
        self._env: Mapping[str, str] = env if env is not None else os.environ

    def get_str(self, var: str, default: str | None = None) -> str | None:
        """Get a string, or default if unset or empty."""
        value = self._env.get(var)
        if not value:
            return default
        return value

    def get_bool(self, var: str, default: bool | None = None) -> bool | None:
        """Get a boolean from environment variable.

        "true", "1", "yes" and "on" (any case) are true; any other
        non-empty value is false.
        """
        value = self._env.get(var)
        if value is None:
            return default
        return value.lower() in TRUE_VALUES

    def get_path(self, var: str, default: Path | None = None) -> Path | None:
        """Get a path with tilde expansion, or default if unset."""
        value = self._env.get(var)
        if not value:
            return default
        return Path(value).expanduser()
