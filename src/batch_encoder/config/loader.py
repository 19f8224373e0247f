"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (applied by the caller, see build_logging_config)
2. Environment variables (BATCH_ENCODER_*)
3. Config file (~/.batch-encoder/config.toml)
4. Default values

Environment variables:
- BATCH_ENCODER_CONFIG_PATH: Path to config file (overrides default location)
- BATCH_ENCODER_NVENC_PATH: NVEncC executable used by job scripts
- BATCH_ENCODER_FFMPEG_PATH: ffmpeg executable used by job scripts
- BATCH_ENCODER_MKVMERGE_PATH: mkvmerge executable used by job scripts
- BATCH_ENCODER_FFPROBE_PATH: ffprobe executable used for probing
- BATCH_ENCODER_WORK_DIR: Directory for intermediates and final outputs
- BATCH_ENCODER_JOB_DIR: Directory for generated job scripts
- BATCH_ENCODER_PROFILES_FILE: YAML file with extra encoder profiles
- BATCH_ENCODER_LOG_LEVEL / _LOG_FILE / _LOG_FORMAT / _LOG_INCLUDE_STDERR
"""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from batch_encoder.config.env import ENV_PREFIX, EnvReader
from batch_encoder.config.models import (
    EncoderConfig,
    LoggingConfig,
    PathsConfig,
    ToolPathsConfig,
)
from batch_encoder.exceptions import ConfigError

logger = logging.getLogger(__name__)

# Default config location
DEFAULT_CONFIG_DIR = Path.home() / ".batch-encoder"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"


def get_default_config_path(env: EnvReader | None = None) -> Path:
    """Get the config file path, honoring BATCH_ENCODER_CONFIG_PATH."""
    env = env or EnvReader()
    return env.get_path(f"{ENV_PREFIX}CONFIG_PATH", DEFAULT_CONFIG_FILE)


def load_config_file(path: Path) -> dict[str, Any]:
    """Load configuration from a TOML file.

    Args:
        path: Path to config file.

    Returns:
        Parsed configuration dict. Empty dict if the file doesn't exist.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """
    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}

    try:
        with path.open("rb") as f:
            config = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in config file {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    logger.debug("Loaded config from %s", path)
    return config


def _section(file_config: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = file_config.get(name, {})
    if not isinstance(section, Mapping):
        raise ConfigError(f"Config section [{name}] must be a table")
    return section


def _file_str(section: Mapping[str, Any], name: str, key: str, default: str) -> str:
    value = section.get(key, default)
    if not isinstance(value, str):
        raise ConfigError(
            f"Config value [{name}].{key} must be a string, got {value!r}"
        )
    return value


def _optional_path(value: Any) -> Path | None:
    if value and not isinstance(value, str):
        raise ConfigError(f"Config path must be a string, got {value!r}")
    return Path(value).expanduser() if value else None


def get_config(
    config_path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> EncoderConfig:
    """Get batch-encoder configuration with environment and file layering.

    Args:
        config_path: Path to config file (overrides BATCH_ENCODER_CONFIG_PATH).
        env: Environment mapping; os.environ when None.

    Returns:
        EncoderConfig with merged configuration.

    Raises:
        ConfigError: If the config file or any value in it is invalid.
    """
    reader = EnvReader(env)
    file_config = load_config_file(config_path or get_default_config_path(reader))

    defaults = ToolPathsConfig()
    tools_file = _section(file_config, "tools")
    tools = ToolPathsConfig(
        **{
            key: reader.get_str(
                f"{ENV_PREFIX}{key.upper()}_PATH",
                _file_str(tools_file, "tools", key, getattr(defaults, key)),
            )
            for key in ("nvenc", "ffmpeg", "mkvmerge", "ffprobe")
        }
    )

    path_defaults = PathsConfig()
    paths_file = _section(file_config, "paths")
    paths = PathsConfig(
        work_dir=reader.get_str(
            f"{ENV_PREFIX}WORK_DIR",
            _file_str(paths_file, "paths", "work_dir", path_defaults.work_dir),
        ),
        job_dir=reader.get_path(
            f"{ENV_PREFIX}JOB_DIR",
            _optional_path(paths_file.get("job_dir")) or path_defaults.job_dir,
        ),
    )

    logging_file = _section(file_config, "logging")
    try:
        logging_config = LoggingConfig(
            level=reader.get_str(
                f"{ENV_PREFIX}LOG_LEVEL", logging_file.get("level", "info")
            ),
            file=reader.get_path(
                f"{ENV_PREFIX}LOG_FILE", _optional_path(logging_file.get("file"))
            ),
            format=reader.get_str(
                f"{ENV_PREFIX}LOG_FORMAT", logging_file.get("format", "text")
            ),
            include_stderr=reader.get_bool(
                f"{ENV_PREFIX}LOG_INCLUDE_STDERR",
                logging_file.get("include_stderr", False),
            ),
            max_bytes=logging_file.get("max_bytes", 10_485_760),
            backup_count=logging_file.get("backup_count", 5),
        )
    except ValueError as e:
        raise ConfigError(f"Invalid [logging] configuration: {e}") from e

    profiles_file = reader.get_path(
        f"{ENV_PREFIX}PROFILES_FILE", _optional_path(file_config.get("profiles_file"))
    )

    return EncoderConfig(
        tools=tools,
        paths=paths,
        logging=logging_config,
        profiles_file=profiles_file,
    )


def build_logging_config(
    base: LoggingConfig,
    *,
    level: str | None = None,
    file: Path | None = None,
    format: str | None = None,
    include_stderr: bool | None = None,
) -> LoggingConfig:
    """Build LoggingConfig by merging base config with CLI overrides.

    Args:
        base: Base logging configuration (typically from config file).
        level: Override log level. If None, uses base.level.
        file: Override log file path. If None, uses base.file.
        format: Override log format (text, json). If None, uses base.format.
        include_stderr: Override stderr inclusion.

    Returns:
        New LoggingConfig with overrides applied. Validation runs via
        LoggingConfig.__post_init__, so invalid values raise ValueError.
    """
    return LoggingConfig(
        level=level if level is not None else base.level,
        file=file if file is not None else base.file,
        format=format if format is not None else base.format,
        include_stderr=(
            include_stderr if include_stderr is not None else base.include_stderr
        ),
        max_bytes=base.max_bytes,
        backup_count=base.backup_count,
    )
