"""Configuration management for batch-encoder.

This module provides configuration loading with precedence handling:
1. CLI flags (highest priority)
2. Environment variables (BATCH_ENCODER_*)
3. Config file (~/.batch-encoder/config.toml)
4. Default values (lowest priority)
"""

from batch_encoder.config.env import EnvReader
from batch_encoder.config.loader import (
    build_logging_config,
    get_config,
    get_default_config_path,
    load_config_file,
)
from batch_encoder.config.models import (
    EncoderConfig,
    LoggingConfig,
    PathsConfig,
    ToolPathsConfig,
)

__all__ = [
    # Models
    "EncoderConfig",
    "LoggingConfig",
    "PathsConfig",
    "ToolPathsConfig",
    # Loader
    "EnvReader",
    "build_logging_config",
    "get_config",
    "get_default_config_path",
    "load_config_file",
]
