"""Configuration data models.

This module defines dataclasses for batch-encoder configuration options.
Tool paths are kept as plain strings in the syntax of the machine that will
run the generated job scripts, which is usually not the planning host.
"""

from dataclasses import dataclass, field
from pathlib import Path

VALID_LOG_LEVELS = frozenset({"debug", "info", "warning", "error"})
VALID_LOG_FORMATS = frozenset({"text", "json"})


@dataclass(frozen=True)
class ToolPathsConfig:
    """Executables referenced by generated job scripts.

    Bare names are resolved through PATH on the machine running the jobs.
    """

    nvenc: str = "NVEncC64.exe"
    ffmpeg: str = "ffmpeg.exe"
    mkvmerge: str = "mkvmerge.exe"
    # Run on the planning host to probe sources
    ffprobe: str = "ffprobe"


@dataclass(frozen=True)
class PathsConfig:
    """Output locations."""

    # Encoder intermediates and final outputs
    work_dir: str = "encodes"

    # Generated .ps1 job scripts
    job_dir: Path = Path("output")


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        for name in ("level", "format"):
            value = getattr(self, name)
            if not isinstance(value, str):
                raise ValueError(f"{name} must be a string, got {value!r}")
        for name in ("max_bytes", "backup_count"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
        if not isinstance(self.include_stderr, bool):
            raise ValueError(
                f"include_stderr must be a boolean, got {self.include_stderr!r}"
            )
        if self.level.lower() not in VALID_LOG_LEVELS:
            raise ValueError(
                f"level must be one of {sorted(VALID_LOG_LEVELS)}, got {self.level}"
            )
        if self.format.lower() not in VALID_LOG_FORMATS:
            raise ValueError(
                f"format must be one of {sorted(VALID_LOG_FORMATS)}, got {self.format}"
            )
        if self.max_bytes <= 0:
            raise ValueError(f"max_bytes must be positive, got {self.max_bytes}")
        if self.backup_count < 0:
            raise ValueError(
                f"backup_count must be non-negative, got {self.backup_count}"
            )


@dataclass
class EncoderConfig:
    """Main configuration for batch-encoder."""

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Optional YAML file adding or overriding encoder profiles
    profiles_file: Path | None = None
