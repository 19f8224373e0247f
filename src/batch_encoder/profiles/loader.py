"""User profile file loading and validation.

Profile files are YAML documents that add or replace entries in the
bundled profile table:

    video:
      fast: "--cqp 28 --codec h265 --preset performance"
      anime:
        options: "--cqp {q} --codec h265 --preset quality"
        parameters:
          q: {aliases: [q, quality], default: "24"}
    audio:
      aac-stereo:
        options: "-c:a aac -b:a {abitrate} -ac 2"
        extension: m4a
        parameters:
          abitrate: {aliases: [abitrate, bitaud], default: 160k}

Plain strings become fixed profiles. Literal braces in a parametrized
template must be doubled ("{{" and "}}").
"""

import logging
import string
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from batch_encoder.exceptions import ConfigError
from batch_encoder.profiles.builtin import (
    AUDIO_EXTENSION,
    VIDEO_EXTENSION,
    builtin_profile_table,
)
from batch_encoder.profiles.models import (
    COPY_MARKER,
    FixedProfile,
    ParametrizedProfile,
    ProfileParameter,
    ProfileTable,
    ProfileTemplate,
)

logger = logging.getLogger(__name__)


class ParameterModel(BaseModel):
    """Pydantic model for one template parameter."""

    model_config = ConfigDict(extra="forbid")

    aliases: list[str] = Field(default_factory=list)
    default: str

    @field_validator("default", mode="before")
    @classmethod
    def coerce_default(cls, v: Any) -> Any:
        """Accept bare YAML numbers (q: 20) as strings."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class ProfileModel(BaseModel):
    """Pydantic model for a profile definition."""

    model_config = ConfigDict(extra="forbid")

    options: str = Field(min_length=1)
    extension: str | None = Field(default=None, pattern=r"^[A-Za-z0-9]+$")
    parameters: dict[str, ParameterModel] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_placeholders(self) -> "ProfileModel":
        """Every placeholder in options must name a declared parameter."""
        try:
            fields = {
                name
                for _, name, _, _ in string.Formatter().parse(self.options)
                if name is not None
            }
        except ValueError as e:
            raise ValueError(f"Malformed options template: {e}") from e
        undeclared = fields - set(self.parameters)
        if undeclared:
            raise ValueError(
                f"Undeclared template parameters: {', '.join(sorted(undeclared))}"
            )
        return self


class ProfileFileModel(BaseModel):
    """Pydantic model for a whole profile file."""

    model_config = ConfigDict(extra="forbid")

    video: dict[str, str | ProfileModel] = Field(default_factory=dict)
    audio: dict[str, str | ProfileModel] = Field(default_factory=dict)

    @field_validator("video")
    @classmethod
    def validate_video_keys(
        cls, v: dict[str, str | ProfileModel]
    ) -> dict[str, str | ProfileModel]:
        """The video copy key is reserved."""
        if COPY_MARKER in v:
            raise ValueError(f"video profile '{COPY_MARKER}' is reserved")
        return v


def _to_template(entry: str | ProfileModel, extension: str) -> ProfileTemplate:
    if isinstance(entry, str):
        return FixedProfile(entry, extension)
    ext = entry.extension or extension
    if not entry.parameters:
        # Unescape doubled braces the same way str.format would
        return FixedProfile(entry.options.format(), ext)
    parameters = tuple(
        ProfileParameter(name, tuple(param.aliases) or (name,), param.default)
        for name, param in entry.parameters.items()
    )
    return ParametrizedProfile(entry.options, parameters, ext)


def parse_profile_data(data: Any, base: ProfileTable | None = None) -> ProfileTable:
    """Validate profile file data and merge it into a table.

    Args:
        data: Parsed YAML document.
        base: Table to extend. Defaults to the bundled profiles.

    Returns:
        New ProfileTable with the file's profiles added or replaced.

    Raises:
        ConfigError: If the data does not describe valid profiles.
    """
    if data is None:
        data = {}
    try:
        model = ProfileFileModel.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid profile definitions: {e}") from e

    base = base if base is not None else builtin_profile_table()
    video = {key: _to_template(v, VIDEO_EXTENSION) for key, v in model.video.items()}
    audio = {key: _to_template(v, AUDIO_EXTENSION) for key, v in model.audio.items()}
    return base.merged(video=video, audio=audio)


def load_profile_file(path: Path, base: ProfileTable | None = None) -> ProfileTable:
    """Load a YAML profile file.

    Args:
        path: Path to the YAML file.
        base: Table to extend. Defaults to the bundled profiles.

    Returns:
        Merged ProfileTable.

    Raises:
        ConfigError: If the file cannot be read or is invalid.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read profile file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in profile file {path}: {e}") from e

    table = parse_profile_data(data, base)
    logger.info(
        "Loaded profile file %s (%d video, %d audio profiles)",
        path,
        len(table.video),
        len(table.audio),
    )
    return table
