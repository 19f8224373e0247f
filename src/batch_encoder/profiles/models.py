"""Profile template models.

A profile is either fixed (a verbatim option string) or parametrized (an
option template with an explicit parameter schema). Parametrized profiles
are rendered by a pure function of the caller's extra arguments.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Union

from batch_encoder.exceptions import ValidationError

# Reserved profile key meaning "stream copy, skip the encode stage"
COPY_MARKER = "copy"

ExtraArgs = Mapping[str, Union[str, bool]]


@dataclass(frozen=True)
class ProfileParameter:
    """A named template parameter with alias keys and a fallback default."""

    name: str
    aliases: tuple[str, ...]
    """Keys looked up in the extra arguments, first match wins."""
    default: str

    def lookup(self, extra_args: ExtraArgs) -> str:
        """Return the parameter value from extra arguments or the default.

        Raises:
            ValidationError: If an alias was passed as a bare flag or with
                an empty value.
        """
        for alias in self.aliases:
            if alias not in extra_args:
                continue
            value = extra_args[alias]
            if isinstance(value, bool) or not str(value).strip():
                raise ValidationError(
                    f"Profile parameter '--{alias}' requires a value "
                    f"(e.g. --{alias}={self.default})",
                    field=alias,
                    value=value,
                )
            return str(value)
        return self.default


@dataclass(frozen=True)
class FixedProfile:
    """Profile whose option string never changes."""

    options: str
    extension: str

    def render(self, extra_args: ExtraArgs) -> str:
        return self.options


@dataclass(frozen=True)
class ParametrizedProfile:
    """Profile whose options are filled in from extra arguments.

    The template uses str.format placeholders named after the parameters.
    """

    template: str
    parameters: tuple[ProfileParameter, ...]
    extension: str

    def values(self, extra_args: ExtraArgs) -> dict[str, str]:
        """Resolve every parameter against the extra arguments."""
        return {param.name: param.lookup(extra_args) for param in self.parameters}

    def render(self, extra_args: ExtraArgs) -> str:
        return self.template.format(**self.values(extra_args))


ProfileTemplate = Union[FixedProfile, ParametrizedProfile]


@dataclass(frozen=True)
class ProfileTable:
    """Video and audio profile templates keyed by profile name."""

    video: Mapping[str, ProfileTemplate] = field(default_factory=dict)
    audio: Mapping[str, ProfileTemplate] = field(default_factory=dict)

    def merged(
        self,
        video: Mapping[str, ProfileTemplate] | None = None,
        audio: Mapping[str, ProfileTemplate] | None = None,
    ) -> "ProfileTable":
        """Return a new table with the given profiles added or replaced."""
        return ProfileTable(
            video={**self.video, **(video or {})},
            audio={**self.audio, **(audio or {})},
        )
