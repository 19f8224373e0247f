"""Encoder profile tables and resolution.

Key Components:
    models: Fixed and parametrized profile templates, ProfileTable
    builtin: Bundled NVEncC video and libopus audio profiles
    resolver: ProfileResolver (key + extra args -> option string)
    loader: YAML profile files validated with Pydantic
"""

from batch_encoder.profiles.builtin import builtin_profile_table
from batch_encoder.profiles.loader import load_profile_file, parse_profile_data
from batch_encoder.profiles.models import (
    COPY_MARKER,
    ExtraArgs,
    FixedProfile,
    ParametrizedProfile,
    ProfileParameter,
    ProfileTable,
    ProfileTemplate,
)
from batch_encoder.profiles.resolver import ProfileResolver

__all__ = [
    "COPY_MARKER",
    "ExtraArgs",
    "FixedProfile",
    "ParametrizedProfile",
    "ProfileParameter",
    "ProfileResolver",
    "ProfileTable",
    "ProfileTemplate",
    "builtin_profile_table",
    "load_profile_file",
    "parse_profile_data",
]
