"""Bundled video (NVEncC HEVC) and audio (ffmpeg libopus) profiles."""

from batch_encoder.profiles.models import (
    COPY_MARKER,
    FixedProfile,
    ParametrizedProfile,
    ProfileParameter,
    ProfileTable,
)

# Extension of every bundled video encode (raw HEVC elementary stream)
VIDEO_EXTENSION = "h265"

# Extension of every bundled audio encode
AUDIO_EXTENSION = "opus"

_NVENC_QUALITY = (
    "--codec h265 --preset quality --level auto --output-depth 10 "
    "--aq-temporal --mv-precision Q-pel --lookahead 32 --avhw"
)

_VIDEO_BITRATE = ProfileParameter("bitrate", ("bitrate", "bitvid"), "1200")
_AUDIO_BITRATE_ALIASES = ("abitrate", "bitaud")

# 7.1 -> 5.1 fold: back channels and LFE are spread over the remaining outputs
_PAN_71_TO_51 = (
    '-af "pan=5.1|FL=FL+0.5*BL+0.5*LFE|FR=FR+0.5*BR+0.5*LFE|FC=FC'
    '|BL=0.5*BL+0.5*LFE|BR=0.5*BR+0.5*LFE"'
)
_PAN_TO_STEREO = (
    '-af "volume=1.65,pan=stereo|FL=0.5*FC+0.707*FL+0.707*BL+0.5*LFE'
    '|FR=0.5*FC+0.707*FR+0.707*BR+0.5*LFE"'
)


def _audio_bitrate(default: str) -> ProfileParameter:
    return ProfileParameter("abitrate", _AUDIO_BITRATE_ALIASES, default)


BUILTIN_VIDEO_PROFILES = {
    "default": FixedProfile(
        "--vbrhq 1200 --codec h265 --preset quality --level auto --output-depth 10",
        VIDEO_EXTENSION,
    ),
    "2pass": ParametrizedProfile(
        "--vbrhq {bitrate} " + _NVENC_QUALITY,
        (_VIDEO_BITRATE,),
        VIDEO_EXTENSION,
    ),
    "cqp": ParametrizedProfile(
        "--cqp {q} " + _NVENC_QUALITY,
        (ProfileParameter("q", ("q",), "20"),),
        VIDEO_EXTENSION,
    ),
    COPY_MARKER: FixedProfile(COPY_MARKER, ""),
}

BUILTIN_AUDIO_PROFILES = {
    "opus-8-6": ParametrizedProfile(
        "-c:a libopus -b:a {abitrate} -vbr on -ac 6 " + _PAN_71_TO_51,
        (_audio_bitrate("320k"),),
        AUDIO_EXTENSION,
    ),
    "opus-5.1": ParametrizedProfile(
        '-c:a libopus -b:a {abitrate} -af "channelmap=channel_layout=5.1"',
        (_audio_bitrate("224k"),),
        AUDIO_EXTENSION,
    ),
    "opus-pans": ParametrizedProfile(
        "-c:a libopus -b:a {abitrate} " + _PAN_TO_STEREO,
        (_audio_bitrate("128k"),),
        AUDIO_EXTENSION,
    ),
    "opus-stereo": ParametrizedProfile(
        "-c:a libopus -b:a {abitrate} -ac 2",
        (_audio_bitrate("100k"),),
        AUDIO_EXTENSION,
    ),
    COPY_MARKER: FixedProfile("-c:a copy", "mka"),
    "default": FixedProfile("-c:a libopus -b:a 192k", AUDIO_EXTENSION),
}


def builtin_profile_table() -> ProfileTable:
    """Return the bundled profile table."""
    return ProfileTable(
        video=dict(BUILTIN_VIDEO_PROFILES),
        audio=dict(BUILTIN_AUDIO_PROFILES),
    )
