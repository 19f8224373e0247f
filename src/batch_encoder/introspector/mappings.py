"""Pure mapping tables for ffprobe values.

These functions have no side effects and no external dependencies,
making them trivially testable.
"""

# side_data_type marking HDR mastering-display colorimetry on a frame
MASTERING_DISPLAY_SIDE_DATA = "Mastering display metadata"

# Field order of the mastering-display string: G(x,y)B(x,y)R(x,y)WP(x,y)L(max,min)
MASTERING_DISPLAY_FIELDS: tuple[tuple[str, str, str], ...] = (
    ("G", "green_x", "green_y"),
    ("B", "blue_x", "blue_y"),
    ("R", "red_x", "red_y"),
    ("WP", "white_point_x", "white_point_y"),
    ("L", "max_luminance", "min_luminance"),
)

# Audio codecs whose stream copy can be written as a raw elementary file
RAW_AUDIO_EXTENSIONS: dict[str, str] = {
    "aac": "aac",
    "ac3": "ac3",
    "eac3": "eac3",
    "dts": "dts",
    "flac": "flac",
    "mp3": "mp3",
}

# Subtitle codec -> (file extension, ffmpeg subtitle codec argument)
SUBTITLE_FORMATS: dict[str, tuple[str, str]] = {
    "subrip": ("srt", "copy"),
    "srt": ("srt", "copy"),
    "ass": ("ass", "copy"),
    "ssa": ("ssa", "copy"),
    "webvtt": ("vtt", "copy"),
    "hdmv_pgs_subtitle": ("sup", "copy"),
    "mov_text": ("srt", "srt"),
}

# Matroska subtitle container accepts any subtitle codec
SUBTITLE_FALLBACK_FORMAT: tuple[str, str] = ("mks", "copy")


def map_raw_audio_extension(codec: str) -> str | None:
    """Map an audio codec to its raw elementary-stream extension.

    Args:
        codec: Audio codec name from ffprobe.

    Returns:
        File extension, or None if the codec has no raw form we write.
    """
    return RAW_AUDIO_EXTENSIONS.get(codec.casefold())


def map_subtitle_format(codec: str) -> tuple[str, str]:
    """Map a subtitle codec to its extraction extension and codec argument.

    Args:
        codec: Subtitle codec name from ffprobe.

    Returns:
        Tuple of (extension, ffmpeg -c:s value).
    """
    return SUBTITLE_FORMATS.get(codec.casefold(), SUBTITLE_FALLBACK_FORMAT)
