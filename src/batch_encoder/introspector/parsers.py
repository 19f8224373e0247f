"""Pure parsing functions for ffprobe JSON output.

These functions transform ffprobe JSON data into a MediaDescriptor.
All functions are pure (no I/O, no side effects) for easy testing.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

from batch_encoder.exceptions import ProbeFailure
from batch_encoder.introspector.mappings import (
    MASTERING_DISPLAY_FIELDS,
    MASTERING_DISPLAY_SIDE_DATA,
)
from batch_encoder.models import AudioTrack, MediaDescriptor, SubtitleTrack

logger = logging.getLogger(__name__)


def sanitize_string(value: str | None) -> str | None:
    """Sanitize a string by replacing invalid UTF-8 characters.

    Args:
        value: String value to sanitize.

    Returns:
        Sanitized string or None if input was None.
    """
    if value is None:
        return None
    return str(value).encode("utf-8", errors="replace").decode("utf-8")


def extract_json_document(text: str) -> str | None:
    """Cut the JSON object out of raw probe output.

    ffprobe may print warning lines around the document when stderr is
    merged into stdout, so the object spans the first "{" to the last "}".

    Args:
        text: Raw text printed by the probing tool.

    Returns:
        The JSON object text, or None if no braces are present.
    """
    first = text.find("{")
    last = text.rfind("}")
    if first == -1 or last == -1 or last < first:
        return None
    return text[first : last + 1]


def decode_probe_output(raw: Any, path: str | None = None) -> Mapping[str, Any]:
    """Decode raw probe output into a non-empty mapping.

    Args:
        raw: Decoded mapping, or the raw text/bytes printed by ffprobe.
        path: Optional file path for error messages.

    Returns:
        The decoded top-level JSON object.

    Raises:
        ProbeFailure: If the output is empty or not a JSON object.
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")

    if isinstance(raw, str):
        document = extract_json_document(raw)
        if document is None:
            raise ProbeFailure("No JSON document in probe output", path=path)
        try:
            data = json.loads(document)
        except json.JSONDecodeError as e:
            raise ProbeFailure(f"Invalid probe output: {e}", path=path) from e
    else:
        data = raw

    if not isinstance(data, Mapping):
        raise ProbeFailure("Probe output is not a JSON object", path=path)
    if not data:
        raise ProbeFailure("Probe output is empty", path=path)
    return data


def lower_keys(value: Any) -> dict[str, Any]:
    """Return a copy of a tag or disposition mapping with lower-case keys.

    Container tag keys may be upper or lower case (LANGUAGE vs language).
    Non-mapping values yield an empty dict.
    """
    if not isinstance(value, Mapping):
        return {}
    return {str(key).lower(): item for key, item in value.items()}


def parse_fraction_numerator(value: Any) -> str:
    """Return the numerator of an ffprobe "num/den" value.

    Args:
        value: A "num/den" string, a plain number, or None.

    Returns:
        The numerator as a string, "0" if the value is missing.
    """
    if value is None:
        return "0"
    numerator = str(value).split("/", 1)[0].strip()
    return numerator or "0"


def format_mastering_string(side_data: Mapping[str, Any]) -> str:
    """Format mastering-display side data as G(x,y)B(x,y)R(x,y)WP(x,y)L(max,min).

    Args:
        side_data: A side_data_list entry of mastering-display type.

    Returns:
        Mastering display string for the encoder.
    """
    parts = []
    for label, first_key, second_key in MASTERING_DISPLAY_FIELDS:
        first = parse_fraction_numerator(side_data.get(first_key))
        second = parse_fraction_numerator(side_data.get(second_key))
        parts.append(f"{label}({first},{second})")
    return "".join(parts)


def find_mastering_display(frames: list[Any]) -> str | None:
    """Scan sampled frames for mastering-display side data.

    Args:
        frames: Frame dictionaries from ffprobe -show_frames.

    Returns:
        Mastering string from the first matching entry, or None.
    """
    for frame in frames:
        if not isinstance(frame, Mapping):
            continue
        side_data_list = frame.get("side_data_list") or []
        if not isinstance(side_data_list, list):
            continue
        for side_data in side_data_list:
            if (
                isinstance(side_data, Mapping)
                and side_data.get("side_data_type") == MASTERING_DISPLAY_SIDE_DATA
            ):
                return format_mastering_string(side_data)
    return None


def _as_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _flag(disposition: Mapping[str, Any], key: str) -> bool:
    return _as_int(disposition.get(key)) != 0


def _language(tags: Mapping[str, Any]) -> str:
    raw = tags.get("language")
    if not raw:
        return "und"
    return str(raw).strip().casefold() or "und"


def _require_list(data: Mapping[str, Any], key: str, path: str | None) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ProbeFailure(f"Probe output member '{key}' is not a list", path=path)
    return value


def parse_audio_stream(stream: Mapping[str, Any], index: int) -> AudioTrack:
    """Parse an ffprobe audio stream into an AudioTrack.

    Args:
        stream: Stream dictionary from ffprobe JSON.
        index: Global stream index.

    Returns:
        AudioTrack domain object.
    """
    tags = lower_keys(stream.get("tags"))
    disposition = lower_keys(stream.get("disposition"))
    return AudioTrack(
        stream_index=index,
        codec=str(stream.get("codec_name") or "unknown").casefold(),
        channels=_as_int(stream.get("channels")),
        lang=_language(tags),
        is_default=_flag(disposition, "default"),
    )


def parse_subtitle_stream(stream: Mapping[str, Any], index: int) -> SubtitleTrack:
    """Parse an ffprobe subtitle stream into a SubtitleTrack.

    A track counts as SDH when its hearing_impaired disposition is set or
    its title mentions "sdh".

    Args:
        stream: Stream dictionary from ffprobe JSON.
        index: Global stream index.

    Returns:
        SubtitleTrack domain object.
    """
    tags = lower_keys(stream.get("tags"))
    disposition = lower_keys(stream.get("disposition"))
    title = sanitize_string(tags.get("title")) or ""
    sdh = _flag(disposition, "hearing_impaired") or "sdh" in title.casefold()
    return SubtitleTrack(
        stream_index=index,
        codec=str(stream.get("codec_name") or "unknown").casefold(),
        lang=_language(tags),
        title=title,
        forced=_flag(disposition, "forced"),
        sdh=sdh,
    )


def normalize(
    raw: Any, path: str | None = None, warnings: list[str] | None = None
) -> MediaDescriptor:
    """Normalize raw ffprobe output into a MediaDescriptor.

    Args:
        raw: Decoded ffprobe JSON, or the raw text printed by ffprobe.
        path: Optional file path for error messages.
        warnings: Optional list collecting recoverable problems, such as
            skipped duplicate streams.

    Returns:
        MediaDescriptor for the probed file.

    Raises:
        ProbeFailure: If the output cannot be parsed.
    """
    data = decode_probe_output(raw, path)
    streams = _require_list(data, "streams", path)
    chapters = _require_list(data, "chapters", path)
    frames = _require_list(data, "frames", path)

    video: Mapping[str, Any] | None = None
    audio_tracks: list[AudioTrack] = []
    subtitle_tracks: list[SubtitleTrack] = []
    seen_indices: set[int] = set()

    for position, stream in enumerate(streams):
        if not isinstance(stream, Mapping):
            raise ProbeFailure(f"Stream {position} is not an object", path=path)

        index = _as_int(stream.get("index"), position)
        if index in seen_indices:
            warning = f"Duplicate stream index {index} in {path or 'file'}, skipping"
            logger.warning("%s", warning)
            if warnings is not None:
                warnings.append(warning)
            continue
        seen_indices.add(index)

        codec_type = stream.get("codec_type")
        if codec_type == "video":
            if video is None:
                video = stream
        elif codec_type == "audio":
            audio_tracks.append(parse_audio_stream(stream, index))
        elif codec_type == "subtitle":
            subtitle_tracks.append(parse_subtitle_stream(stream, index))

    mastering = find_mastering_display(frames)

    width = height = 0
    video_codec = "unknown"
    primaries = None
    if video is not None:
        width = _as_int(video.get("width"))
        height = _as_int(video.get("height"))
        video_codec = str(video.get("codec_name") or "unknown")
        primaries = video.get("color_primaries") or None

    return MediaDescriptor(
        width=width,
        height=height,
        video_codec=video_codec,
        is_hdr=mastering is not None,
        hdr_mastering=mastering,
        color_primaries=primaries,
        audio_tracks=tuple(audio_tracks),
        subtitle_tracks=tuple(subtitle_tracks),
        has_chapters=len(chapters) > 0,
    )


def load_descriptor(
    raw: Any, path: str | None = None
) -> tuple[MediaDescriptor, list[str]]:
    """Normalize probe output, degrading to defaults on failure.

    Args:
        raw: Decoded ffprobe JSON, or the raw text printed by ffprobe.
        path: Optional file path for the warning message.

    Returns:
        Tuple of (descriptor, warnings).
    """
    warnings: list[str] = []
    try:
        return normalize(raw, path, warnings), warnings
    except ProbeFailure as e:
        name = path or "file"
        warning = f"Could not analyze {name}: {e.message}. Using defaults."
        logger.warning("%s", warning)
        return MediaDescriptor.fallback(), [warning]
