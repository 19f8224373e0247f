"""Smart decision engine.

Decides, per file, which audio and subtitle tracks survive, which audio
track is flagged default, whether chapters are carried over, and whether
the requested audio profile can be replaced by a stream copy because the
source already matches it.

Smart audio substitution only looks at the first kept audio track. Files
whose kept tracks mix codecs or layouts need an explicit profile.
"""

import logging

from batch_encoder.models import (
    AudioTrack,
    JobRequest,
    MediaDescriptor,
    SmartDecision,
    SubtitleTrack,
)
from batch_encoder.profiles import COPY_MARKER, ProfileResolver

logger = logging.getLogger(__name__)

# Language codes treated as English when selecting subtitles
ENGLISH_CODES = frozenset({"eng", "en", "en-us"})

# Source audio assumed when no audio track is known
FALLBACK_AUDIO_CODEC = "opus"
FALLBACK_AUDIO_CHANNELS = 0

STEREO_TARGETS = frozenset({"opus-stereo", "opus-pans"})
SURROUND_TARGETS = frozenset({"opus-5.1", "opus-8-6"})


def select_audio_tracks(
    tracks: tuple[AudioTrack, ...], lang_filter: frozenset[str]
) -> tuple[tuple[AudioTrack, ...], list[str]]:
    """Select audio tracks by language.

    An empty filter keeps everything. A filter that matches nothing also
    keeps everything, with a warning, so a file never loses all audio.

    Args:
        tracks: Audio tracks in container order.
        lang_filter: Case-folded language codes to keep.

    Returns:
        Tuple of (kept tracks in container order, warnings).
    """
    if not lang_filter:
        return tracks, []

    kept = tuple(t for t in tracks if t.lang.casefold() in lang_filter)
    if kept or not tracks:
        return kept, []

    wanted = ",".join(sorted(lang_filter))
    warning = f"No audio track matches language filter '{wanted}', keeping all tracks"
    logger.warning("%s", warning)
    return tracks, [warning]


def assign_default_track(
    kept: tuple[AudioTrack, ...], default_lang: str | None
) -> int | None:
    """Choose which kept audio track carries the default flag.

    The first track in the requested default language wins. Without a
    match, the first track already flagged default in the source wins.

    Args:
        kept: Kept audio tracks in output order.
        default_lang: Case-folded language code, or None.

    Returns:
        Position within kept, or None if no track qualifies.
    """
    if default_lang:
        for position, track in enumerate(kept):
            if track.lang.casefold() == default_lang:
                return position
    for position, track in enumerate(kept):
        if track.is_default:
            return position
    return None


def _implies_downmix(target: str, channels: int) -> bool:
    if target in STEREO_TARGETS:
        return channels > 2
    if target == "opus-8-6":
        return channels > 6
    return False


def resolve_smart_audio(requested: str, codec: str, channels: int) -> str:
    """Resolve the effective audio profile for a source track.

    Rules, in precedence order:
    1. opus-8-6 on a source of two channels or fewer becomes opus-stereo.
    2. Opus sources are copied when the target already matches them.
    3. AAC sources are copied unless the target implies a downmix.
    4. opus-8-6 on a source wider than 5.1 stays an encode (downmix).

    Args:
        requested: Requested audio profile key.
        codec: Codec of the first kept audio track.
        channels: Channel count of the first kept audio track.

    Returns:
        Effective audio profile key.
    """
    codec = codec.casefold()
    effective = requested

    if effective == "opus-8-6" and channels <= 2:
        logger.info(
            "[Smart Audio]: %dch source, using opus-stereo instead of opus-8-6",
            channels,
        )
        effective = "opus-stereo"

    if codec == "opus":
        if (
            effective == "default"
            or (effective in SURROUND_TARGETS and channels == 6)
            or (effective in STEREO_TARGETS and channels == 2)
        ):
            logger.info(
                "[Smart Audio]: Opus %dch source matches '%s', copying",
                channels,
                effective,
            )
            effective = COPY_MARKER
    elif codec == "aac":
        if _implies_downmix(effective, channels):
            logger.info(
                "[Smart Audio]: AAC %dch source, '%s' downmixes, encoding",
                channels,
                effective,
            )
        elif effective != COPY_MARKER:
            logger.info("[Smart Audio]: AAC source, copying instead of '%s'", effective)
            effective = COPY_MARKER
    elif effective == "opus-8-6" and channels > 6:
        logger.info("[Smart Audio]: %dch source, downmixing to 5.1 Opus", channels)

    return effective


def is_english(lang: str) -> bool:
    """Check whether a language code denotes English."""
    return lang.strip().casefold().replace("_", "-") in ENGLISH_CODES


def select_subtitle_tracks(
    tracks: tuple[SubtitleTrack, ...],
) -> tuple[SubtitleTrack, ...]:
    """Keep English subtitle tracks that are not for the hearing-impaired."""
    kept = []
    for track in tracks:
        if not is_english(track.lang):
            logger.debug(
                "Skipping subtitle %d: language %s", track.stream_index, track.lang
            )
            continue
        if track.sdh or "sdh" in track.title.casefold():
            logger.debug("Skipping subtitle %d: SDH", track.stream_index)
            continue
        kept.append(track)
    return tuple(kept)


def decide(
    descriptor: MediaDescriptor, request: JobRequest, resolver: ProfileResolver
) -> SmartDecision:
    """Run the smart decision engine for one file.

    Args:
        descriptor: Normalized media descriptor.
        request: Job request for this file.
        resolver: Profile resolver for the batch.

    Returns:
        SmartDecision describing what the plan must contain.

    Raises:
        UnknownProfileError: If a requested or substituted profile is missing.
    """
    kept_audio, warnings = select_audio_tracks(
        descriptor.audio_tracks, request.lang_filter
    )
    default_index = assign_default_track(kept_audio, request.default_lang)

    if kept_audio:
        codec, channels = kept_audio[0].codec, kept_audio[0].channels
    else:
        codec, channels = FALLBACK_AUDIO_CODEC, FALLBACK_AUDIO_CHANNELS

    effective_audio = resolve_smart_audio(request.audio_profile, codec, channels)
    # Substituted keys must exist in the table too
    resolver.audio_template(effective_audio)

    video_options = resolver.resolve_video(request.video_profile, request.extra_args)
    video_is_copy = video_options == COPY_MARKER

    kept_subtitles = select_subtitle_tracks(descriptor.subtitle_tracks)

    return SmartDecision(
        effective_audio_profile=effective_audio,
        video_is_copy=video_is_copy,
        kept_audio_tracks=kept_audio,
        kept_subtitle_tracks=kept_subtitles,
        default_audio_index=default_index,
        include_chapters=descriptor.has_chapters,
        warnings=tuple(warnings),
    )
