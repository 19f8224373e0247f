"""Muxer input bookkeeping.

The mux stage's "-i" list and map list are both projections of a single
ordered list of MuxInput records, so input indices and stream maps cannot
drift apart. Index layout:

    0   video source (premux output, or the source file in copy mode)
    1   audio stage output, all tracks
    2+  chapter source (if any), then one subtitle extract per kept track
"""

from dataclasses import dataclass
from enum import Enum

from batch_encoder.exceptions import PlanConsistencyError
from batch_encoder.models import SmartDecision, StageInput, SubtitleTrack


class MuxPurpose(str, Enum):
    """Why a file is fed to the muxer."""

    VIDEO = "video"
    AUDIO = "audio"
    CHAPTERS = "chapters"
    SUBTITLE = "subtitle"


@dataclass(frozen=True)
class MuxInput:
    """One muxer input and how its streams are selected."""

    index: int
    path: str
    purpose: MuxPurpose
    subtitle: SubtitleTrack | None = None


def build_mux_inputs(
    video_source: str,
    audio_path: str,
    chapter_source: str | None,
    subtitle_paths: list[tuple[str, SubtitleTrack]],
) -> tuple[MuxInput, ...]:
    """Assign muxer-local indices to every input.

    Args:
        video_source: File providing the video stream.
        audio_path: Output of the audio stage.
        chapter_source: File carrying chapters, or None.
        subtitle_paths: (extract path, track) pairs in kept order.

    Returns:
        MuxInput records ordered by index.
    """
    entries: list[tuple[str, MuxPurpose, SubtitleTrack | None]] = [
        (video_source, MuxPurpose.VIDEO, None),
        (audio_path, MuxPurpose.AUDIO, None),
    ]
    if chapter_source is not None:
        entries.append((chapter_source, MuxPurpose.CHAPTERS, None))
    for path, track in subtitle_paths:
        entries.append((path, MuxPurpose.SUBTITLE, track))

    inputs = tuple(
        MuxInput(index=i, path=path, purpose=purpose, subtitle=track)
        for i, (path, purpose, track) in enumerate(entries)
    )
    check_mux_inputs(inputs)
    return inputs


def check_mux_inputs(inputs: tuple[MuxInput, ...]) -> None:
    """Verify indices are 0..N-1 with no gap or repeat, video then audio first.

    Raises:
        PlanConsistencyError: If the layout is violated.
    """
    indices = [entry.index for entry in inputs]
    if indices != list(range(len(inputs))):
        raise PlanConsistencyError(f"Mux input indices are not contiguous: {indices}")
    purposes = [entry.purpose for entry in inputs[:2]]
    if purposes != [MuxPurpose.VIDEO, MuxPurpose.AUDIO]:
        raise PlanConsistencyError(
            f"Mux inputs must start with video then audio, got {purposes}"
        )


def input_args(inputs: tuple[MuxInput, ...]) -> list[str]:
    """Project the "-i" argument list."""
    args: list[str] = []
    for entry in inputs:
        args.extend(["-i", entry.path])
    return args


def map_args(inputs: tuple[MuxInput, ...]) -> list[str]:
    """Project the stream map list, one entry per input in index order."""
    args: list[str] = []
    for entry in inputs:
        if entry.purpose == MuxPurpose.VIDEO:
            args.extend(["-map", f"{entry.index}:v:0"])
        elif entry.purpose == MuxPurpose.AUDIO:
            args.extend(["-map", f"{entry.index}:a"])
        elif entry.purpose == MuxPurpose.CHAPTERS:
            args.extend(["-map_chapters", str(entry.index)])
        else:
            args.extend(["-map", f"{entry.index}:s:0"])
    return args


def disposition_args(
    inputs: tuple[MuxInput, ...], decision: SmartDecision
) -> list[str]:
    """Build audio default flags and subtitle language/forced flags.

    Every kept audio track gets an explicit disposition so the source's
    default flags never leak through.
    """
    args: list[str] = []
    for position, _ in enumerate(decision.kept_audio_tracks):
        flag = "default" if position == decision.default_audio_index else "0"
        args.extend([f"-disposition:a:{position}", flag])

    subtitles = [e.subtitle for e in inputs if e.purpose == MuxPurpose.SUBTITLE]
    for position, track in enumerate(subtitles):
        if track is None:
            continue
        args.extend([f"-metadata:s:s:{position}", f"language={track.lang}"])
        args.extend([f"-disposition:s:{position}", "forced" if track.forced else "0"])
    return args


def stage_inputs(inputs: tuple[MuxInput, ...]) -> tuple[StageInput, ...]:
    """Project the inputs as StageInput records for the mux stage."""
    return tuple(StageInput(entry.path, entry.purpose.value) for entry in inputs)
