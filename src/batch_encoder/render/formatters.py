"""Plan and descriptor output formatting.

Human output is meant for a terminal; JSON output is a stable dictionary
layout for scripting.
"""

from enum import Enum, auto
from typing import Any

from wcwidth import wcswidth

from batch_encoder.models import (
    AudioTrack,
    MediaDescriptor,
    Plan,
    Stage,
    StageKind,
    SubtitleTrack,
)

# Source paths longer than this are shown with their head elided
MAX_PATH_WIDTH = 80


class OutputStyle(Enum):
    """Output verbosity/style options."""

    NORMAL = auto()  # Summary + kept tracks
    VERBOSE = auto()  # Also every stage's arguments


def format_plan_human(plan: Plan, style: OutputStyle = OutputStyle.NORMAL) -> str:
    """Format a plan for human-readable output.

    Args:
        plan: The plan to format.
        style: Output style (NORMAL or VERBOSE).

    Returns:
        Formatted string for terminal output.
    """
    decision = plan.decision
    lines: list[str] = [f"Queuing: {_truncate_head(plan.source, MAX_PATH_WIDTH)}"]
    lines.append(f"  Output: {plan.output}")
    lines.append(
        "  Video: copy" if decision.video_is_copy else "  Video: encode"
    )
    lines.append(f"  Audio profile: {decision.effective_audio_profile}")

    if decision.kept_audio_tracks:
        rows = [
            _audio_row(track, position == decision.default_audio_index)
            for position, track in enumerate(decision.kept_audio_tracks)
        ]
        lines.append("  Audio tracks:")
        lines.extend(
            _format_table(("#", "Codec", "Layout", "Lang", "Default"), rows, indent=4)
        )

    if decision.kept_subtitle_tracks:
        rows = [_subtitle_row(track) for track in decision.kept_subtitle_tracks]
        lines.append("  Subtitles:")
        lines.extend(_format_table(("#", "Codec", "Lang", "Forced", "Title"), rows, 4))

    lines.append(f"  Chapters: {'yes' if decision.include_chapters else 'no'}")

    for warning in plan.warnings:
        lines.append(f"  Warning: {warning}")

    if style == OutputStyle.VERBOSE:
        lines.append("  Stages:")
        for stage in plan.stages:
            lines.append(f"    [{stage.kind.value}] {_stage_brief(stage)}")

    return "\n".join(lines)


def format_descriptor_human(descriptor: MediaDescriptor) -> str:
    """Format a media descriptor for the inspect command."""
    lines = [
        f"Video: {descriptor.video_codec} {descriptor.width}x{descriptor.height}",
        f"  HDR: {'yes' if descriptor.is_hdr else 'no'}",
        f"  Primaries: {descriptor.color_primaries or 'unknown'}",
    ]
    if descriptor.hdr_mastering:
        lines.append(f"  Mastering display: {descriptor.hdr_mastering}")
    lines.append(f"Chapters: {'yes' if descriptor.has_chapters else 'no'}")

    if descriptor.audio_tracks:
        lines.append("Audio:")
        rows = [_audio_row(t, t.is_default) for t in descriptor.audio_tracks]
        lines.extend(
            _format_table(("#", "Codec", "Layout", "Lang", "Default"), rows, indent=2)
        )
    if descriptor.subtitle_tracks:
        lines.append("Subtitles:")
        rows = [_subtitle_row(t) for t in descriptor.subtitle_tracks]
        lines.extend(
            _format_table(("#", "Codec", "Lang", "Forced", "Title"), rows, indent=2)
        )
    return "\n".join(lines)


def plan_to_dict(plan: Plan) -> dict[str, Any]:
    """Format a plan as a JSON-serializable dictionary."""
    decision = plan.decision
    return {
        "source": plan.source,
        "output": plan.output,
        "decision": {
            "effective_audio_profile": decision.effective_audio_profile,
            "video_is_copy": decision.video_is_copy,
            "kept_audio_tracks": [
                _audio_to_dict(t) for t in decision.kept_audio_tracks
            ],
            "kept_subtitle_tracks": [
                _subtitle_to_dict(t) for t in decision.kept_subtitle_tracks
            ],
            "default_audio_index": decision.default_audio_index,
            "include_chapters": decision.include_chapters,
        },
        "stages": [_stage_to_dict(s) for s in plan.stages],
        "cleanup": list(plan.cleanup),
        "warnings": list(plan.warnings),
    }


def descriptor_to_dict(descriptor: MediaDescriptor) -> dict[str, Any]:
    """Format a media descriptor as a JSON-serializable dictionary."""
    return {
        "width": descriptor.width,
        "height": descriptor.height,
        "video_codec": descriptor.video_codec,
        "is_hdr": descriptor.is_hdr,
        "hdr_mastering": descriptor.hdr_mastering,
        "color_primaries": descriptor.color_primaries,
        "audio_tracks": [_audio_to_dict(t) for t in descriptor.audio_tracks],
        "subtitle_tracks": [_subtitle_to_dict(t) for t in descriptor.subtitle_tracks],
        "has_chapters": descriptor.has_chapters,
    }


# =============================================================================
# Human Helpers
# =============================================================================


def _audio_row(track: AudioTrack, is_default: bool) -> tuple[str, ...]:
    return (
        str(track.stream_index),
        track.codec,
        _channels_to_layout(track.channels),
        track.lang,
        "yes" if is_default else "",
    )


def _subtitle_row(track: SubtitleTrack) -> tuple[str, ...]:
    return (
        str(track.stream_index),
        track.codec,
        track.lang,
        "yes" if track.forced else "",
        _truncate(track.title, 30),
    )


def _stage_brief(stage: Stage) -> str:
    if stage.kind == StageKind.CLEANUP:
        return f"{len(stage.args)} file(s)"
    return f"{stage.tool.value} {' '.join(stage.args)}"


def _channels_to_layout(channels: int) -> str:
    """Convert channel count to layout description."""
    layouts = {1: "mono", 2: "stereo", 6: "5.1", 8: "7.1"}
    if channels <= 0:
        return "?"
    return layouts.get(channels, f"{channels}ch")


def _display_width(s: str) -> int:
    """Get the terminal column width of a string."""
    width = wcswidth(s)
    # wcswidth returns -1 if string contains non-printable characters
    return width if width >= 0 else len(s)


def _truncate(s: str, max_width: int) -> str:
    """Truncate string with a trailing ellipsis if it is too wide."""
    if _display_width(s) <= max_width:
        return s
    truncated = ""
    for char in s:
        if _display_width(truncated + char + "...") > max_width:
            break
        truncated += char
    return truncated + "..."


def _truncate_head(s: str, max_width: int) -> str:
    """Keep the tail of a string, eliding its head with a leading ellipsis."""
    if _display_width(s) <= max_width:
        return s
    kept = ""
    for char in reversed(s):
        if _display_width("..." + char + kept) > max_width:
            break
        kept = char + kept
    return "..." + kept


def _pad_to_width(s: str, width: int) -> str:
    return s + " " * max(0, width - _display_width(s))


def _format_table(
    headers: tuple[str, ...],
    rows: list[tuple[str, ...]],
    indent: int = 0,
) -> list[str]:
    """Format a table with headers and rows, aligned by display width."""
    widths = [_display_width(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], _display_width(cell))

    prefix = " " * indent
    lines = [
        prefix + "  ".join(_pad_to_width(h, widths[i]) for i, h in enumerate(headers)),
        prefix + "  ".join("-" * w for w in widths),
    ]
    for row in rows:
        cells = "  ".join(_pad_to_width(cell, widths[i]) for i, cell in enumerate(row))
        lines.append(prefix + cells)
    return [line.rstrip() for line in lines]


# =============================================================================
# JSON Helpers
# =============================================================================


def _audio_to_dict(track: AudioTrack) -> dict[str, Any]:
    return {
        "stream_index": track.stream_index,
        "codec": track.codec,
        "channels": track.channels,
        "lang": track.lang,
        "is_default": track.is_default,
    }


def _subtitle_to_dict(track: SubtitleTrack) -> dict[str, Any]:
    return {
        "stream_index": track.stream_index,
        "codec": track.codec,
        "lang": track.lang,
        "title": track.title,
        "forced": track.forced,
        "sdh": track.sdh,
    }


def _stage_to_dict(stage: Stage) -> dict[str, Any]:
    return {
        "kind": stage.kind.value,
        "tool": stage.tool.value,
        "args": list(stage.args),
        "inputs": [{"path": i.path, "note": i.note} for i in stage.inputs],
        "output": stage.output,
    }
