"""Domain models for media descriptors, job requests and plans.

All models are frozen dataclasses. A Plan is built once per input file and
never mutated afterward, so plans for different files never share state.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from batch_encoder.exceptions import ValidationError

# Default frame size assumed when a file cannot be probed
FALLBACK_WIDTH = 1920
FALLBACK_HEIGHT = 1080


class VppMode(str, Enum):
    """Video post-processing filters applied by the video encoder."""

    NONE = "none"
    EDGE = "edge"  # Edge enhancement
    DEBAND = "deband"  # Banding removal
    BOTH = "both"


class StageKind(str, Enum):
    """Kind of external-tool invocation within a plan."""

    VIDEO_ENCODE = "video_encode"
    PREMUX = "premux"
    AUDIO_ENCODE = "audio_encode"
    SUBTITLE_EXTRACT = "subtitle_extract"
    MUX = "mux"
    CLEANUP = "cleanup"


class ToolId(str, Enum):
    """External tools a stage can invoke.

    Renderers map each id to a concrete executable or shell builtin.
    """

    NVENC = "nvenc"
    FFMPEG = "ffmpeg"
    MKVMERGE = "mkvmerge"
    REMOVE = "remove"


@dataclass(frozen=True)
class AudioTrack:
    """One audio stream of the source container."""

    stream_index: int
    codec: str
    channels: int = 0
    lang: str = "und"
    is_default: bool = False


@dataclass(frozen=True)
class SubtitleTrack:
    """One subtitle stream of the source container."""

    stream_index: int
    codec: str
    lang: str = "und"
    title: str = ""
    forced: bool = False
    sdh: bool = False


@dataclass(frozen=True)
class MediaDescriptor:
    """Canonical, tool-independent summary of a probed media file.

    Stream indices are the source container's global indices; they are
    never renumbered here.
    """

    width: int = 0
    height: int = 0
    video_codec: str = "unknown"
    is_hdr: bool = False
    hdr_mastering: str | None = None
    color_primaries: str | None = None
    audio_tracks: tuple[AudioTrack, ...] = ()
    subtitle_tracks: tuple[SubtitleTrack, ...] = ()
    has_chapters: bool = False

    @classmethod
    def fallback(cls) -> "MediaDescriptor":
        """Descriptor used when a file cannot be probed.

        Describes a plain SDR 1080p source with no known tracks.
        """
        return cls(width=FALLBACK_WIDTH, height=FALLBACK_HEIGHT)


@dataclass(frozen=True)
class JobRequest:
    """Resolved user intent for one batch (or one file within it).

    Language codes are case-folded on construction so downstream
    comparisons never need to repeat it.
    """

    target: str
    prefix: str = ""
    work_dir: str = ""
    video_profile: str = "default"
    audio_profile: str = "default"
    resize: str = ""
    crop: str = ""
    vpp: VppMode = VppMode.EDGE
    lang_filter: frozenset[str] = frozenset()
    default_lang: str | None = None
    title: str | None = None
    """Title metadata override. Empty string strips the title."""
    extra_args: Mapping[str, str | bool] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Normalize language codes and coerce the VPP mode."""
        if not isinstance(self.vpp, VppMode):
            try:
                object.__setattr__(self, "vpp", VppMode(str(self.vpp).lower()))
            except ValueError:
                valid = ", ".join(m.value for m in VppMode)
                raise ValidationError(
                    f"Invalid vpp mode '{self.vpp}'. Use one of: {valid}.",
                    field="vpp",
                    value=self.vpp,
                ) from None
        object.__setattr__(
            self,
            "lang_filter",
            frozenset(code.strip().casefold() for code in self.lang_filter if code),
        )
        if self.default_lang is not None:
            object.__setattr__(self, "default_lang", self.default_lang.casefold())


@dataclass(frozen=True)
class StageInput:
    """A file read by a stage, with a note describing its role."""

    path: str
    note: str


@dataclass(frozen=True)
class Stage:
    """One abstract external-tool invocation."""

    kind: StageKind
    tool: ToolId
    args: tuple[str, ...]
    inputs: tuple[StageInput, ...] = ()
    output: str | None = None


@dataclass(frozen=True)
class SmartDecision:
    """Outcome of the smart decision engine for one file."""

    effective_audio_profile: str
    video_is_copy: bool
    kept_audio_tracks: tuple[AudioTrack, ...]
    kept_subtitle_tracks: tuple[SubtitleTrack, ...]
    default_audio_index: int | None
    """Position within kept_audio_tracks that receives the default flag."""
    include_chapters: bool
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class Plan:
    """Complete, ordered set of stages for one input file."""

    source: str
    output: str
    stages: tuple[Stage, ...]
    cleanup: tuple[str, ...]
    decision: SmartDecision
    warnings: tuple[str, ...] = ()

    def stages_of(self, kind: StageKind) -> tuple[Stage, ...]:
        """Return the stages of the given kind, in plan order."""
        return tuple(s for s in self.stages if s.kind == kind)

    def first(self, kind: StageKind) -> Stage | None:
        """Return the first stage of the given kind, if any."""
        for stage in self.stages:
            if stage.kind == kind:
                return stage
        return None
