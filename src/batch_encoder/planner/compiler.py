"""Job plan compiler.

Turns one MediaDescriptor and one JobRequest into a Plan. Stage order is
fixed:

    VIDEO_ENCODE, PREMUX     (skipped in video copy mode)
    AUDIO_ENCODE             (always, every kept track in one invocation)
    SUBTITLE_EXTRACT x N     (one per kept subtitle track)
    MUX
    CLEANUP

Compilation is a pure function of its inputs: compiling the same
descriptor and request twice yields equal plans.
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import Iterable

from batch_encoder.exceptions import ConfigError
from batch_encoder.introspector.mappings import (
    map_raw_audio_extension,
    map_subtitle_format,
)
from batch_encoder.models import (
    JobRequest,
    MediaDescriptor,
    Plan,
    SmartDecision,
    Stage,
    StageInput,
    StageKind,
    SubtitleTrack,
    ToolId,
)
from batch_encoder.planner.color import build_color_args, encoder_level
from batch_encoder.planner.mux import (
    build_mux_inputs,
    disposition_args,
    input_args,
    map_args,
    stage_inputs,
)
from batch_encoder.planner.naming import OutputNames, to_canonical
from batch_encoder.policy.modifiers import (
    build_video_modifiers,
    parse_resize,
    validate_crop,
)
from batch_encoder.policy.smart import decide
from batch_encoder.profiles import COPY_MARKER, ProfileResolver, ProfileTable

logger = logging.getLogger(__name__)

# Container for stream copies that have no raw elementary form
COPY_AUDIO_CONTAINER = "mka"


def split_options(options: str, profile: str) -> list[str]:
    """Split a profile option string into arguments.

    Quoted option values (e.g. -af "pan=...") become single arguments.

    Raises:
        ConfigError: If the option string has unbalanced quotes.
    """
    try:
        return shlex.split(options)
    except ValueError as e:
        raise ConfigError(f"Cannot parse options of profile '{profile}': {e}") from e


def title_args(request: JobRequest) -> list[str]:
    """Title metadata override; an empty title strips it."""
    if request.title is None:
        return []
    return ["-metadata", f"title={request.title}"]


def audio_extension(decision: SmartDecision, resolver: ProfileResolver) -> str:
    """Pick the audio stage output extension.

    A stream copy of a single track with a raw elementary form keeps the
    codec's own extension; any other copy goes into Matroska audio.
    """
    if decision.effective_audio_profile != COPY_MARKER:
        return resolver.audio_extension(decision.effective_audio_profile)

    if len(decision.kept_audio_tracks) == 1:
        codec = decision.kept_audio_tracks[0].codec
        raw_ext = map_raw_audio_extension(codec)
        if raw_ext is not None:
            logger.info("[Audio]: Copy mode. Source: %s -> Ext: .%s", codec, raw_ext)
            return raw_ext

    logger.info("[Audio]: Copy mode. Using .%s", COPY_AUDIO_CONTAINER)
    return COPY_AUDIO_CONTAINER


def _video_stages(
    descriptor: MediaDescriptor,
    request: JobRequest,
    resolver: ProfileResolver,
    names: OutputNames,
) -> list[Stage]:
    options = resolver.resolve_video(request.video_profile, request.extra_args)
    args = split_options(options, request.video_profile)
    args.extend(build_video_modifiers(request))

    resize = parse_resize(request.resize)
    width, height = resize if resize else (descriptor.width, descriptor.height)
    args.extend(["--level", encoder_level(width, height)])
    args.extend(build_color_args(descriptor))
    args.extend(["-i", names.source, "-o", names.video])

    encode = Stage(
        kind=StageKind.VIDEO_ENCODE,
        tool=ToolId.NVENC,
        args=tuple(args),
        inputs=(StageInput(names.source, "source"),),
        output=names.video,
    )
    premux = Stage(
        kind=StageKind.PREMUX,
        tool=ToolId.MKVMERGE,
        args=("-o", names.premux, names.video),
        inputs=(StageInput(names.video, "encoded video"),),
        output=names.premux,
    )
    return [encode, premux]


def _audio_stage(
    request: JobRequest,
    decision: SmartDecision,
    resolver: ProfileResolver,
    names: OutputNames,
) -> Stage:
    args = ["-i", names.source]
    if decision.kept_audio_tracks:
        for track in decision.kept_audio_tracks:
            args.extend(["-map", f"0:{track.stream_index}"])
    else:
        # No known audio streams; take whatever the source has
        args.extend(["-map", "0:a?"])

    profile = decision.effective_audio_profile
    options = resolver.resolve_audio(profile, request.extra_args)
    args.extend(split_options(options, profile))
    args.extend(title_args(request))
    args.append(names.audio)

    return Stage(
        kind=StageKind.AUDIO_ENCODE,
        tool=ToolId.FFMPEG,
        args=tuple(args),
        inputs=(StageInput(names.source, "source"),),
        output=names.audio,
    )


def _subtitle_stages(
    decision: SmartDecision, names: OutputNames
) -> list[tuple[Stage, SubtitleTrack]]:
    stages = []
    for track in decision.kept_subtitle_tracks:
        extension, codec_arg = map_subtitle_format(track.codec)
        output = names.subtitle(track, extension)
        stage = Stage(
            kind=StageKind.SUBTITLE_EXTRACT,
            tool=ToolId.FFMPEG,
            args=(
                "-i",
                names.source,
                "-map",
                f"0:{track.stream_index}",
                "-c:s",
                codec_arg,
                output,
            ),
            inputs=(StageInput(names.source, "source"),),
            output=output,
        )
        stages.append((stage, track))
    return stages


def _cleanup_stage(paths: Iterable[str]) -> Stage:
    paths = tuple(paths)
    return Stage(
        kind=StageKind.CLEANUP,
        tool=ToolId.REMOVE,
        args=paths,
        inputs=tuple(StageInput(path, "intermediate") for path in paths),
        output=None,
    )


def compile_plan(
    descriptor: MediaDescriptor,
    request: JobRequest,
    table: ProfileTable,
    warnings: Iterable[str] = (),
) -> Plan:
    """Compile the encoding plan for one file.

    Args:
        descriptor: Normalized media descriptor of request.target.
        request: Job request whose target is a single source file.
        table: Profile table for the batch.
        warnings: Non-fatal warnings already raised for this file (e.g. a
            probe failure), carried into Plan.warnings.

    Returns:
        Immutable Plan for the file.

    Raises:
        UnknownProfileError: If a profile key is not defined.
        ValidationError: If a modifier is malformed.
    """
    parse_resize(request.resize)
    validate_crop(request.crop)

    resolver = ProfileResolver(table)
    decision = decide(descriptor, request, resolver)

    video_ext = "" if decision.video_is_copy else resolver.video_extension(
        request.video_profile
    )
    names = OutputNames.for_source(
        to_canonical(request.target),
        request.work_dir,
        video_ext,
        audio_extension(decision, resolver),
    )

    stages: list[Stage] = []
    cleanup: list[str] = []

    if decision.video_is_copy:
        video_source = names.source
    else:
        stages.extend(_video_stages(descriptor, request, resolver, names))
        video_source = names.premux
        cleanup.append(names.video)

    stages.append(_audio_stage(request, decision, resolver, names))
    cleanup.append(names.audio)
    if not decision.video_is_copy:
        cleanup.append(names.premux)

    subtitle_paths: list[tuple[str, SubtitleTrack]] = []
    for stage, track in _subtitle_stages(decision, names):
        stages.append(stage)
        cleanup.append(stage.output)
        subtitle_paths.append((stage.output, track))

    mux_inputs = build_mux_inputs(
        video_source,
        names.audio,
        names.source if decision.include_chapters else None,
        subtitle_paths,
    )
    mux_args = input_args(mux_inputs) + map_args(mux_inputs) + ["-c", "copy"]
    mux_args.extend(disposition_args(mux_inputs, decision))
    mux_args.extend(title_args(request))
    mux_args.append(names.final)
    stages.append(
        Stage(
            kind=StageKind.MUX,
            tool=ToolId.FFMPEG,
            args=tuple(mux_args),
            inputs=stage_inputs(mux_inputs),
            output=names.final,
        )
    )
    stages.append(_cleanup_stage(cleanup))

    logger.info("Queuing: %s", names.source)
    return Plan(
        source=names.source,
        output=names.final,
        stages=tuple(stages),
        cleanup=tuple(cleanup),
        decision=decision,
        warnings=tuple(warnings) + decision.warnings,
    )
