"""Decision policy for batch-encoder.

- modifiers: resize/crop/VPP validation and request pre-flight checks
- smart: the smart decision engine (track selection, audio substitution)
"""

from batch_encoder.policy.modifiers import (
    build_video_modifiers,
    parse_resize,
    validate_crop,
    validate_request,
)
from batch_encoder.policy.smart import (
    assign_default_track,
    decide,
    resolve_smart_audio,
    select_audio_tracks,
    select_subtitle_tracks,
)

__all__ = [
    "assign_default_track",
    "build_video_modifiers",
    "decide",
    "parse_resize",
    "resolve_smart_audio",
    "select_audio_tracks",
    "select_subtitle_tracks",
    "validate_crop",
    "validate_request",
]
