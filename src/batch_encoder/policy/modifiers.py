"""Video modifier validation and request pre-flight checks.

validate_request() runs once per batch, before any plan is compiled, so a
malformed modifier or unknown profile fails the whole batch without
producing partial output.
"""

import logging
import re

from batch_encoder.exceptions import ValidationError
from batch_encoder.models import JobRequest, VppMode
from batch_encoder.profiles import COPY_MARKER, ProfileResolver

logger = logging.getLogger(__name__)

RESIZE_PATTERN = re.compile(r"^(\d+)x(\d+)$")
CROP_PATTERN = re.compile(r"^\d+,\d+,\d+,\d+$")

VPP_OPTIONS: dict[VppMode, tuple[str, ...]] = {
    VppMode.NONE: (),
    VppMode.EDGE: ("--vpp-edgelevel",),
    VppMode.DEBAND: ("--vpp-deband",),
    VppMode.BOTH: ("--vpp-edgelevel", "--vpp-deband"),
}


def parse_resize(value: str) -> tuple[int, int] | None:
    """Parse a WxH resize modifier.

    Args:
        value: Resize string, empty for no resize.

    Returns:
        (width, height), or None when value is empty.

    Raises:
        ValidationError: If the value is not of the form WxH.
    """
    if not value:
        return None
    match = RESIZE_PATTERN.match(value)
    if match is None:
        raise ValidationError(
            f"Invalid resize format '{value}'. Use WxH.", field="resize", value=value
        )
    return int(match.group(1)), int(match.group(2))


def validate_crop(value: str) -> None:
    """Validate an L,T,R,B crop modifier.

    Raises:
        ValidationError: If the value is not four non-negative integers.
    """
    if value and not CROP_PATTERN.match(value):
        raise ValidationError(
            f"Invalid crop format '{value}'. Use L,T,R,B.", field="crop", value=value
        )


def build_video_modifiers(request: JobRequest) -> list[str]:
    """Build encoder arguments for the VPP, resize and crop modifiers.

    Args:
        request: Job request holding the modifiers.

    Returns:
        Argument list, appended after the profile options.
    """
    args = list(VPP_OPTIONS[request.vpp])
    if parse_resize(request.resize) is not None:
        args.extend(["--output-res", request.resize])
    if request.crop:
        validate_crop(request.crop)
        args.extend(["--crop", request.crop])
    return args


def validate_request(request: JobRequest, resolver: ProfileResolver) -> None:
    """Check a job request before any plan is built.

    Resolving both profiles also exercises their templates, so bare-flag
    template arguments are caught here too.

    Raises:
        ValidationError: If a modifier or template argument is malformed.
        UnknownProfileError: If a profile key is not defined.
    """
    parse_resize(request.resize)
    validate_crop(request.crop)
    resolver.resolve_video(request.video_profile, request.extra_args)
    resolver.resolve_audio(request.audio_profile, request.extra_args)

    logger.info("Profile [Video]: %s", request.video_profile)
    logger.info("Profile [Audio]: %s", request.audio_profile)
    if request.video_profile == COPY_MARKER:
        logger.info("Video copy mode: modifiers are not applied")
        return
    if request.vpp != VppMode.NONE:
        logger.info(
            "Modifier [VPP]: %s -> %s",
            request.vpp.value,
            " ".join(VPP_OPTIONS[request.vpp]),
        )
    if request.resize:
        logger.info("Modifier [Resize]: %s", request.resize)
    if request.crop:
        logger.info("Modifier [Crop]: %s", request.crop)
