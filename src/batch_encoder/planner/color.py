"""Encoder color, HDR and level arguments."""

import logging

from batch_encoder.models import MediaDescriptor

logger = logging.getLogger(__name__)

HDR_COLOR_ARGS: tuple[str, ...] = (
    "--transfer",
    "smpte2084",
    "--colorprim",
    "bt2020",
    "--colormatrix",
    "bt2020nc",
)

BT709_COLOR_ARGS: tuple[str, ...] = (
    "--transfer",
    "bt709",
    "--colorprim",
    "bt709",
    "--colormatrix",
    "bt709",
)

# Frames larger than 1080p need a higher HEVC level
LEVEL_1080P = "4.1"
LEVEL_UHD = "5.0"


def encoder_level(width: int, height: int) -> str:
    """Pick the encoder level for the output frame size."""
    if width > 1920 or height > 1080:
        return LEVEL_UHD
    return LEVEL_1080P


def build_color_args(descriptor: MediaDescriptor) -> list[str]:
    """Build color signalling arguments for the video encoder.

    HDR sources get BT.2020/PQ flags plus mastering-display data when
    known. BT.709 sources get explicit BT.709 flags. Anything else passes
    through untouched.

    Args:
        descriptor: Media descriptor of the source.

    Returns:
        Argument list (possibly empty).
    """
    if descriptor.is_hdr:
        args = list(HDR_COLOR_ARGS)
        if descriptor.hdr_mastering:
            args.extend(["--master-display", descriptor.hdr_mastering])
        logger.info("[Auto-Spec]: Detected HDR. Using BT.2020.")
        return args

    if descriptor.color_primaries == "bt709":
        logger.info("[Auto-Spec]: SDR (bt709) Detected.")
        return list(BT709_COLOR_ARGS)

    logger.info("[Auto-Spec]: SDR (Unknown/Other).")
    return []
