"""Introspector module for batch-encoder.

This module turns probe output into MediaDescriptor values:

- MediaIntrospector: Protocol defining the probing interface
- FFprobeIntrospector: Production implementation using ffprobe
- normalize: Parse raw probe output (raises ProbeFailure)
- load_descriptor: normalize, degrading to a default descriptor on failure
"""

from batch_encoder.introspector.ffprobe import FFprobeIntrospector
from batch_encoder.introspector.interface import MediaIntrospector
from batch_encoder.introspector.parsers import load_descriptor, normalize

__all__ = [
    "MediaIntrospector",
    "FFprobeIntrospector",
    "normalize",
    "load_descriptor",
]
