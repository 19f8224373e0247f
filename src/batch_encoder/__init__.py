"""batch-encoder - plan NVEncC/ffmpeg batch encodes as PowerShell job scripts."""

from batch_encoder.introspector import normalize
from batch_encoder.planner import compile_plan

__version__ = "0.1.0"

__all__ = ["__version__", "compile_plan", "normalize"]
