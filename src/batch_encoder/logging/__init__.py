"""Logging setup for batch-encoder.

Provides configurable logging with JSON format support, file rotation and
per-file context tags.
"""

from batch_encoder.logging.config import configure_logging
from batch_encoder.logging.context import (
    FileContext,
    FileContextFilter,
    file_context,
    get_file_context,
)
from batch_encoder.logging.handlers import JSONFormatter

__all__ = [
    "FileContext",
    "FileContextFilter",
    "JSONFormatter",
    "configure_logging",
    "file_context",
    "get_file_context",
]
