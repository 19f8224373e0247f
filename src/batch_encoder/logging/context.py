"""Per-file logging context.

While a batch plans a file, every log record carries a file tag such as
"[F003] " and the file path, so interleaved decision messages can be traced
back to their source.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass


@dataclass(frozen=True)
class FileContext:
    """Identity of the file currently being planned."""

    file_number: int
    file_path: str

    @property
    def tag(self) -> str:
        return f"[F{self.file_number:03d}] "


_current: ContextVar[FileContext | None] = ContextVar("file_context", default=None)


def get_file_context() -> FileContext | None:
    """Return the active file context, if any."""
    return _current.get()


@contextmanager
def file_context(file_number: int, file_path: str) -> Iterator[FileContext]:
    """Tag log records emitted inside the block with a file identity.

    Args:
        file_number: 1-based position of the file within the batch.
        file_path: Source path being planned.
    """
    ctx = FileContext(file_number=file_number, file_path=file_path)
    token = _current.set(ctx)
    try:
        yield ctx
    finally:
        _current.reset(token)


class FileContextFilter(logging.Filter):
    """Inject file_tag, file_number and file_path into every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = _current.get()
        record.file_tag = ctx.tag if ctx else ""
        record.file_number = ctx.file_number if ctx else None
        record.file_path = ctx.file_path if ctx else None
        return True
