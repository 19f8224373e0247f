"""Source file discovery.

Resolves the user's --path into an ordered list of source files. Paths are
returned in canonical forward-slash form.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from batch_encoder.exceptions import NoFilesFoundError, TargetError

logger = logging.getLogger(__name__)

SOURCE_EXTENSIONS = frozenset({"mkv", "mp4"})

# /c/Users/... as typed in MSYS or Git Bash
_MSYS_DRIVE_PATTERN = re.compile(r"^/([a-zA-Z])/(.*)$")


def from_msys_path(path: str) -> str:
    """Convert an MSYS-style drive path (/c/dir) to C:/dir.

    Other paths are returned with backslashes replaced by forward slashes.
    """
    match = _MSYS_DRIVE_PATTERN.match(path)
    if match:
        path = f"{match.group(1).upper()}:/{match.group(2)}"
    return path.replace("\\", "/")


def is_source_file(path: Path) -> bool:
    """Return True for files with a supported source extension."""
    return path.is_file() and path.suffix.lstrip(".").lower() in SOURCE_EXTENSIONS


def is_hidden(relative: Path) -> bool:
    """Return True if any component of a relative path is a dot-file."""
    return any(part.startswith(".") for part in relative.parts)


def resolve_targets(target: str, recursive: bool = False) -> list[str]:
    """Resolve a file or directory target to source files.

    Args:
        target: File or directory path, possibly in MSYS syntax.
        recursive: Descend into subdirectories when target is a directory.

    Returns:
        [target] for a file; sorted source files for a directory, skipping
        hidden files and directories.

    Raises:
        TargetError: If the target does not exist.
        NoFilesFoundError: If a directory holds no source files.
    """
    canonical = from_msys_path(target)
    path = Path(canonical)

    if path.is_file():
        logger.info("Target identified as single file: %s", canonical)
        return [canonical]

    if not path.is_dir():
        raise TargetError(f"Target path does not exist: {canonical}", path=canonical)

    logger.info(
        "Scanning: %s (Recursive: %s)", canonical, "ON" if recursive else "OFF"
    )
    candidates = path.rglob("*") if recursive else path.iterdir()
    files = sorted(
        p.as_posix()
        for p in candidates
        if is_source_file(p) and not is_hidden(p.relative_to(path))
    )

    if not files:
        raise NoFilesFoundError(
            f"No valid files found in directory: {canonical}", path=canonical
        )
    logger.debug("Discovered %d source files", len(files))
    return files
