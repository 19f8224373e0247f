"""Output file naming.

Every path in a plan uses forward slashes. Intermediates get a suffix that
keeps them unique within one run, even when several subtitle tracks share
a language.
"""

import re
from dataclasses import dataclass
from pathlib import PurePosixPath

from batch_encoder.models import SubtitleTrack

PREMUX_SUFFIX = "__"
FINAL_EXTENSION = "mkv"

_UNSAFE_LANG_CHARS = re.compile(r"[^a-z0-9-]")


def to_canonical(path: str) -> str:
    """Convert a path to the canonical forward-slash form."""
    return path.replace("\\", "/")


def swap_ext(filename: str, new_ext: str, suffix: str = "") -> str:
    """Replace a file's extension, optionally injecting a suffix before it.

    Args:
        filename: File name or path; only the base name is used.
        new_ext: New extension without the dot.
        suffix: Text inserted between the stem and the extension.

    Returns:
        New base name.
    """
    stem = PurePosixPath(to_canonical(filename)).stem
    return f"{stem}{suffix}.{new_ext}"


def join_work_path(work_dir: str, name: str) -> str:
    """Join a base name onto the work directory."""
    if not work_dir:
        return name
    return f"{to_canonical(work_dir).rstrip('/')}/{name}"


def subtitle_suffix(track: SubtitleTrack) -> str:
    """Build the _<lang>[_forced]_<streamIndex> suffix of a subtitle extract."""
    lang = _UNSAFE_LANG_CHARS.sub("", track.lang.casefold()) or "und"
    forced = "_forced" if track.forced else ""
    return f"_{lang}{forced}_{track.stream_index}"


@dataclass(frozen=True)
class OutputNames:
    """Output paths for one source file."""

    source: str
    work_dir: str
    video: str
    audio: str
    premux: str
    final: str

    @classmethod
    def for_source(
        cls, source: str, work_dir: str, video_ext: str, audio_ext: str
    ) -> "OutputNames":
        """Compute every fixed output path for a source file.

        Args:
            source: Source file path.
            work_dir: Directory receiving intermediates and the final output.
            video_ext: Extension of the encoded video stream.
            audio_ext: Extension of the audio stage output.
        """
        source = to_canonical(source)
        return cls(
            source=source,
            work_dir=work_dir,
            video=join_work_path(work_dir, swap_ext(source, video_ext)),
            audio=join_work_path(work_dir, swap_ext(source, audio_ext)),
            premux=join_work_path(
                work_dir, swap_ext(source, FINAL_EXTENSION, PREMUX_SUFFIX)
            ),
            final=join_work_path(work_dir, swap_ext(source, FINAL_EXTENSION)),
        )

    def subtitle(self, track: SubtitleTrack, extension: str) -> str:
        """Path of the extract for one subtitle track."""
        name = swap_ext(self.source, extension, subtitle_suffix(track))
        return join_work_path(self.work_dir, name)
