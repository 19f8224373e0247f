"""FFprobe-based implementation of the MediaIntrospector protocol."""

import logging
import subprocess  # nosec B404 - subprocess is required for ffprobe invocation
from pathlib import Path

from batch_encoder.exceptions import ProbeFailure

logger = logging.getLogger(__name__)

# Seconds to wait for ffprobe before giving up on a file
DEFAULT_PROBE_TIMEOUT = 120


class FFprobeIntrospector:
    """ffprobe-based implementation of MediaIntrospector protocol.

    Collects stream, chapter and first-frame side data in one invocation.
    The executable is not checked up front; a missing binary surfaces as
    a ProbeFailure for each file, which the batch degrades to defaults.
    """

    def __init__(
        self, ffprobe_path: str = "ffprobe", timeout: int = DEFAULT_PROBE_TIMEOUT
    ) -> None:
        """Initialize the introspector.

        Args:
            ffprobe_path: Path to (or name of) the ffprobe executable.
            timeout: Seconds before a probe is abandoned.
        """
        self._ffprobe_path = ffprobe_path
        self._timeout = timeout

    def build_command(self, path: Path) -> list[str]:
        """Build the ffprobe command line for a file.

        Args:
            path: Path to the media file.

        Returns:
            Command list.
        """
        return [
            str(self._ffprobe_path),
            "-hide_banner",
            "-loglevel",
            "warning",
            "-print_format",
            "json",
            "-show_streams",
            "-show_chapters",
            "-show_frames",
            "-read_intervals",
            "%+#1",
            "-i",
            str(path),
        ]

    def probe(self, path: Path) -> str:
        """Run ffprobe and return its raw JSON output.

        Args:
            path: Path to the media file.

        Returns:
            Raw stdout text from ffprobe.

        Raises:
            ProbeFailure: If ffprobe cannot be run or returns non-zero.
        """
        cmd = self.build_command(path)
        logger.debug("Probing %s", path)
        try:
            result = subprocess.run(  # nosec B603 - arguments are not shell-parsed
                cmd,
                capture_output=True,
                text=True,
                errors="replace",  # Handle non-UTF8 characters by replacing them
                timeout=self._timeout,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            raise ProbeFailure(
                f"ffprobe failed for {path}: {(e.stderr or '').strip() or e}",
                path=str(path),
            ) from e
        except subprocess.TimeoutExpired as e:
            raise ProbeFailure(
                f"ffprobe timed out after {self._timeout}s for {path}",
                path=str(path),
            ) from e
        except OSError as e:
            raise ProbeFailure(
                f"Could not run ffprobe for {path}: {e}", path=str(path)
            ) from e
        return result.stdout
