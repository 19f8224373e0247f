"""MediaIntrospector interface for probing media files."""

from pathlib import Path
from typing import Any, Protocol


class MediaIntrospector(Protocol):
    """Protocol for probing implementations.

    An introspector returns raw probe output for a file. Normalizing that
    output into a MediaDescriptor is the job of introspector.parsers, so
    implementations stay free of parsing logic.
    """

    def probe(self, path: Path) -> Any:
        """Probe a media file.

        Args:
            path: Path to the media file.

        Returns:
            Raw probe output (text or decoded JSON mapping).

        Raises:
            ProbeFailure: If the file cannot be probed.
        """
        ...
