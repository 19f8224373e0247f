"""Profile key resolution.

Resolution is deterministic: the same key and extra arguments always
produce the same option string.
"""

import logging

from batch_encoder.exceptions import UnknownProfileError
from batch_encoder.profiles.models import (
    COPY_MARKER,
    ExtraArgs,
    ProfileTable,
    ProfileTemplate,
)

logger = logging.getLogger(__name__)


class ProfileResolver:
    """Resolves profile keys against a ProfileTable."""

    def __init__(self, table: ProfileTable) -> None:
        self._table = table

    @property
    def table(self) -> ProfileTable:
        return self._table

    def video_template(self, key: str) -> ProfileTemplate:
        """Look up a video profile template.

        Raises:
            UnknownProfileError: If the key is not defined.
        """
        try:
            return self._table.video[key]
        except KeyError:
            raise UnknownProfileError("video", key) from None

    def audio_template(self, key: str) -> ProfileTemplate:
        """Look up an audio profile template.

        Raises:
            UnknownProfileError: If the key is not defined.
        """
        try:
            return self._table.audio[key]
        except KeyError:
            raise UnknownProfileError("audio", key) from None

    def resolve_video(self, key: str, extra_args: ExtraArgs) -> str:
        """Resolve a video profile key to its option string.

        The reserved "copy" key always yields COPY_MARKER without
        consulting the table.

        Args:
            key: Video profile key.
            extra_args: User-supplied template arguments.

        Returns:
            Encoder option string, or COPY_MARKER.
        """
        if key == COPY_MARKER:
            return COPY_MARKER
        options = self.video_template(key).render(extra_args)
        logger.debug("Resolved video profile '%s': %s", key, options)
        return options

    def resolve_audio(self, key: str, extra_args: ExtraArgs) -> str:
        """Resolve an audio profile key to its option string.

        Args:
            key: Audio profile key.
            extra_args: User-supplied template arguments.

        Returns:
            ffmpeg audio option string.
        """
        options = self.audio_template(key).render(extra_args)
        logger.debug("Resolved audio profile '%s': %s", key, options)
        return options

    def video_extension(self, key: str) -> str:
        return self.video_template(key).extension

    def audio_extension(self, key: str) -> str:
        return self.audio_template(key).extension
