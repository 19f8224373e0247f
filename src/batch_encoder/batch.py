"""Batch planning.

BatchPlanner validates a job request once, then probes and compiles each
source file in order. Probe failures degrade to a default descriptor; every
other error aborts the batch before any plan is returned.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Sequence
from pathlib import Path

from batch_encoder.exceptions import ProbeFailure
from batch_encoder.introspector import MediaIntrospector, load_descriptor
from batch_encoder.logging import file_context
from batch_encoder.models import JobRequest, MediaDescriptor, Plan
from batch_encoder.planner import compile_plan, split_options
from batch_encoder.policy import validate_request
from batch_encoder.profiles import ProfileResolver, ProfileTable

logger = logging.getLogger(__name__)


class BatchPlanner:
    """Plans every file of a batch against one profile table."""

    def __init__(self, table: ProfileTable, introspector: MediaIntrospector) -> None:
        """Initialize the planner.

        Args:
            table: Profile table used for every file.
            introspector: Source of raw probe output.
        """
        self._table = table
        self._introspector = introspector

    @property
    def table(self) -> ProfileTable:
        return self._table

    def validate(self, request: JobRequest) -> None:
        """Fail fast on anything that would break every file.

        Raises:
            ValidationError: If a modifier or template argument is malformed.
            ConfigError: If a profile is unknown or its options cannot be split.
        """
        resolver = ProfileResolver(self._table)
        validate_request(request, resolver)
        split_options(
            resolver.resolve_video(request.video_profile, request.extra_args),
            request.video_profile,
        )
        split_options(
            resolver.resolve_audio(request.audio_profile, request.extra_args),
            request.audio_profile,
        )

    def describe(self, path: str) -> tuple[MediaDescriptor, list[str]]:
        """Probe a file and normalize the result.

        Returns:
            Tuple of (descriptor, warnings); the fallback descriptor and one
            warning when the file cannot be probed.
        """
        try:
            raw = self._introspector.probe(Path(path))
        except ProbeFailure as e:
            warning = f"Could not analyze {path}: {e.message}. Using defaults."
            logger.warning("%s", warning)
            return MediaDescriptor.fallback(), [warning]
        return load_descriptor(raw, path)

    def plan_file(self, request: JobRequest, path: str) -> Plan:
        """Probe and compile a single file.

        The request is not re-validated; call validate() first.
        """
        descriptor, warnings = self.describe(path)
        file_request = dataclasses.replace(request, target=path)
        return compile_plan(descriptor, file_request, self._table, warnings)

    def plan(self, request: JobRequest, files: Sequence[str]) -> list[Plan]:
        """Validate the request and compile a plan per file.

        Args:
            request: Batch-wide job request; its target is replaced by each
                file in turn.
            files: Source files in processing order.

        Returns:
            One Plan per file, in input order.
        """
        self.validate(request)
        return self.plan_files(request, files)

    def plan_files(self, request: JobRequest, files: Sequence[str]) -> list[Plan]:
        """Compile a plan per file for an already validated request."""
        plans: list[Plan] = []
        for number, path in enumerate(files, start=1):
            with file_context(number, path):
                plans.append(self.plan_file(request, path))

        logger.info("Planned %d file(s)", len(plans))
        return plans
