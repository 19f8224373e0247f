"""Tests for FFprobeIntrospector."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from batch_encoder.exceptions import ProbeFailure
from batch_encoder.introspector import FFprobeIntrospector, MediaIntrospector


class TestBuildCommand:
    """Tests for FFprobeIntrospector.build_command."""

    def test_requests_streams_chapters_and_first_frame(self):
        """Command asks for JSON streams, chapters and one frame."""
        introspector = FFprobeIntrospector("/opt/ffprobe")
        cmd = introspector.build_command(Path("/media/movie.mkv"))

        assert cmd[0] == "/opt/ffprobe"
        assert cmd[-2:] == ["-i", "/media/movie.mkv"]
        for flag in ("-show_streams", "-show_chapters", "-show_frames"):
            assert flag in cmd
        assert cmd[cmd.index("-print_format") + 1] == "json"
        assert cmd[cmd.index("-read_intervals") + 1] == "%+#1"


class TestProbe:
    """Tests for FFprobeIntrospector.probe."""

    def test_satisfies_protocol(self):
        """FFprobeIntrospector structurally implements MediaIntrospector."""
        introspector: MediaIntrospector = FFprobeIntrospector()
        assert callable(introspector.probe)

    def test_returns_stdout(self):
        """Successful runs return ffprobe's stdout."""
        result = MagicMock(stdout='{"streams": []}')
        with patch("subprocess.run", return_value=result) as run:
            output = FFprobeIntrospector(timeout=5).probe(Path("a.mkv"))

        assert output == '{"streams": []}'
        kwargs = run.call_args.kwargs
        assert kwargs["timeout"] == 5
        assert kwargs["check"] is True

    def test_non_zero_exit_raises(self):
        """A failing ffprobe becomes ProbeFailure with stderr in the message."""
        error = subprocess.CalledProcessError(1, ["ffprobe"], stderr="Invalid data")
        with patch("subprocess.run", side_effect=error):
            with pytest.raises(ProbeFailure, match="Invalid data") as exc_info:
                FFprobeIntrospector().probe(Path("bad.mkv"))
        assert exc_info.value.path == "bad.mkv"

    def test_timeout_raises(self):
        """A timeout becomes ProbeFailure."""
        error = subprocess.TimeoutExpired(["ffprobe"], 3)
        with patch("subprocess.run", side_effect=error):
            with pytest.raises(ProbeFailure, match="timed out"):
                FFprobeIntrospector(timeout=3).probe(Path("slow.mkv"))

    def test_missing_binary_raises(self):
        """A missing executable becomes ProbeFailure."""
        with patch("subprocess.run", side_effect=FileNotFoundError("ffprobe")):
            with pytest.raises(ProbeFailure, match="Could not run ffprobe"):
                FFprobeIntrospector().probe(Path("a.mkv"))
