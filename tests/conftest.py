"""Shared test fixtures for batch-encoder."""

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Any

import pytest
from probe_builders import (
    audio_stream,
    mastering_frame,
    probe_output,
    subtitle_stream,
    video_stream,
)

from batch_encoder.profiles import ProfileTable, builtin_profile_table


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture
def profile_table() -> ProfileTable:
    """Bundled profile table."""
    return builtin_profile_table()


@pytest.fixture
def scenario_probe() -> dict[str, Any]:
    """1080p h264 bt709 source: one English AAC stereo track, an English
    subtitle and an English SDH subtitle, no chapters."""
    return probe_output(
        [
            video_stream(0),
            audio_stream(1, codec="aac", channels=2, lang="eng", default=True),
            subtitle_stream(2, lang="eng"),
            subtitle_stream(3, lang="eng", title="SDH"),
        ]
    )


@pytest.fixture
def hdr_probe() -> dict[str, Any]:
    """2160p HEVC HDR10 source with 7.1 TrueHD, 5.1 AC3 and chapters."""
    return probe_output(
        [
            video_stream(0, 3840, 2160, "hevc", "bt2020"),
            audio_stream(1, codec="truehd", channels=8, lang="eng", default=True),
            audio_stream(2, codec="ac3", channels=6, lang="fre"),
            subtitle_stream(3, codec="hdmv_pgs_subtitle", lang="eng", forced=True),
            subtitle_stream(4, codec="hdmv_pgs_subtitle", lang="fre"),
        ],
        chapters=12,
        frames=[mastering_frame()],
    )


@pytest.fixture
def temp_video_dir(temp_dir: Path) -> Path:
    """Create a temporary directory with placeholder source files."""
    video_dir = temp_dir / "videos"
    video_dir.mkdir()

    (video_dir / "movie.mkv").touch()
    (video_dir / "show.mp4").touch()
    (video_dir / "notes.txt").touch()

    nested = video_dir / "nested"
    nested.mkdir()
    (nested / "episode.MKV").touch()

    # Hidden directories are skipped
    hidden = video_dir / ".hidden"
    hidden.mkdir()
    (hidden / "secret.mkv").touch()

    return video_dir


@pytest.fixture(autouse=True)
def reset_root_logger():
    """Save and restore root logger state between tests."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers[:] = original_handlers
    root.setLevel(original_level)
