"""Pytest configuration and fixtures for framefx tests."""

from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from fakes import RecordingProgress
from framefx.session import Session, create_session


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_video_path(temp_dir: Path) -> Path:
    """Create a mock video file path for testing.

    The content is not a real video; ffmpeg calls are mocked.
    """
    video_path = temp_dir / "input.mp4"
    video_path.write_bytes(b"mock video content for testing")
    return video_path


@pytest.fixture
def session(temp_dir: Path) -> Session:
    """A fresh session under the temp directory."""
    return create_session(temp_dir / "cache")


@pytest.fixture
def progress() -> RecordingProgress:
    return RecordingProgress()
