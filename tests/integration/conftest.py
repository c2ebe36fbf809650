"""Pytest configuration and fixtures for integration tests."""

from __future__ import annotations

import shutil
import subprocess
import tempfile
from pathlib import Path

import pytest


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(scope="session")
def ffmpeg_available() -> None:
    if shutil.which("ffmpeg") is None or shutil.which("ffprobe") is None:
        pytest.skip("ffmpeg/ffprobe not installed")


def _generate(path: Path, with_audio: bool) -> Path:
    cmd = [
        "ffmpeg", "-y",
        "-f", "lavfi", "-i", "testsrc=duration=1:size=64x48:rate=10",
    ]
    if with_audio:
        cmd += ["-f", "lavfi", "-i", "sine=frequency=440:duration=1", "-c:a", "aac", "-shortest"]
    cmd += ["-c:v", "mpeg4", str(path)]

    result = subprocess.run(cmd, capture_output=True, text=True, timeout=60)
    if result.returncode != 0:
        pytest.skip(f"Could not generate test video: {result.stderr[-200:]}")
    return path


@pytest.fixture
def tiny_video(ffmpeg_available, temp_dir: Path) -> Path:
    """One second 64x48 test pattern at 10 fps with a sine tone."""
    return _generate(temp_dir / "tiny.avi", with_audio=True)


@pytest.fixture
def silent_video(ffmpeg_available, temp_dir: Path) -> Path:
    """Same test pattern without an audio track."""
    return _generate(temp_dir / "silent.avi", with_audio=False)
