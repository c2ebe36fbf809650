"""Extraction stage: split the source into frame images and an audio track.

Frames are mandatory; any failure aborts the run. Audio is best effort:
a source without a usable audio track simply yields ``None``.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from framefx.session import Session
from framefx.utils.ffmpeg import run_tool, stderr_tail

logger = logging.getLogger(__name__)

AUDIO_FILE_NAME = "audio.aac"


class ExtractionError(Exception):
    """Error while extracting frames from the source video."""

    pass


@dataclass(frozen=True)
class AudioAsset:
    """An audio track extracted from the source."""

    path: Path


def extract_frames(
    source: str | Path,
    session: Session,
    frame_pattern: str = "%06d.jpg",
    timeout: float = 3600.0,
) -> Path:
    """Decode every frame of ``source`` into the session's frames directory.

    Args:
        source: Path to the video file.
        session: Session owning the cache tree.
        frame_pattern: ffmpeg image-sequence pattern for the frame files.
        timeout: ffmpeg timeout in seconds.

    Returns:
        The directory holding the extracted frames.

    Raises:
        ExtractionError: If ffmpeg fails or writes no frames.
    """
    frames_dir = session.frames_dir
    frames_dir.mkdir(parents=True, exist_ok=True)

    cmd = [
        "ffmpeg",
        "-i", str(source),
        "-y",
        str(frames_dir / frame_pattern),
    ]

    logger.info(f"Extracting frames from {Path(source).name} -> {frames_dir}")
    start_time = time.perf_counter()

    result = run_tool(cmd, timeout=timeout, error_cls=ExtractionError)

    if result.returncode != 0:
        raise ExtractionError(f"Frame extraction failed: {stderr_tail(result)}")

    if not any(frames_dir.iterdir()):
        raise ExtractionError(f"Frame extraction produced no frames in: {frames_dir}")

    elapsed = time.perf_counter() - start_time
    logger.info(f"Frames extracted in {elapsed:.2f}s")

    return frames_dir


def extract_audio(
    source: str | Path,
    session: Session,
    codec: str = "aac",
    timeout: float = 3600.0,
) -> AudioAsset | None:
    """Extract the audio track of ``source`` into the session's audio directory.

    Never raises for codec reasons: every ffmpeg failure is logged and
    reported as ``None`` so the render continues without audio.

    Args:
        source: Path to the video file.
        session: Session owning the cache tree.
        codec: Audio encoder passed to ffmpeg.
        timeout: ffmpeg timeout in seconds.

    Returns:
        The extracted AudioAsset, or None when the source has no usable audio.
    """
    output_path = session.ensure_audio_dir() / AUDIO_FILE_NAME

    cmd = [
        "ffmpeg",
        "-i", str(source),
        "-vn",
        "-acodec", codec,
        "-y",
        str(output_path),
    ]

    try:
        result = run_tool(cmd, timeout=timeout, error_cls=ExtractionError)
    except ExtractionError as e:
        logger.info(f"Failed to extract audio stream: {e}")
        return None

    if result.returncode != 0:
        logger.info(f"Failed to extract audio stream: {stderr_tail(result, lines=1)}")
        return None

    if not output_path.exists() or output_path.stat().st_size == 0:
        logger.info("Audio extraction produced no output, continuing without audio")
        return None

    logger.info(f"Audio extracted: {output_path}")
    return AudioAsset(path=output_path)
