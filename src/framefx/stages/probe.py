"""Probe stage: read geometry and timing of the source video via ffprobe."""

from __future__ import annotations

import json
import logging
import time
from fractions import Fraction
from pathlib import Path

from framefx.models.schema import MediaDescriptor
from framefx.utils.ffmpeg import run_tool, stderr_tail

logger = logging.getLogger(__name__)

DEFAULT_BIT_RATE = 75_000


class ProbeError(Exception):
    """Error while probing the source video."""

    pass


def _run_ffprobe(source: Path, timeout: float) -> dict:
    """Run ffprobe and return parsed JSON output.

    Raises:
        ProbeError: If ffprobe fails or is not installed.
    """
    cmd = [
        "ffprobe",
        "-v", "quiet",
        "-print_format", "json",
        "-show_format",
        "-show_streams",
        str(source),
    ]

    result = run_tool(cmd, timeout=timeout, error_cls=ProbeError)

    if result.returncode != 0:
        raise ProbeError(f"ffprobe failed: {stderr_tail(result)}")

    try:
        return json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise ProbeError(f"Failed to parse ffprobe output: {e}") from e


def parse_frame_rate(value: str) -> Fraction:
    """Parse an ffprobe rate such as ``"30000/1001"`` or ``"25"`` exactly.

    Raises:
        ProbeError: If the rate is malformed or not positive.
    """
    try:
        rate = Fraction(value.strip())
    except (ValueError, ZeroDivisionError) as e:
        raise ProbeError(f"Invalid frame rate: {value}") from e

    if rate <= 0:
        raise ProbeError(f"Invalid frame rate: {value}")
    return rate


def _parse_bit_rate(value: object, default: int) -> int:
    # Missing, garbage or zero all mean "unreported".
    try:
        bit_rate = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return bit_rate if bit_rate > 0 else default


def _parse_probe_result(data: dict, default_bit_rate: int = DEFAULT_BIT_RATE) -> MediaDescriptor:
    """Build a MediaDescriptor from ffprobe JSON.

    The first stream whose ``codec_type`` is ``video`` is used.

    Raises:
        ProbeError: If there is no video stream or its geometry is unusable.
    """
    streams = data.get("streams", [])
    video_stream = next((s for s in streams if s.get("codec_type") == "video"), None)

    if video_stream is None:
        raise ProbeError("No video stream found")

    width = video_stream.get("width") or 0
    height = video_stream.get("height") or 0
    if width <= 0 or height <= 0:
        raise ProbeError(f"Video stream has invalid dimensions: {width}x{height}")

    frame_rate = parse_frame_rate(str(video_stream.get("r_frame_rate", "0/1")))
    bit_rate = _parse_bit_rate(video_stream.get("bit_rate"), default_bit_rate)

    return MediaDescriptor(
        width=width,
        height=height,
        frame_rate=float(frame_rate),
        frame_rate_exact=f"{frame_rate.numerator}/{frame_rate.denominator}",
        bit_rate=bit_rate,
    )


def probe_media(
    source: str | Path,
    default_bit_rate: int = DEFAULT_BIT_RATE,
    timeout: float = 30.0,
) -> MediaDescriptor:
    """Probe a video file and describe its first video stream.

    Args:
        source: Path to the video file.
        default_bit_rate: Substituted when the stream reports no bit rate.
        timeout: ffprobe timeout in seconds.

    Returns:
        MediaDescriptor with width, height, frame rate and bit rate.

    Raises:
        ProbeError: If the file is missing, probing fails or no video
            stream exists.
    """
    source = Path(source)
    if not source.exists():
        raise ProbeError(f"Source video not found: {source}")

    start_time = time.perf_counter()

    data = _run_ffprobe(source, timeout)
    descriptor = _parse_probe_result(data, default_bit_rate)

    elapsed = time.perf_counter() - start_time
    logger.debug(f"Probed {source.name} in {elapsed:.2f}s")

    return descriptor
