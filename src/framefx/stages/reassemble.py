"""Reassembly stage: encode processed frames (and audio) into the output video."""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from framefx.config import DEFAULT_VIDEO_ENCODERS
from framefx.utils.ffmpeg import run_tool, stderr_tail

logger = logging.getLogger(__name__)

DEFAULT_VIDEO_ENCODER = "libx264"


class EncodeError(Exception):
    """Error while encoding the output video."""

    pass


@dataclass
class EncodeRequest:
    """Everything the encoder needs to rebuild the video."""

    frame_rate: float
    frames_dir: Path
    video_out: Path
    width: int
    height: int
    bit_rate: int
    audio_path: Path | None = None
    frame_rate_exact: str | None = None


def select_video_encoder(
    video_out: str | Path,
    encoders: Mapping[str, str] = DEFAULT_VIDEO_ENCODERS,
    default: str = DEFAULT_VIDEO_ENCODER,
) -> str:
    """Pick the ffmpeg video encoder for an output path by its extension.

    Unknown extensions get ``default``, so every path maps to an encoder.
    """
    return encoders.get(Path(video_out).suffix.lower(), default)


def build_encode_command(
    request: EncodeRequest,
    video_encoder: str,
    frame_pattern: str = "%06d.jpg",
    audio_codec: str = "aac",
    apply_bit_rate: bool = False,
) -> list[str]:
    """Build the ffmpeg command line for ``request``."""
    cmd = [
        "ffmpeg",
        "-y",
        "-framerate", request.frame_rate_exact or str(request.frame_rate),
        "-i", str(Path(request.frames_dir) / frame_pattern),
    ]

    if request.audio_path is not None:
        cmd.extend(["-i", str(request.audio_path)])

    cmd.extend([
        "-s", f"{request.width}x{request.height}",
        "-c:v", video_encoder,
    ])

    if apply_bit_rate:
        cmd.extend(["-b:v", str(request.bit_rate)])

    if request.audio_path is not None:
        cmd.extend(["-c:a", audio_codec])
    else:
        cmd.append("-an")

    cmd.append(str(request.video_out))
    return cmd


def encode_video(
    request: EncodeRequest,
    encoders: Mapping[str, str] = DEFAULT_VIDEO_ENCODERS,
    default_encoder: str = DEFAULT_VIDEO_ENCODER,
    frame_pattern: str = "%06d.jpg",
    audio_codec: str = "aac",
    apply_bit_rate: bool = False,
    timeout: float = 3600.0,
) -> Path:
    """Encode the processed frame sequence into ``request.video_out``.

    Args:
        request: Frames, timing, geometry and optional audio to encode.
        encoders: Output extension -> video encoder table.
        default_encoder: Encoder for extensions missing from ``encoders``.
        frame_pattern: ffmpeg image-sequence pattern of the frame files.
        audio_codec: Audio encoder used when muxing audio.
        apply_bit_rate: Pass ``request.bit_rate`` to the video encoder.
        timeout: ffmpeg timeout in seconds.

    Returns:
        Path to the encoded video.

    Raises:
        EncodeError: If ffmpeg fails or the output is missing or empty.
    """
    video_out = Path(request.video_out)
    video_out.parent.mkdir(parents=True, exist_ok=True)

    video_encoder = select_video_encoder(video_out, encoders, default_encoder)
    cmd = build_encode_command(
        request,
        video_encoder,
        frame_pattern=frame_pattern,
        audio_codec=audio_codec,
        apply_bit_rate=apply_bit_rate,
    )

    logger.info(
        f"Encoding {video_out.name} ({video_encoder}, {request.width}x{request.height} "
        f"@ {request.frame_rate:.3f} fps, audio={'yes' if request.audio_path else 'no'})"
    )
    start_time = time.perf_counter()

    result = run_tool(cmd, timeout=timeout, error_cls=EncodeError)

    if result.returncode != 0:
        raise EncodeError(f"Video encoding failed: {stderr_tail(result)}")

    if not video_out.exists() or video_out.stat().st_size == 0:
        raise EncodeError(f"Video encoding produced no output: {video_out}")

    elapsed = time.perf_counter() - start_time
    logger.info(f"Video encoded in {elapsed:.2f}s: {video_out}")

    return video_out
