"""Configuration and settings for framefx pipelines."""

from __future__ import annotations

import os

from pydantic import BaseModel, Field, model_validator

CACHE_DIR_ENV = "FRAMEFX_CACHE_DIR"

DEFAULT_VIDEO_ENCODERS: dict[str, str] = {
    ".mp4": "libx264",
    ".mkv": "libvpx",
    ".avi": "mpeg4",
}


class PipelineConfig(BaseModel):
    """Configuration for a framefx render."""

    verbose: bool = Field(default=True, description="Log pipeline steps at INFO level")
    video_out: str = Field(default="./result.mp4", description="Output video path")
    cache_dir: str | None = Field(
        default=None,
        description="Root for per-run cache trees. Falls back to FRAMEFX_CACHE_DIR, then ./cache.",
    )
    show_progress: bool = Field(
        default=True, description="Show a tqdm progress bar when no observer is supplied"
    )

    frame_extension: str = Field(default=".jpg", description="Extension of frame images")
    frame_pattern: str = Field(
        default="%06d.jpg", description="ffmpeg image-sequence pattern for frame files"
    )
    jpeg_quality: int = Field(
        default=85, ge=1, le=100, description="JPEG quality used when committing frames"
    )

    audio_codec: str = Field(default="aac", description="Audio encoder for extraction and muxing")
    video_encoders: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_VIDEO_ENCODERS),
        description="Output extension -> ffmpeg video encoder",
    )
    default_video_encoder: str = Field(
        default="libx264", description="Encoder for extensions missing from video_encoders"
    )

    default_bit_rate: int = Field(
        default=75_000,
        gt=0,
        description=(
            "Bit rate assumed when the source does not report one. This is a "
            "policy value, not a measurement of the source."
        ),
    )
    apply_bit_rate: bool = Field(
        default=False, description="Pass the probed bit rate to the video encoder (-b:v)"
    )

    probe_timeout: float = Field(default=30.0, gt=0, description="ffprobe timeout in seconds")
    ffmpeg_timeout: float = Field(
        default=3600.0, gt=0, description="Timeout in seconds for each ffmpeg invocation"
    )

    @model_validator(mode="after")
    def _check_frame_naming(self) -> PipelineConfig:
        """Extracted and committed frames must carry the sequencer's extension."""
        if not self.frame_pattern.lower().endswith(self.frame_extension.lower()):
            raise ValueError(
                f"frame_pattern {self.frame_pattern!r} does not end with "
                f"frame_extension {self.frame_extension!r}"
            )
        return self

    def get_cache_dir(self) -> str:
        """Get the cache root from config or environment."""
        if self.cache_dir is not None:
            return self.cache_dir
        return os.environ.get(CACHE_DIR_ENV, "./cache")
