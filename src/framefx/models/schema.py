"""Pydantic models describing probed media and render results."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class MediaDescriptor(BaseModel):
    """Geometry and timing of the source video stream.

    Derived once per run and never modified afterwards.
    """

    model_config = ConfigDict(frozen=True)

    width: int = Field(..., gt=0, description="Frame width in pixels")
    height: int = Field(..., gt=0, description="Frame height in pixels")
    frame_rate: float = Field(..., gt=0, description="Frames per second (num/den of r_frame_rate)")
    frame_rate_exact: str = Field(
        ..., description="Exact rate as a reduced fraction, e.g. '30000/1001'"
    )
    bit_rate: int = Field(
        ...,
        gt=0,
        description="Stream bit rate, or the configured default when the source reports none",
    )

    @property
    def resolution(self) -> str:
        """Resolution as 'WIDTHxHEIGHT'."""
        return f"{self.width}x{self.height}"


class RenderResult(BaseModel):
    """Summary of a completed render."""

    session_id: str = Field(..., description="Identifier of the run's cache session")
    output_path: Path = Field(..., description="Path of the encoded video")
    descriptor: MediaDescriptor = Field(..., description="Probed source metadata")
    frame_count: int = Field(..., ge=1, description="Number of frames processed")
    audio_path: Path | None = Field(
        default=None, description="Extracted audio that was muxed, if any"
    )
    elapsed: float = Field(default=0.0, ge=0, description="Wall time of the render in seconds")

    @property
    def has_audio(self) -> bool:
        return self.audio_path is not None
