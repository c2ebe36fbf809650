"""Tests for the reassembly stage."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from fakes import completed
from framefx.config import PipelineConfig
from framefx.stages.reassemble import (
    EncodeError,
    EncodeRequest,
    build_encode_command,
    encode_video,
    select_video_encoder,
)


@pytest.fixture
def request_for(temp_dir: Path):
    def _make(video_out: str = "out.mp4", audio: Path | None = None) -> EncodeRequest:
        return EncodeRequest(
            frame_rate=30.0,
            frames_dir=temp_dir / "processed",
            video_out=temp_dir / video_out,
            width=640,
            height=360,
            bit_rate=75_000,
            audio_path=audio,
        )

    return _make


def _writes_output(cmd, **kwargs):
    Path(cmd[-1]).write_bytes(b"video")
    return completed(cmd)


class TestSelectVideoEncoder:
    """Tests for select_video_encoder."""

    @pytest.mark.parametrize(
        ("path", "encoder"),
        [
            ("out.mp4", "libx264"),
            ("out.mkv", "libvpx"),
            ("out.avi", "mpeg4"),
            ("out.unknown", "libx264"),
            ("OUT.MKV", "libvpx"),
            ("no_extension", "libx264"),
        ],
    )
    def test_default_table(self, path: str, encoder: str) -> None:
        assert select_video_encoder(path) == encoder

    def test_unknown_matches_mp4(self) -> None:
        """The fallback is the same encoder as the most common container."""
        assert select_video_encoder("out.unknown") == select_video_encoder("out.mp4")

    def test_custom_table(self) -> None:
        config = PipelineConfig(
            video_encoders={".webm": "libvpx-vp9"},
            default_video_encoder="libx265",
        )

        assert select_video_encoder("a.webm", config.video_encoders, config.default_video_encoder) == "libvpx-vp9"
        assert select_video_encoder("a.mp4", config.video_encoders, config.default_video_encoder) == "libx265"


class TestBuildEncodeCommand:
    """Tests for build_encode_command."""

    def test_without_audio(self, request_for) -> None:
        """No audio input and an explicit -an, not a silent track."""
        request = request_for()

        cmd = build_encode_command(request, "libx264")

        assert cmd[cmd.index("-framerate") + 1] == "30.0"
        assert cmd[cmd.index("-i") + 1] == str(request.frames_dir / "%06d.jpg")
        assert cmd.count("-i") == 1
        assert cmd[cmd.index("-s") + 1] == "640x360"
        assert cmd[cmd.index("-c:v") + 1] == "libx264"
        assert "-an" in cmd
        assert "-c:a" not in cmd
        assert "-b:v" not in cmd
        assert cmd[-1] == str(request.video_out)

    def test_with_audio(self, request_for, temp_dir: Path) -> None:
        audio = temp_dir / "audio.aac"
        cmd = build_encode_command(request_for(audio=audio), "libx264")

        inputs = [cmd[i + 1] for i, arg in enumerate(cmd) if arg == "-i"]
        assert inputs[1] == str(audio)
        assert cmd[cmd.index("-c:a") + 1] == "aac"
        assert "-an" not in cmd

    def test_exact_frame_rate_preferred(self, request_for) -> None:
        request = request_for()
        request.frame_rate = 30000 / 1001
        request.frame_rate_exact = "30000/1001"

        cmd = build_encode_command(request, "libx264")

        assert cmd[cmd.index("-framerate") + 1] == "30000/1001"

    def test_framerate_precedes_frame_input(self, request_for) -> None:
        cmd = build_encode_command(request_for(), "libx264")

        assert cmd.index("-framerate") < cmd.index("-i")

    def test_apply_bit_rate(self, request_for) -> None:
        cmd = build_encode_command(request_for(), "libx264", apply_bit_rate=True)

        assert cmd[cmd.index("-b:v") + 1] == "75000"


class TestEncodeVideo:
    """Tests for encode_video."""

    @pytest.mark.parametrize(
        ("video_out", "encoder"),
        [("out.mp4", "libx264"), ("out.mkv", "libvpx"), ("out.avi", "mpeg4"), ("out.unknown", "libx264")],
    )
    def test_encoder_per_extension(self, request_for, video_out: str, encoder: str) -> None:
        with patch("subprocess.run", side_effect=_writes_output) as run:
            result = encode_video(request_for(video_out))

        cmd = run.call_args[0][0]
        assert cmd[cmd.index("-c:v") + 1] == encoder
        assert result.name == video_out

    def test_creates_output_directory(self, request_for, temp_dir: Path) -> None:
        request = request_for()
        request.video_out = temp_dir / "nested" / "dir" / "out.mp4"

        with patch("subprocess.run", side_effect=_writes_output):
            assert encode_video(request).exists()

    def test_ffmpeg_failure(self, request_for) -> None:
        with patch("subprocess.run", return_value=completed(["ffmpeg"], returncode=1, stderr="Unknown encoder")):
            with pytest.raises(EncodeError, match="Unknown encoder"):
                encode_video(request_for())

    def test_ffmpeg_not_found(self, request_for) -> None:
        with patch("subprocess.run", side_effect=FileNotFoundError()):
            with pytest.raises(EncodeError, match="ffmpeg not found"):
                encode_video(request_for())

    def test_timeout(self, request_for) -> None:
        with patch("subprocess.run", side_effect=subprocess.TimeoutExpired("ffmpeg", 1)):
            with pytest.raises(EncodeError, match="timed out"):
                encode_video(request_for(), timeout=1)

    def test_missing_output(self, request_for) -> None:
        with patch("subprocess.run", return_value=completed(["ffmpeg"])):
            with pytest.raises(EncodeError, match="no output"):
                encode_video(request_for())

    def test_zero_length_output(self, request_for) -> None:
        def empty(cmd, **kwargs):
            Path(cmd[-1]).write_bytes(b"")
            return completed(cmd)

        with patch("subprocess.run", side_effect=empty):
            with pytest.raises(EncodeError, match="no output"):
                encode_video(request_for())
