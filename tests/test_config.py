"""Tests for PipelineConfig."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from framefx.config import PipelineConfig


class TestFrameNaming:
    """frame_pattern and frame_extension must describe the same files."""

    def test_defaults_agree(self) -> None:
        config = PipelineConfig()

        assert config.frame_pattern.endswith(config.frame_extension)

    def test_matching_png_naming(self) -> None:
        config = PipelineConfig(frame_extension=".png", frame_pattern="%08d.png")

        assert config.frame_extension == ".png"

    def test_case_insensitive_match(self) -> None:
        PipelineConfig(frame_extension=".JPG", frame_pattern="%06d.jpg")

    def test_extension_without_pattern(self) -> None:
        """Changing only the extension would leave the sequencer with no frames."""
        with pytest.raises(ValidationError, match="does not end with"):
            PipelineConfig(frame_extension=".png")

    def test_pattern_without_extension(self) -> None:
        with pytest.raises(ValidationError, match="does not end with"):
            PipelineConfig(frame_pattern="%06d.png")


class TestCacheDir:
    """Tests for get_cache_dir."""

    def test_explicit_value_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FRAMEFX_CACHE_DIR", "/tmp/env")

        assert PipelineConfig(cache_dir="/tmp/explicit").get_cache_dir() == "/tmp/explicit"

    def test_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("FRAMEFX_CACHE_DIR", raising=False)

        assert PipelineConfig().get_cache_dir() == "./cache"
