"""Render orchestration for framefx."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any

from framefx.config import PipelineConfig
from framefx.effects.engine import EffectEngine, FrameTransform, PillowEffectEngine
from framefx.models.schema import RenderResult
from framefx.progress import NullProgress, ProgressObserver, TqdmProgress
from framefx.session import Session, create_session
from framefx.stages.extract import extract_audio, extract_frames
from framefx.stages.probe import probe_media
from framefx.stages.reassemble import EncodeRequest, encode_video
from framefx.stages.sequence import FrameSequence
from framefx.stages.transform import FrameTransformPipeline
from framefx.utils.logging import set_verbose

logger = logging.getLogger(__name__)


class PipelineError(Exception):
    """Error in render orchestration."""

    pass


def count_frames(directory: Path, extension: str = ".jpg") -> int:
    """Count frame files with ``extension`` in ``directory``."""
    extension = extension.lower()
    return sum(
        1 for p in directory.iterdir() if p.is_file() and p.suffix.lower() == extension
    )


class Renderer:
    """framefx render pipeline.

    Probes a source video, extracts its frames and audio into a per-run
    cache session, runs every frame through an optional transform and
    encodes the result back into a video with the source's timing.

    Example:
        >>> import framefx
        >>> def invert(staged, current, total, effects):
        ...     return effects.use_effect(staged, "invert")
        >>> renderer = framefx.Renderer(video_out="out.mp4", verbose=False)
        >>> result = renderer.render("input.mp4", invert)
        >>> result.output_path
        PosixPath('out.mp4')
    """

    def __init__(
        self,
        config: PipelineConfig | dict[str, Any] | None = None,
        engine: EffectEngine | None = None,
        progress: ProgressObserver | None = None,
        **overrides: Any,
    ) -> None:
        """Initialize a renderer.

        Args:
            config: PipelineConfig instance or dict of its fields.
            engine: Effect engine; defaults to a PillowEffectEngine using
                the configured JPEG quality.
            progress: Progress observer; defaults to a tqdm bar, or to no
                output when ``show_progress`` is false.
            **overrides: Individual PipelineConfig fields, applied on top
                of ``config``.
        """
        if config is None:
            base: dict[str, Any] = {}
        elif isinstance(config, dict):
            base = dict(config)
        else:
            base = config.model_dump()
        base.update(overrides)

        self.config = PipelineConfig(**base)
        self.engine = engine or PillowEffectEngine(quality=self.config.jpeg_quality)

        if progress is not None:
            self.progress = progress
        elif self.config.show_progress:
            self.progress = TqdmProgress()
        else:
            self.progress = NullProgress()

    def render(
        self,
        source: str | Path,
        transform: FrameTransform | None = None,
        video_out: str | Path | None = None,
    ) -> RenderResult:
        """Apply ``transform`` to every frame of ``source`` and encode the result.

        Args:
            source: Path to the input video.
            transform: Optional per-frame transform. When omitted frames
                pass through unchanged.
            video_out: Output path; defaults to ``config.video_out``.

        Returns:
            RenderResult describing the encoded video.

        Raises:
            FileNotFoundError: If the source file does not exist.
            ProbeError: If the source has no decodable video stream.
            ExtractionError: If frames cannot be extracted.
            EffectEngineError: If a frame cannot be staged or committed.
            FrameTransformError: If the transform returns a non-frame.
            PipelineError: If the processed frame set is incomplete.
            EncodeError: If the output video cannot be produced.
        """
        config = self.config
        set_verbose(config.verbose)

        source_path = Path(source)
        output_path = Path(video_out if video_out is not None else config.video_out)
        start_time = time.perf_counter()

        if not source_path.exists():
            raise FileNotFoundError(f"Source file not found: {source_path}")

        descriptor = probe_media(
            source_path,
            default_bit_rate=config.default_bit_rate,
            timeout=config.probe_timeout,
        )
        logger.info(
            f"Video details: {descriptor.resolution} @ {descriptor.frame_rate:.3f} fps, "
            f"{descriptor.bit_rate} b/s"
        )

        session = create_session(config.get_cache_dir())
        logger.info(f"Session {session.id}: {session.root}")

        frames_dir = extract_frames(
            source_path,
            session,
            frame_pattern=config.frame_pattern,
            timeout=config.ffmpeg_timeout,
        )
        audio = extract_audio(
            source_path,
            session,
            codec=config.audio_codec,
            timeout=config.ffmpeg_timeout,
        )
        logger.info(f" :: {frames_dir}/*")
        logger.info(f" :: {audio.path if audio else 'No audio stream found'}")

        sequence = FrameSequence(frames_dir, extension=config.frame_extension)
        total = len(sequence)
        if total == 0:
            raise PipelineError(f"No {config.frame_extension} frames found in {frames_dir}")

        logger.info(f"Processing {total} frames ...")
        loop = FrameTransformPipeline(
            engine=self.engine,
            processed_dir=session.processed_dir,
            transform=transform,
            progress=self.progress,
        )
        loop.run(sequence)

        self._check_complete(session, total)

        encode_video(
            EncodeRequest(
                frame_rate=descriptor.frame_rate,
                frame_rate_exact=descriptor.frame_rate_exact,
                frames_dir=session.processed_dir,
                video_out=output_path,
                width=descriptor.width,
                height=descriptor.height,
                bit_rate=descriptor.bit_rate,
                audio_path=audio.path if audio else None,
            ),
            encoders=config.video_encoders,
            default_encoder=config.default_video_encoder,
            frame_pattern=config.frame_pattern,
            audio_codec=config.audio_codec,
            apply_bit_rate=config.apply_bit_rate,
            timeout=config.ffmpeg_timeout,
        )

        elapsed = time.perf_counter() - start_time
        logger.info(f"Done! {total} frames -> {output_path} in {elapsed:.2f}s")

        return RenderResult(
            session_id=session.id,
            output_path=output_path,
            descriptor=descriptor,
            frame_count=total,
            audio_path=audio.path if audio else None,
            elapsed=elapsed,
        )

    def _check_complete(self, session: Session, total: int) -> None:
        """Refuse to encode unless every frame of the sequence was committed."""
        committed = count_frames(session.processed_dir, self.config.frame_extension)
        if committed != total:
            raise PipelineError(
                f"Processed frame set is incomplete: {committed} of {total} frames "
                f"in {session.processed_dir}"
            )


def render(
    source: str | Path,
    transform: FrameTransform | None = None,
    *,
    config: PipelineConfig | dict[str, Any] | None = None,
    engine: EffectEngine | None = None,
    progress: ProgressObserver | None = None,
    **overrides: Any,
) -> RenderResult:
    """Render ``source`` through ``transform`` in one call.

    Keyword overrides are PipelineConfig fields (``video_out``,
    ``verbose``, ``cache_dir`` ...).
    """
    renderer = Renderer(config=config, engine=engine, progress=progress, **overrides)
    return renderer.render(source, transform)
