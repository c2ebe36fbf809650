"""Per-frame transform loop: stage, transform, commit, report.

Frames are handled one at a time in sequence order. A frame is committed
before the next one is staged, so ``processed_dir`` always holds a
contiguous prefix of the sequence. Errors are not caught here: a failing
frame aborts the run and leaves the committed prefix on disk.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

from framefx.effects.engine import EffectEngine, FrameTransform, StagedFrame
from framefx.progress import NullProgress, ProgressObserver
from framefx.stages.sequence import FrameRecord, FrameSequence

logger = logging.getLogger(__name__)


class FrameTransformError(Exception):
    """A transform returned something other than a staged frame."""

    pass


class FrameTransformPipeline:
    """Applies an optional transform to every frame and commits the result."""

    def __init__(
        self,
        engine: EffectEngine,
        processed_dir: Path,
        transform: FrameTransform | None = None,
        progress: ProgressObserver | None = None,
    ) -> None:
        self.engine = engine
        self.processed_dir = Path(processed_dir)
        self.transform = transform
        self.progress = progress or NullProgress()

    def process(self, record: FrameRecord, total: int) -> Path:
        """Stage, transform and commit a single frame.

        Args:
            record: The frame to process.
            total: Length of the sequence the record belongs to.

        Returns:
            Path of the committed frame in ``processed_dir``.
        """
        if record.index == 1:
            self.progress.start(total)

        staged = self.engine.stage(record.source_path)

        if self.transform is not None:
            staged = self.transform(
                staged=staged,
                current=record.index,
                total=total,
                effects=self.engine.capabilities,
            )
            if not isinstance(staged, StagedFrame):
                raise FrameTransformError(
                    f"Transform returned {type(staged).__name__} for frame "
                    f"{record.index} ({record.file_name}), expected StagedFrame"
                )

        committed = self.engine.commit(staged, self.processed_dir / record.file_name)

        self.progress.update(record.index)
        if record.index == total:
            self.progress.stop()

        return committed

    def run(self, sequence: FrameSequence) -> int:
        """Process every frame of ``sequence`` in order.

        Returns:
            Number of frames committed.
        """
        total = len(sequence)
        self.processed_dir.mkdir(parents=True, exist_ok=True)

        start_time = time.perf_counter()
        count = 0

        for record in sequence:
            self.process(record, total)
            count += 1

        elapsed = time.perf_counter() - start_time
        if count:
            logger.info(
                f"Processed {count} frames in {elapsed:.2f}s "
                f"(avg {elapsed / count * 1000:.1f}ms/frame)"
            )

        return count
