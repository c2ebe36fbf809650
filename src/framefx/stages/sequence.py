"""Frame sequencing: turn a directory of frame files into an ordered sequence."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")


@dataclass(frozen=True)
class FrameRecord:
    """One extracted frame, addressed by its 1-based position."""

    index: int
    file_name: str
    source_path: Path


def frame_number(file_name: str) -> int | None:
    """Return the integer formed by the digits of ``file_name``, if any."""
    digits = _NON_DIGITS.sub("", file_name)
    return int(digits) if digits else None


class FrameSequence:
    """Ordered, single-pass sequence of the frames in a directory.

    Order comes from the number embedded in each file name, never from
    directory listing order. The total is fixed at construction time.

    Example:
        >>> sequence = FrameSequence(session.frames_dir)
        >>> for record in sequence:
        ...     print(record.index, len(sequence), record.file_name)
    """

    def __init__(self, frame_dir: str | Path, extension: str = ".jpg") -> None:
        self.frame_dir = Path(frame_dir)
        self.extension = extension.lower()
        self._records = self._enumerate()
        self._consumed = False

    def _enumerate(self) -> list[FrameRecord]:
        numbered: list[tuple[int, str]] = []

        for entry in self.frame_dir.iterdir():
            if not entry.is_file() or entry.suffix.lower() != self.extension:
                continue

            number = frame_number(entry.name)
            if number is None:
                logger.warning(f"Skipping frame file without a number: {entry.name}")
                continue
            numbered.append((number, entry.name))

        numbered.sort()

        return [
            FrameRecord(index=i, file_name=name, source_path=self.frame_dir / name)
            for i, (_, name) in enumerate(numbered, start=1)
        ]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[FrameRecord]:
        if self._consumed:
            raise RuntimeError("FrameSequence can only be iterated once")
        self._consumed = True
        return iter(self._records)

    @property
    def file_names(self) -> list[str]:
        """File names in sequence order."""
        return [r.file_name for r in self._records]
