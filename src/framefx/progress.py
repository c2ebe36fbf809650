"""Progress reporting for the per-frame loop.

Observers are purely informational. Nothing they do affects the render.
"""

from __future__ import annotations

from typing import Protocol

from tqdm import tqdm


class ProgressObserver(Protocol):
    """Receives frame progress from the transform loop."""

    def start(self, total: int) -> None: ...

    def update(self, current: int) -> None: ...

    def stop(self) -> None: ...


class NullProgress:
    """Observer that ignores every event."""

    def start(self, total: int) -> None:
        pass

    def update(self, current: int) -> None:
        pass

    def stop(self) -> None:
        pass


class TqdmProgress:
    """Observer that renders a tqdm bar on stderr."""

    def __init__(self, desc: str = "Processing frames") -> None:
        self.desc = desc
        self._pbar: tqdm | None = None

    def start(self, total: int) -> None:
        # A render that aborted mid-run never reached stop().
        self.stop()
        self._pbar = tqdm(
            total=total,
            desc=self.desc,
            unit="frame",
            bar_format="{desc}: {percentage:3.0f}%|{bar}| {n_fmt}/{total_fmt} frames [{elapsed}<{remaining}]",
            leave=True,
        )

    def update(self, current: int) -> None:
        if self._pbar is None:
            return
        # tqdm counts increments; we receive absolute positions.
        delta = current - self._pbar.n
        if delta > 0:
            self._pbar.update(delta)

    def stop(self) -> None:
        if self._pbar is not None:
            self._pbar.close()
            self._pbar = None
