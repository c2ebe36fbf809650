"""Tests for progress observers."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from framefx.progress import NullProgress, TqdmProgress


class TestTqdmProgress:
    """Tests for TqdmProgress."""

    def test_updates_by_delta(self) -> None:
        with patch("framefx.progress.tqdm") as tqdm_cls:
            bar = tqdm_cls.return_value
            bar.n = 0
            progress = TqdmProgress()

            progress.start(10)
            progress.update(3)

        tqdm_cls.assert_called_once()
        assert tqdm_cls.call_args.kwargs["total"] == 10
        bar.update.assert_called_once_with(3)

    def test_stop_closes_bar(self) -> None:
        with patch("framefx.progress.tqdm") as tqdm_cls:
            progress = TqdmProgress()
            progress.start(2)
            progress.stop()
            progress.stop()

        tqdm_cls.return_value.close.assert_called_once()

    def test_restart_closes_abandoned_bar(self) -> None:
        """A bar left open by an aborted render is closed on the next start."""
        first, second = MagicMock(n=0), MagicMock(n=0)

        with patch("framefx.progress.tqdm", side_effect=[first, second]):
            progress = TqdmProgress()
            progress.start(10)
            progress.update(4)
            progress.start(5)

        first.close.assert_called_once()
        second.close.assert_not_called()

    def test_update_before_start_is_ignored(self) -> None:
        TqdmProgress().update(1)


def test_null_progress_accepts_events() -> None:
    progress = NullProgress()
    progress.start(1)
    progress.update(1)
    progress.stop()
