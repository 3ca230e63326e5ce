from __future__ import annotations

from unittest.mock import MagicMock, patch

from serial_sheets.services.progress import ProgressTracker


def test_progress_disabled_without_tty():
    with patch("serial_sheets.services.progress.is_tty_enabled", return_value=False):
        tracker = ProgressTracker(3)
    assert tracker.enabled is False
    assert tracker.pbar is None
    tracker.advance("P1")
    tracker.close()
    assert tracker.current_group == 1


def test_progress_updates_tqdm_bar_on_tty():
    bar = MagicMock()
    with patch("serial_sheets.services.progress.is_tty_enabled", return_value=True), patch(
        "serial_sheets.services.progress.tqdm", return_value=bar
    ) as tqdm_cls:
        with ProgressTracker(2) as tracker:
            tracker.advance("P1 - I1")
            tracker.advance("P2 - I1")
    assert tqdm_cls.call_args.kwargs["total"] == 2
    assert bar.update.call_count == 2
    bar.set_postfix_str.assert_called_with("P2 - I1")
    bar.close.assert_called_once()
    assert tracker.pbar is None
