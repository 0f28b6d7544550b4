"""Display helpers for durations and wall-clock times."""

from __future__ import annotations

from datetime import datetime


def format_time_interval(seconds: float) -> str:
    """Format as ``H:MM:SS`` with minutes and seconds zero-padded.

    Fractional seconds are truncated; negative input shows as zero.
    """
    total = int(max(0.0, seconds))
    h, rem = divmod(total, 3600)
    m, s = divmod(rem, 60)
    return f"{h}:{m:02d}:{s:02d}"


def format_clock(moment: datetime | None) -> str:
    """``HH:MM:SS`` for a timestamp, empty string for None."""
    if moment is None:
        return ""
    return moment.strftime("%H:%M:%S")
