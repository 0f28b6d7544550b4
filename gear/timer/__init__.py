"""Timer package."""

from .engine import (
    GearEngine,
    BACKGROUND_ENTRY_TIME_KEY,
    SAVED_DURATION_KEY,
    TIMER_RUNNING_KEY,
)
from .gesture import SECONDS_PER_ROTATION, RotationTracker
from .history import TimerHistoryEntry

__all__ = [
    "GearEngine",
    "BACKGROUND_ENTRY_TIME_KEY",
    "SAVED_DURATION_KEY",
    "TIMER_RUNNING_KEY",
    "SECONDS_PER_ROTATION",
    "RotationTracker",
    "TimerHistoryEntry",
]
