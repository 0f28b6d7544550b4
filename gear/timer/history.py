"""Completed timer sessions."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class TimerHistoryEntry:
    """One finished session.  Appended to the engine's history, never edited."""

    end_time: datetime
    start_time: datetime | None = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def elapsed_seconds(self) -> float | None:
        if self.start_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds()
