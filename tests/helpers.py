"""Shared test helpers for Gear."""

from datetime import datetime, timedelta


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = datetime(2024, 2, 3, 9, 30, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class RecordingNotifier:
    """Stand-in for NotificationService that records calls."""

    def __init__(self):
        self.calls: list[tuple] = []

    def schedule(self, identifier: str, seconds: float) -> None:
        self.calls.append(("schedule", identifier, seconds))

    def cancel(self, identifier: str) -> None:
        self.calls.append(("cancel", identifier))

    @property
    def scheduled(self) -> list[tuple]:
        return [c for c in self.calls if c[0] == "schedule"]


def dial_countdown(engine, seconds: float) -> None:
    """Dial ``seconds`` onto the gear (1800 s per 360 degrees)."""
    engine.rotation_changed(seconds * 360 / 1800)


def tick(engine, n: int = 1) -> None:
    for _ in range(n):
        engine.update_timer()
