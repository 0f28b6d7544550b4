"""Timer state machine for Gear.

One timer, two modes
--------------------
Count-up      A tap starts a stopwatch; every tick adds a second.
Countdown     Dragging around the gear dials in a duration; a tap starts
              it and every tick removes a second until zero.

Events
------
tick (1 s)       advance the clock; a countdown hitting 0 is recorded
tap              start / pause; the first tap stamps ``start_time``
double tap       record the session (if any) and reset
rotation         +/- 1800 s per full turn; below zero records and resets
background       snapshot (now, duration, running) to the defaults store
foreground       restore from the snapshot, catching up on elapsed time

Every finished session is appended to ``history`` as an immutable
``TimerHistoryEntry``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, Protocol

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..lifecycle import DefaultsStore
from ..notifications import TIMER_FINISHED
from .formatting import format_clock
from .gesture import seconds_for_angle
from .history import TimerHistoryEntry

logger = logging.getLogger(__name__)


# ── constants ─────────────────────────────────────────────────────────────

TICK_INTERVAL_MS = 1000

BACKGROUND_ENTRY_TIME_KEY = "backgroundEntryTime"
SAVED_DURATION_KEY = "savedTimerDuration"
TIMER_RUNNING_KEY = "timerRunning"

_SNAPSHOT_KEYS = (BACKGROUND_ENTRY_TIME_KEY, SAVED_DURATION_KEY, TIMER_RUNNING_KEY)


class Notifier(Protocol):
    def schedule(self, identifier: str, seconds: float) -> None: ...

    def cancel(self, identifier: str) -> None: ...


class KeyValueStore(Protocol):
    def get(self, key: str, default=None): ...

    def set(self, key: str, value) -> None: ...

    def remove(self, key: str) -> None: ...


# ── engine ────────────────────────────────────────────────────────────────


class GearEngine(QObject):
    """Qt-based stopwatch / countdown with gesture input and lifecycle
    snapshotting.

    Signals
    -------
    tick(duration: float)
        Emitted whenever the displayed duration changes.
    state_changed()
        Emitted after any change to running / started / countdown flags.
    history_recorded(entry: TimerHistoryEntry)
        Emitted after a finished session is appended to ``history``.
    """

    tick = pyqtSignal(float)
    state_changed = pyqtSignal()
    history_recorded = pyqtSignal(object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        notifier: Notifier | None = None,
        store: KeyValueStore | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        super().__init__(parent)

        # ── collaborators ─────────────────────────────────────────────
        self._notifier = notifier
        self._store = store if store is not None else DefaultsStore()
        self._clock = clock

        # ── timer state ───────────────────────────────────────────────
        self._duration: float = 0.0
        self._start_time: datetime | None = None
        self._end_time: datetime | None = None
        self._running: bool = False
        self._started: bool = False
        self._countdown: bool = False

        self._history: list[TimerHistoryEntry] = []

        # ── tick driver ───────────────────────────────────────────────
        self._qt_timer: QTimer | None = QTimer(self)
        self._qt_timer.setInterval(TICK_INTERVAL_MS)
        self._qt_timer.timeout.connect(self.update_timer)
        self._resume_ticking = False

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def duration(self) -> float:
        """Seconds remaining (countdown) or elapsed (count-up)."""
        return self._duration

    @property
    def start_time(self) -> datetime | None:
        return self._start_time

    @property
    def end_time(self) -> datetime | None:
        return self._end_time

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def has_started(self) -> bool:
        return self._started

    @property
    def is_countdown(self) -> bool:
        return self._countdown

    @property
    def history(self) -> tuple[TimerHistoryEntry, ...]:
        return tuple(self._history)

    @property
    def start_time_display(self) -> str:
        """Current session start, or the last recorded one when idle."""
        if self._started:
            return format_clock(self._start_time)
        last = self._history[-1] if self._history else None
        return format_clock(last.start_time if last else None)

    @property
    def end_time_display(self) -> str:
        """Blank while a session is in progress, else the last recorded end."""
        if self._started:
            return ""
        last = self._history[-1] if self._history else None
        return format_clock(last.end_time if last else None)

    # ══════════════════════════════════════════════════════════════════
    #  TICK DRIVER
    # ══════════════════════════════════════════════════════════════════

    @property
    def is_ticking(self) -> bool:
        return self._qt_timer is not None and self._qt_timer.isActive()

    def start_ticking(self) -> None:
        if self._qt_timer is not None:
            self._qt_timer.start()

    def stop_ticking(self) -> None:
        if self._qt_timer is not None:
            self._qt_timer.stop()

    def shutdown(self) -> None:
        """Discard the tick subscription.  The engine stops advancing."""
        if self._qt_timer is None:
            return
        self._qt_timer.stop()
        self._qt_timer.timeout.disconnect(self.update_timer)
        self._qt_timer.deleteLater()
        self._qt_timer = None

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def update_timer(self) -> None:
        """Advance one second in the current mode."""
        if self._countdown and self._running and self._duration > 0:
            self._duration -= 1
            self.tick.emit(self._duration)
        elif not self._countdown and self._running:
            self._duration += 1
            self.tick.emit(self._duration)

        if self._countdown and self._running and self._duration <= 0:
            logger.info("Countdown finished")
            self._record_and_reset()

    def tap_detected(self) -> None:
        """Start or pause."""
        now = self._clock()
        self._running = not self._running
        if self._start_time is None:
            self._start_time = now
            self._started = True
        if not self._running:
            self._end_time = now

        if self._countdown and self._notifier is not None:
            self._notifier.cancel(TIMER_FINISHED)
            self._notifier.schedule(TIMER_FINISHED, self._duration)

        self.state_changed.emit()

    def double_tap_detected(self) -> None:
        """Stop, record the session if one was in progress, and reset."""
        self._cancel_finish_alert()
        self._record_and_reset()

    def rotation_changed(self, angle_delta: float) -> None:
        """Apply a drag of ``angle_delta`` degrees around the gear."""
        self._duration += seconds_for_angle(angle_delta)

        if self._duration < 0:
            self._cancel_finish_alert()
            self._record_and_reset()
            return

        if not self._countdown:
            self._countdown = True
            self.state_changed.emit()
        self.tick.emit(self._duration)

    def reset(self) -> None:
        """Return to zero / idle.  ``end_time`` is left as-is."""
        self._duration = 0.0
        self._running = False
        self._started = False
        self._start_time = None
        self._countdown = False
        self.tick.emit(self._duration)
        self.state_changed.emit()

    # ══════════════════════════════════════════════════════════════════
    #  LIFECYCLE
    # ══════════════════════════════════════════════════════════════════

    def handle_did_enter_background(self) -> None:
        """Snapshot the clock and stop ticking until the app comes back."""
        logger.info("Saving timer snapshot (duration=%.1f, running=%s)",
                    self._duration, self._running)
        self._store.set(BACKGROUND_ENTRY_TIME_KEY, self._clock().isoformat())
        self._store.set(SAVED_DURATION_KEY, self._duration)
        self._store.set(TIMER_RUNNING_KEY, self._running)

        self._resume_ticking = self.is_ticking
        self.stop_ticking()

    def handle_will_enter_foreground(self) -> None:
        """Restore from the snapshot, catching up on time spent away."""
        if self._resume_ticking:
            self._resume_ticking = False
            self.start_ticking()

        snapshot = self._read_snapshot()
        for key in _SNAPSHOT_KEYS:
            self._store.remove(key)
        if snapshot is None:
            return
        entered_at, saved_duration, was_running = snapshot

        if not was_running:
            return

        elapsed = (self._clock() - entered_at).total_seconds()
        if self._countdown:
            self._duration = max(0.0, saved_duration - elapsed)
        else:
            self._duration = saved_duration + elapsed
        logger.info("Restored timer after %.1fs away: %.1f -> %.1f",
                    elapsed, saved_duration, self._duration)
        self.tick.emit(self._duration)

        if not self._countdown:
            return
        if self._duration > 0:
            self._running = True
            self.state_changed.emit()
        else:
            finished_at = entered_at + timedelta(seconds=saved_duration)
            self._end_time = finished_at
            logger.info("Countdown finished in background at %s", finished_at)
            self._record_and_reset(end_time=finished_at)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _read_snapshot(self) -> tuple[datetime, float, bool] | None:
        raw_time = self._store.get(BACKGROUND_ENTRY_TIME_KEY)
        raw_duration = self._store.get(SAVED_DURATION_KEY)
        raw_running = self._store.get(TIMER_RUNNING_KEY)
        if raw_time is None or raw_duration is None or raw_running is None:
            logger.debug("No timer snapshot to restore")
            return None
        try:
            entered_at = datetime.fromisoformat(raw_time)
            saved_duration = float(raw_duration)
        except (TypeError, ValueError):
            logger.warning("Ignoring malformed timer snapshot")
            return None
        return entered_at, saved_duration, bool(raw_running)

    def _cancel_finish_alert(self) -> None:
        if self._notifier is not None:
            self._notifier.cancel(TIMER_FINISHED)

    def _record_and_reset(self, end_time: datetime | None = None) -> None:
        if self._start_time is not None:
            entry = TimerHistoryEntry(
                start_time=self._start_time,
                end_time=end_time or self._clock(),
            )
            self._history.append(entry)
            self.history_recorded.emit(entry)
        self.reset()
