"""Tests for background/foreground handling.

Covers:
- DefaultsStore get/set/remove over the database
- GearEngine snapshot on background and restore on foreground
- AppLifecycleHandler state mapping and de-duplication
"""

from __future__ import annotations

from datetime import timedelta

import pytest
from PyQt6.QtCore import Qt

from gear.database.db import get_session
from gear.database.models import StoredDefault
from gear.lifecycle import AppLifecycleHandler, DefaultsStore
from gear.timer.engine import (
    BACKGROUND_ENTRY_TIME_KEY,
    SAVED_DURATION_KEY,
    TIMER_RUNNING_KEY,
)

from helpers import SignalCollector, dial_countdown, tick


def _round_trip(engine, clock, seconds_away: float) -> None:
    engine.handle_did_enter_background()
    clock.advance(seconds_away)
    engine.handle_will_enter_foreground()


# ═══════════════════════════════════════════════════════════════════════
#  DEFAULTS STORE
# ═══════════════════════════════════════════════════════════════════════


class TestDefaultsStore:

    def test_missing_key_returns_default(self, store):
        assert store.get("nope") is None
        assert store.get("nope", 5) == 5

    def test_set_and_get(self, store):
        store.set("savedTimerDuration", 12.5)
        store.set("timerRunning", True)
        assert store.get("savedTimerDuration") == 12.5
        assert store.get("timerRunning") is True

    def test_overwrite(self, store):
        store.set("k", 1)
        store.set("k", 2)
        assert store.get("k") == 2
        with get_session() as db:
            assert db.query(StoredDefault).count() == 1

    def test_remove(self, store):
        store.set("k", "v")
        store.remove("k")
        assert "k" not in store
        assert store.get("k") is None

    def test_remove_missing_is_noop(self, store):
        store.remove("never-set")

    def test_contains(self, store):
        store.set("k", 0)
        assert "k" in store

    def test_shared_between_instances(self, store):
        store.set("k", [1, 2])
        assert DefaultsStore().get("k") == [1, 2]

    def test_undecodable_value_falls_back(self, store):
        with get_session() as db:
            db.add(StoredDefault(key="bad", value="{not json"))
        assert store.get("bad", "fallback") == "fallback"


# ═══════════════════════════════════════════════════════════════════════
#  SNAPSHOT
# ═══════════════════════════════════════════════════════════════════════


class TestSnapshot:

    def test_background_writes_three_fields(self, engine, store, clock):
        dial_countdown(engine, 100)
        engine.tap_detected()
        engine.handle_did_enter_background()

        assert store.get(BACKGROUND_ENTRY_TIME_KEY) == clock.now.isoformat()
        assert store.get(SAVED_DURATION_KEY) == 100
        assert store.get(TIMER_RUNNING_KEY) is True

    def test_foreground_clears_snapshot(self, engine, store, clock):
        engine.tap_detected()
        _round_trip(engine, clock, 5)
        for key in (BACKGROUND_ENTRY_TIME_KEY, SAVED_DURATION_KEY, TIMER_RUNNING_KEY):
            assert key not in store

    def test_foreground_without_snapshot_is_noop(self, engine):
        dial_countdown(engine, 100)
        engine.handle_will_enter_foreground()
        assert engine.duration == 100

    def test_partial_snapshot_is_ignored(self, engine, store):
        dial_countdown(engine, 100)
        store.set(SAVED_DURATION_KEY, 5)
        store.set(TIMER_RUNNING_KEY, True)
        engine.handle_will_enter_foreground()
        assert engine.duration == 100
        assert SAVED_DURATION_KEY not in store

    def test_malformed_snapshot_is_ignored(self, engine, store):
        dial_countdown(engine, 100)
        store.set(BACKGROUND_ENTRY_TIME_KEY, "yesterday-ish")
        store.set(SAVED_DURATION_KEY, 5)
        store.set(TIMER_RUNNING_KEY, True)
        engine.handle_will_enter_foreground()
        assert engine.duration == 100


# ═══════════════════════════════════════════════════════════════════════
#  RESTORE
# ═══════════════════════════════════════════════════════════════════════


class TestRestore:

    def test_countdown_resumes_with_time_deducted(self, engine, clock):
        dial_countdown(engine, 100)
        engine.tap_detected()
        _round_trip(engine, clock, 30)
        assert engine.duration == pytest.approx(70)
        assert engine.is_running is True
        assert engine.history == ()

    def test_countdown_finished_in_background(self, engine, clock):
        dial_countdown(engine, 10)
        engine.tap_detected()
        start = engine.start_time
        snapshot_time = clock.now

        _round_trip(engine, clock, 30)

        assert len(engine.history) == 1
        entry = engine.history[0]
        assert entry.start_time == start
        assert entry.end_time == snapshot_time + timedelta(seconds=10)
        assert engine.end_time == snapshot_time + timedelta(seconds=10)
        assert engine.duration == 0
        assert engine.is_running is False
        assert engine.has_started is False

    def test_countdown_exactly_finished(self, engine, clock):
        dial_countdown(engine, 20)
        engine.tap_detected()
        _round_trip(engine, clock, 20)
        assert len(engine.history) == 1
        assert engine.duration == 0

    def test_count_up_adds_time_away(self, engine, clock):
        engine.tap_detected()
        tick(engine, 10)
        _round_trip(engine, clock, 50)
        assert engine.duration == pytest.approx(60)
        assert engine.is_running is True

    def test_paused_timer_is_untouched(self, engine, clock):
        dial_countdown(engine, 100)
        engine.tap_detected()
        engine.tap_detected()
        _round_trip(engine, clock, 500)
        assert engine.duration == 100
        assert engine.is_running is False
        assert engine.history == ()

    def test_idle_timer_is_untouched(self, engine, clock):
        _round_trip(engine, clock, 500)
        assert engine.duration == 0
        assert engine.history == ()

    def test_fractional_time_away(self, engine, clock):
        dial_countdown(engine, 100)
        engine.tap_detected()
        _round_trip(engine, clock, 2.5)
        assert engine.duration == pytest.approx(97.5)


# ═══════════════════════════════════════════════════════════════════════
#  TICKING WHILE AWAY
# ═══════════════════════════════════════════════════════════════════════


class TestTickingAcrossLifecycle:

    def test_background_stops_tick_driver(self, engine):
        engine.start_ticking()
        engine.handle_did_enter_background()
        assert engine.is_ticking is False

    def test_foreground_restarts_tick_driver(self, engine, clock):
        engine.start_ticking()
        _round_trip(engine, clock, 1)
        assert engine.is_ticking is True

    def test_foreground_does_not_start_a_stopped_driver(self, engine, clock):
        _round_trip(engine, clock, 1)
        assert engine.is_ticking is False


# ═══════════════════════════════════════════════════════════════════════
#  LIFECYCLE HANDLER
# ═══════════════════════════════════════════════════════════════════════


@pytest.mark.usefixtures("qapp")
class TestAppLifecycleHandler:

    def test_hidden_means_background(self):
        h = AppLifecycleHandler()
        bg = SignalCollector()
        h.did_enter_background.connect(bg)
        h.on_application_state_changed(Qt.ApplicationState.ApplicationHidden)
        assert len(bg) == 1
        assert h.in_background

    def test_suspended_means_background(self):
        h = AppLifecycleHandler()
        bg = SignalCollector()
        h.did_enter_background.connect(bg)
        h.on_application_state_changed(Qt.ApplicationState.ApplicationSuspended)
        assert len(bg) == 1

    def test_active_after_background_means_foreground(self):
        h = AppLifecycleHandler()
        fg = SignalCollector()
        h.will_enter_foreground.connect(fg)
        h.on_application_state_changed(Qt.ApplicationState.ApplicationHidden)
        h.on_application_state_changed(Qt.ApplicationState.ApplicationActive)
        assert len(fg) == 1
        assert h.in_background is False

    def test_inactive_is_ignored(self):
        h = AppLifecycleHandler()
        bg = SignalCollector()
        h.did_enter_background.connect(bg)
        h.on_application_state_changed(Qt.ApplicationState.ApplicationInactive)
        assert len(bg) == 0

    def test_foreground_without_background_is_ignored(self):
        h = AppLifecycleHandler()
        fg = SignalCollector()
        h.will_enter_foreground.connect(fg)
        h.enter_foreground()
        assert len(fg) == 0

    def test_repeated_background_fires_once(self):
        h = AppLifecycleHandler()
        bg = SignalCollector()
        h.did_enter_background.connect(bg)
        h.enter_background()
        h.enter_background()
        assert len(bg) == 1

    def test_drives_engine_round_trip(self, engine, clock):
        h = AppLifecycleHandler()
        h.did_enter_background.connect(engine.handle_did_enter_background)
        h.will_enter_foreground.connect(engine.handle_will_enter_foreground)

        dial_countdown(engine, 100)
        engine.tap_detected()
        h.enter_background()
        clock.advance(30)
        h.enter_foreground()

        assert engine.duration == pytest.approx(70)
        assert engine.is_running
