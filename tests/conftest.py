"""Shared pytest fixtures for Gear tests."""

import os
import sys
import time

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication  # noqa: E402

from gear.database.db import configure_engine, init_db  # noqa: E402
from gear.lifecycle import DefaultsStore  # noqa: E402
from gear.timer.engine import GearEngine  # noqa: E402

from helpers import FakeClock, RecordingNotifier  # noqa: E402


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def wait_until(qapp):
    """Spin the Qt event loop until ``condition()`` holds or time runs out."""

    def wait(condition, timeout_ms: int = 2000) -> bool:
        deadline = time.monotonic() + timeout_ms / 1000
        while time.monotonic() < deadline:
            qapp.processEvents()
            if condition():
                return True
            time.sleep(0.01)
        return condition()

    return wait


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def store():
    return DefaultsStore()


@pytest.fixture
def engine(qapp, clock, notifier, store):
    """Fresh GearEngine on a fake clock with a recording notifier."""
    eng = GearEngine(parent=None, notifier=notifier, store=store, clock=clock)
    yield eng
    eng.shutdown()
