"""App lifecycle events and the key-value store used to survive them.

``AppLifecycleHandler`` turns Qt application-state changes (and explicit
window hide/show calls) into two signals, ``did_enter_background`` and
``will_enter_foreground``.  Each transition fires once; repeated reports
of the same state are ignored.

``DefaultsStore`` is a small key-value store backed by the
``stored_defaults`` table.  Values are JSON-encoded.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from PyQt6.QtCore import QObject, Qt, pyqtSignal
from PyQt6.QtGui import QGuiApplication

from .database.db import get_session
from .database.models import StoredDefault

logger = logging.getLogger(__name__)

_BACKGROUND_STATES = (
    Qt.ApplicationState.ApplicationHidden,
    Qt.ApplicationState.ApplicationSuspended,
)


class DefaultsStore:
    """Persistent key-value defaults.

    ``get`` returns ``default`` for missing keys and for values that no
    longer decode.
    """

    def get(self, key: str, default: Any = None) -> Any:
        with get_session() as db:
            record = db.get(StoredDefault, key)
            if record is None:
                return default
            raw = record.value
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding undecodable default %r", key)
            return default

    def set(self, key: str, value: Any) -> None:
        encoded = json.dumps(value)
        with get_session() as db:
            record = db.get(StoredDefault, key)
            if record is None:
                db.add(StoredDefault(key=key, value=encoded))
            else:
                record.value = encoded

    def remove(self, key: str) -> None:
        with get_session() as db:
            record = db.get(StoredDefault, key)
            if record is not None:
                db.delete(record)

    def __contains__(self, key: str) -> bool:
        with get_session() as db:
            return db.get(StoredDefault, key) is not None


class AppLifecycleHandler(QObject):
    """Emits background/foreground transitions for the running app."""

    did_enter_background = pyqtSignal()
    will_enter_foreground = pyqtSignal()

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._in_background = False

        app = QGuiApplication.instance()
        if app is not None:
            app.applicationStateChanged.connect(self.on_application_state_changed)

    @property
    def in_background(self) -> bool:
        return self._in_background

    def on_application_state_changed(self, state: Qt.ApplicationState) -> None:
        if state in _BACKGROUND_STATES:
            self.enter_background()
        elif state == Qt.ApplicationState.ApplicationActive:
            self.enter_foreground()

    def enter_background(self) -> None:
        if self._in_background:
            return
        self._in_background = True
        logger.info("App entered background")
        self.did_enter_background.emit()

    def enter_foreground(self) -> None:
        if not self._in_background:
            return
        self._in_background = False
        logger.info("App will enter foreground")
        self.will_enter_foreground.emit()
