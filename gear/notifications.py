"""One-shot desktop notifications keyed by identifier.

Delivery goes through a ``QSystemTrayIcon`` message bubble.  Scheduling is
a single-shot ``QTimer`` per identifier: scheduling again under the same
identifier replaces the pending one, ``cancel`` discards it.  Failures are
logged and otherwise ignored.
"""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, Qt, QTimer, pyqtSignal
from PyQt6.QtWidgets import QSystemTrayIcon

logger = logging.getLogger(__name__)

TIMER_FINISHED = "timerFinished"

TIMER_FINISHED_TITLE = "Timer Finished"
TIMER_FINISHED_BODY = "Your countdown timer has ended."


class NotificationService(QObject):
    """Schedules, cancels and delivers timer notifications.

    Signals
    -------
    delivered(identifier: str)
        Emitted when a scheduled notification fires.
    """

    delivered = pyqtSignal(str)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        tray_icon: QSystemTrayIcon | None = None,
        enabled: bool = True,
    ) -> None:
        super().__init__(parent)
        self._tray_icon = tray_icon
        self._enabled = enabled
        self._granted = False
        self._pending: dict[str, QTimer] = {}

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = value

    @property
    def granted(self) -> bool:
        return self._granted

    def request_permission(self) -> bool:
        """Check whether notifications can be shown, and remember the answer."""
        if not self._enabled:
            logger.info("Notification permission denied: disabled in settings")
            self._granted = False
        elif not QSystemTrayIcon.isSystemTrayAvailable():
            logger.info("Notification permission denied: no system tray")
            self._granted = False
        elif not QSystemTrayIcon.supportsMessages():
            logger.info("Notification permission denied: tray has no messages")
            self._granted = False
        else:
            logger.info("Notification permission granted.")
            self._granted = True
        return self._granted

    def schedule(self, identifier: str, seconds: float) -> None:
        """Deliver a notification ``seconds`` from now under ``identifier``."""
        if seconds <= 0:
            logger.warning(
                "Error scheduling notification %r: invalid delay %.1fs",
                identifier, seconds,
            )
            return
        self.cancel(identifier)

        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.setTimerType(Qt.TimerType.PreciseTimer)
        timer.setInterval(int(seconds * 1000))
        timer.timeout.connect(lambda: self._deliver(identifier))
        self._pending[identifier] = timer
        timer.start()
        logger.debug("Scheduled notification %r in %.1fs", identifier, seconds)

    def cancel(self, identifier: str) -> None:
        timer = self._pending.pop(identifier, None)
        if timer is not None:
            timer.stop()
            timer.deleteLater()

    def is_pending(self, identifier: str) -> bool:
        return identifier in self._pending

    def remaining_ms(self, identifier: str) -> int | None:
        timer = self._pending.get(identifier)
        if timer is None:
            return None
        return timer.remainingTime()

    def _deliver(self, identifier: str) -> None:
        timer = self._pending.pop(identifier, None)
        if timer is not None:
            timer.deleteLater()
        self.delivered.emit(identifier)

        if not self._granted or self._tray_icon is None:
            logger.info("Notification %r not shown: permission not granted", identifier)
            return
        if identifier == TIMER_FINISHED:
            self._tray_icon.showMessage(TIMER_FINISHED_TITLE, TIMER_FINISHED_BODY)
        else:
            self._tray_icon.showMessage(identifier, "")
