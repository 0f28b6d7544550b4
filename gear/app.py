"""Main application window for Gear."""

from __future__ import annotations

import logging

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QAction, QColor, QIcon, QImage, QKeySequence, QPainter, QPen, QPixmap
from PyQt6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QLabel, QMenu,
    QSystemTrayIcon,
)

from .lifecycle import AppLifecycleHandler, DefaultsStore
from .notifications import NotificationService
from .settings import Settings, load_settings, save_settings
from .timer.engine import GearEngine
from .timer.formatting import format_time_interval
from .ui.gear_widget import GearWidget

logger = logging.getLogger(__name__)


def _make_tray_icon(running: bool) -> QIcon:
    """32×32 ring icon; filled while the timer runs."""
    size = 64  # draw at 2× for Retina
    img = QImage(size, size, QImage.Format.Format_ARGB32_Premultiplied)
    img.fill(Qt.GlobalColor.transparent)
    p = QPainter(img)
    p.setRenderHint(QPainter.RenderHint.Antialiasing)
    colour = QColor(0, 0, 0, 220)

    cx, cy, r = size // 2, size // 2, size // 2 - 4
    if running:
        p.setPen(Qt.PenStyle.NoPen)
        p.setBrush(colour)
    else:
        p.setPen(QPen(colour, 6))
        p.setBrush(Qt.BrushStyle.NoBrush)
    p.drawEllipse(cx - r, cy - r, r * 2, r * 2)
    p.end()

    img.setDevicePixelRatio(2.0)
    return QIcon(QPixmap.fromImage(img))


class GearApp(QMainWindow):
    """Main application window."""

    def __init__(self) -> None:
        super().__init__()
        # ── geometry save debounce ────────────────────────────────────
        self._geometry_save_timer = QTimer(self)
        self._geometry_save_timer.setSingleShot(True)
        self._geometry_save_timer.setInterval(500)
        self._geometry_save_timer.timeout.connect(self._save_geometry)

        self.setWindowTitle("Gear")
        self.setMinimumSize(380, 460)

        # ── settings ──────────────────────────────────────────────────
        self._settings: Settings = load_settings()

        # ── system tray icon ──────────────────────────────────────────
        self._tray_icon = QSystemTrayIcon(self)
        self._tray_icon.setIcon(_make_tray_icon(False))
        self._tray_icon.setToolTip("Gear")
        self._tray_icon.activated.connect(self._on_tray_activated)
        self._build_tray_menu()
        self._tray_icon.show()

        # ── services & engine ─────────────────────────────────────────
        self._notifications = NotificationService(
            self,
            tray_icon=self._tray_icon,
            enabled=self._settings.notifications_enabled,
        )
        self._engine = GearEngine(
            self, notifier=self._notifications, store=DefaultsStore(),
        )
        self._lifecycle = AppLifecycleHandler(self)

        # ── layout ────────────────────────────────────────────────────
        central = QWidget(self)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(16, 12, 16, 16)

        self._macro_label = QLabel(central)
        self._macro_label.setAlignment(
            Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignTop
        )
        layout.addWidget(self._macro_label)

        self._gear = GearWidget(central)
        layout.addWidget(self._gear, 1, Qt.AlignmentFlag.AlignCenter)
        self.setCentralWidget(central)

        self._build_menu_bar()
        self._connect_signals()
        self._restore_geometry()
        self._refresh()

        self._notifications.request_permission()
        self._engine.start_ticking()

    # ══════════════════════════════════════════════════════════════════
    #  WIRING
    # ══════════════════════════════════════════════════════════════════

    def _connect_signals(self) -> None:
        self._gear.tapped.connect(self._engine.tap_detected)
        self._gear.double_tapped.connect(self._engine.double_tap_detected)
        self._gear.rotated.connect(self._engine.rotation_changed)

        self._engine.tick.connect(self._on_tick)
        self._engine.state_changed.connect(self._refresh)
        self._engine.history_recorded.connect(self._on_history_recorded)

        self._lifecycle.did_enter_background.connect(
            self._engine.handle_did_enter_background
        )
        self._lifecycle.will_enter_foreground.connect(
            self._engine.handle_will_enter_foreground
        )

    def _build_tray_menu(self) -> None:
        menu = QMenu(self)
        show_action = menu.addAction("Show Gear")
        show_action.triggered.connect(self._show_window)
        menu.addSeparator()
        quit_action = menu.addAction("Quit")
        quit_action.triggered.connect(self._quit_app)
        self._tray_icon.setContextMenu(menu)

    def _build_menu_bar(self) -> None:
        timer_menu = self.menuBar().addMenu("Timer")

        toggle = QAction("Start / Pause", self)
        toggle.setShortcut(QKeySequence("Space"))
        toggle.triggered.connect(self._engine.tap_detected)
        timer_menu.addAction(toggle)

        stop = QAction("Stop && Record", self)
        stop.setShortcut(QKeySequence("Escape"))
        stop.triggered.connect(self._engine.double_tap_detected)
        timer_menu.addAction(stop)

        timer_menu.addSeparator()

        self._notify_action = QAction("Notifications", self)
        self._notify_action.setCheckable(True)
        self._notify_action.setChecked(self._settings.notifications_enabled)
        self._notify_action.triggered.connect(self._toggle_notifications)
        timer_menu.addAction(self._notify_action)

        quit_action = QAction("Quit", self)
        quit_action.setShortcut(QKeySequence.StandardKey.Quit)
        quit_action.triggered.connect(self._quit_app)
        timer_menu.addAction(quit_action)

    # ══════════════════════════════════════════════════════════════════
    #  ENGINE SIGNALS
    # ══════════════════════════════════════════════════════════════════

    def _on_tick(self, duration: float) -> None:
        self._gear.set_duration(duration)
        if self._engine.is_running:
            self._tray_icon.setToolTip(f"Gear - {format_time_interval(duration)}")

    def _on_history_recorded(self, entry) -> None:
        logger.info("Recorded session %s (%s -> %s)",
                    entry.id, entry.start_time, entry.end_time)
        self._refresh()

    def _refresh(self) -> None:
        self._macro_label.setText(
            self._engine.start_time_display
            + "    ->   "
            + self._engine.end_time_display
        )
        self._gear.set_duration(self._engine.duration)
        self._gear.set_running(self._engine.is_running)
        self._tray_icon.setIcon(_make_tray_icon(self._engine.is_running))
        if not self._engine.is_running:
            self._tray_icon.setToolTip("Gear")

    def _toggle_notifications(self, checked: bool) -> None:
        self._settings.notifications_enabled = checked
        save_settings(self._settings)
        self._notifications.enabled = checked
        self._notifications.request_permission()

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW STATE
    # ══════════════════════════════════════════════════════════════════

    def _on_tray_activated(self, reason: QSystemTrayIcon.ActivationReason) -> None:
        """Left-click on tray icon → toggle window visibility."""
        if reason == QSystemTrayIcon.ActivationReason.Trigger:
            if self.isVisible():
                self.hide()
            else:
                self._show_window()

    def _show_window(self) -> None:
        self.show()
        self.raise_()
        self.activateWindow()

    def _quit_app(self) -> None:
        self._save_geometry()
        self._engine.shutdown()
        self._tray_icon.hide()
        QApplication.instance().quit()

    def _restore_geometry(self) -> None:
        s = self._settings
        if s.window_x is not None and s.window_y is not None:
            self.move(s.window_x, s.window_y)
        if s.window_width and s.window_height:
            self.resize(s.window_width, s.window_height)

    def _save_geometry(self) -> None:
        if not self.isVisible():
            return
        pos = self.pos()
        size = self.size()
        self._settings.window_x = pos.x()
        self._settings.window_y = pos.y()
        self._settings.window_width = size.width()
        self._settings.window_height = size.height()
        save_settings(self._settings)

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW EVENTS
    # ══════════════════════════════════════════════════════════════════

    def hideEvent(self, event) -> None:  # type: ignore[override]
        super().hideEvent(event)
        self._lifecycle.enter_background()

    def showEvent(self, event) -> None:  # type: ignore[override]
        super().showEvent(event)
        self._lifecycle.enter_foreground()

    def closeEvent(self, event) -> None:  # type: ignore[override]
        """Minimize to tray instead of quitting (if enabled)."""
        self._save_geometry()
        if self._settings.minimize_to_tray and self._tray_icon.isVisible():
            event.ignore()
            self.hide()
        else:
            self._engine.shutdown()
            self._tray_icon.hide()
            event.accept()

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._geometry_save_timer.start()

    def moveEvent(self, event) -> None:  # type: ignore[override]
        super().moveEvent(event)
        self._geometry_save_timer.start()
