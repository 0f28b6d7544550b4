"""Application settings with JSON persistence.

Settings are stored at:
    ~/.gear/settings.json

Usage::

    settings = load_settings()
    settings.notifications_enabled = False
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path

logger = logging.getLogger(__name__)

# Same directory as the database
APP_SUPPORT_DIR = Path.home() / ".gear"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── notifications ─────────────────────────────────────────────────
    notifications_enabled: bool = True

    # ── window ────────────────────────────────────────────────────────
    minimize_to_tray: bool = True
    window_x: int | None = None
    window_y: int | None = None
    window_width: int = 420
    window_height: int = 520


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    try:
        if SETTINGS_PATH.exists():
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(Settings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            return Settings(**filtered)
    except (OSError, ValueError, TypeError) as exc:
        logger.warning("Could not read %s, using defaults: %s", SETTINGS_PATH, exc)
    return Settings()


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
