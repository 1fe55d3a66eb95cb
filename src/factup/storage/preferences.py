"""JSON file persistence for favorites and display preferences."""

import json
import logging
import re
from pathlib import Path
from typing import Any

from ..facts.models import Fact
from ..notifications.planner import NotificationSettings

logger = logging.getLogger(__name__)

FAVORITES_KEY = "favorites"
BACKGROUND_COLOR_KEY = "background_color"
NOTIFICATIONS_KEY = "notifications"

DEFAULT_BACKGROUND_COLOR = "#007AFF"
HEX_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


def is_hex_color(value: str) -> bool:
    return bool(HEX_COLOR_RE.match(value))


class PreferencesStore:
    """Key-value store backed by a single JSON file.

    The file is read once on first access; every setter rewrites it.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._data: dict[str, Any] | None = None

    def _load(self) -> dict[str, Any]:
        if self._data is not None:
            return self._data

        self._data = {}
        if not self.path.exists():
            return self._data

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning("Invalid JSON in %s: %s. Using defaults.", self.path, e)
            return self._data
        except OSError as e:
            logger.warning("Cannot read %s: %s. Using defaults.", self.path, e)
            return self._data

        if isinstance(data, dict):
            self._data = data
        else:
            logger.warning("Ignoring %s: expected a JSON object", self.path)
        return self._data

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self._load(), f, indent=2, ensure_ascii=False)

    def load_favorites(self) -> list[Fact]:
        """Load saved favorites, skipping malformed entries."""
        raw = self._load().get(FAVORITES_KEY, [])
        if not isinstance(raw, list):
            return []

        favorites: list[Fact] = []
        for item in raw:
            try:
                favorites.append(Fact.from_dict(item))
            except (AttributeError, ValueError) as e:
                logger.warning("Skipping invalid favorite %r: %s", item, e)
        return favorites

    def save_favorites(self, favorites: list[Fact]) -> None:
        self._load()[FAVORITES_KEY] = [fact.to_dict() for fact in favorites]
        self._save()

    def load_background_color(self) -> str:
        value = self._load().get(BACKGROUND_COLOR_KEY)
        if isinstance(value, str) and is_hex_color(value):
            return value
        return DEFAULT_BACKGROUND_COLOR

    def save_background_color(self, color: str) -> None:
        if not is_hex_color(color):
            raise ValueError(f"Not a #RRGGBB color: {color!r}")
        self._load()[BACKGROUND_COLOR_KEY] = color
        self._save()

    def load_notification_settings(self) -> NotificationSettings:
        raw = self._load().get(NOTIFICATIONS_KEY)
        if not isinstance(raw, dict):
            return NotificationSettings()
        try:
            return NotificationSettings.from_dict(raw)
        except (TypeError, ValueError) as e:
            logger.warning("Invalid notification settings: %s", e)
            return NotificationSettings()

    def save_notification_settings(self, settings: NotificationSettings) -> NotificationSettings:
        """Validate and persist; returns the stored settings."""
        settings = settings.validated()
        self._load()[NOTIFICATIONS_KEY] = settings.to_dict()
        self._save()
        return settings
