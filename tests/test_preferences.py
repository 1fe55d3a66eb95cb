"""Tests for the JSON preferences store."""

import json
from pathlib import Path

import pytest

from factup.facts import Fact
from factup.notifications import NotificationSettings
from factup.storage import DEFAULT_BACKGROUND_COLOR, PreferencesStore, is_hex_color


@pytest.fixture
def prefs_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "preferences.json"


def test_defaults_when_file_missing(prefs_path: Path):
    store = PreferencesStore(prefs_path)

    assert store.load_favorites() == []
    assert store.load_background_color() == DEFAULT_BACKGROUND_COLOR
    assert store.load_notification_settings() == NotificationSettings()


def test_favorites_round_trip(prefs_path: Path):
    store = PreferencesStore(prefs_path)
    store.save_favorites(
        [
            Fact(text="Honey never spoils.", is_favorite=True),
            Fact(
                text="Cows have best friends.",
                category="Animals",
                is_favorite=True,
                translated_text="Las vacas tienen mejores amigas.",
                translation_language="es",
            ),
        ]
    )

    loaded = PreferencesStore(prefs_path).load_favorites()

    assert [f.text for f in loaded] == ["Honey never spoils.", "Cows have best friends."]
    assert loaded[1].category == "Animals"
    assert loaded[1].translated_text == "Las vacas tienen mejores amigas."


def test_file_format(prefs_path: Path):
    store = PreferencesStore(prefs_path)
    store.save_favorites([Fact(text="Honey never spoils.", is_favorite=True)])
    store.save_background_color("#34C759")

    data = json.loads(prefs_path.read_text(encoding="utf-8"))

    assert data["background_color"] == "#34C759"
    assert data["favorites"][0]["isFavorite"] is True


def test_malformed_favorites_are_skipped(prefs_path: Path):
    prefs_path.parent.mkdir(parents=True)
    prefs_path.write_text(
        json.dumps({"favorites": [{"text": "Kept."}, {"category": "General"}, "junk"]}),
        encoding="utf-8",
    )

    loaded = PreferencesStore(prefs_path).load_favorites()

    assert [f.text for f in loaded] == ["Kept."]


def test_invalid_json_uses_defaults(prefs_path: Path):
    prefs_path.parent.mkdir(parents=True)
    prefs_path.write_text("{not json", encoding="utf-8")
    store = PreferencesStore(prefs_path)

    assert store.load_favorites() == []
    assert store.load_background_color() == DEFAULT_BACKGROUND_COLOR


def test_invalid_stored_color_uses_default(prefs_path: Path):
    prefs_path.parent.mkdir(parents=True)
    prefs_path.write_text(json.dumps({"background_color": "blue"}), encoding="utf-8")

    assert PreferencesStore(prefs_path).load_background_color() == DEFAULT_BACKGROUND_COLOR


def test_save_background_color_rejects_bad_value(prefs_path: Path):
    store = PreferencesStore(prefs_path)
    with pytest.raises(ValueError):
        store.save_background_color("#12345")
    assert not prefs_path.exists()


def test_notification_settings_are_clamped_on_save(prefs_path: Path):
    store = PreferencesStore(prefs_path)

    saved = store.save_notification_settings(
        NotificationSettings(enabled=True, frequency=25, start_hour=23, end_hour=5)
    )

    assert saved == NotificationSettings(enabled=True, frequency=10, start_hour=23, end_hour=24)
    assert PreferencesStore(prefs_path).load_notification_settings() == saved


def test_invalid_notification_settings_use_defaults(prefs_path: Path):
    prefs_path.parent.mkdir(parents=True)
    prefs_path.write_text(json.dumps({"notifications": {"frequency": "often"}}), encoding="utf-8")

    assert PreferencesStore(prefs_path).load_notification_settings() == NotificationSettings()


@pytest.mark.parametrize(
    "value,expected",
    [("#007AFF", True), ("#ff2d55", True), ("007AFF", False), ("#GGGGGG", False), ("#FFF", False)],
)
def test_is_hex_color(value, expected):
    assert is_hex_color(value) is expected
