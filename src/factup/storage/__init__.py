"""Local persistence of user preferences."""

from .preferences import DEFAULT_BACKGROUND_COLOR, PreferencesStore, is_hex_color

__all__ = ["DEFAULT_BACKGROUND_COLOR", "PreferencesStore", "is_hex_color"]
