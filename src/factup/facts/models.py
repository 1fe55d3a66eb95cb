"""Data models for facts, categories and translation languages."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any


class FactCategory(str, Enum):
    """Categories a user can browse."""

    GENERAL = "General"
    RANDOM = "Random"
    INTERESTING = "Interesting"
    SURPRISING = "Surprising"
    ANIMALS = "Animals"
    HISTORY = "History"
    SCIENCE = "Science"

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def is_filtered(self) -> bool:
        """Whether facts for this category are keyword-filtered."""
        return self in (FactCategory.ANIMALS, FactCategory.HISTORY, FactCategory.SCIENCE)


class TranslationLanguage(str, Enum):
    """Languages a fact can be translated into."""

    SPANISH = "es"
    RUSSIAN = "ru"
    SWEDISH = "sv"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def provider_code(self) -> str:
        """Language code sent to the translation endpoint."""
        return self.value

    @property
    def speech_locale(self) -> str:
        """Locale used to pick a text-to-speech voice."""
        return _SPEECH_LOCALES[self]


_DISPLAY_NAMES = {
    TranslationLanguage.SPANISH: "Spanish",
    TranslationLanguage.RUSSIAN: "Russian",
    TranslationLanguage.SWEDISH: "Swedish",
}

_SPEECH_LOCALES = {
    TranslationLanguage.SPANISH: "es-ES",
    TranslationLanguage.RUSSIAN: "ru-RU",
    TranslationLanguage.SWEDISH: "sv-SE",
}


@dataclass(frozen=True, eq=False)
class Fact:
    """A single trivia fact.

    Identity is the text: two facts with the same text are equal no matter
    their category, favorite flag or translation. Facts are never mutated;
    the ``with_*`` helpers return a new value.

    Attributes:
        text: The fact itself, never empty.
        category: Category label (a FactCategory value).
        is_favorite: Whether the user has favorited this fact.
        translated_text: Translation of ``text``, if any.
        translation_language: Language code of ``translated_text``.
    """

    text: str
    category: str = FactCategory.GENERAL.value
    is_favorite: bool = False
    translated_text: str | None = None
    translation_language: str | None = None

    def __post_init__(self) -> None:
        if not self.text or not self.text.strip():
            raise ValueError("Fact text must not be empty")
        if isinstance(self.category, FactCategory):
            object.__setattr__(self, "category", self.category.value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Fact):
            return NotImplemented
        return self.text == other.text

    def __hash__(self) -> int:
        return hash(self.text)

    def with_favorite(self, is_favorite: bool) -> Fact:
        return replace(self, is_favorite=is_favorite)

    def with_category(self, category: FactCategory | str) -> Fact:
        value = category.value if isinstance(category, FactCategory) else category
        return replace(self, category=value)

    def with_translation(self, translated_text: str, language: TranslationLanguage | str) -> Fact:
        code = language.value if isinstance(language, TranslationLanguage) else language
        return replace(self, translated_text=translated_text, translation_language=code)

    def without_translation(self) -> Fact:
        return replace(self, translated_text=None, translation_language=None)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted favorites format."""
        return {
            "text": self.text,
            "category": self.category,
            "isFavorite": self.is_favorite,
            "translatedText": self.translated_text,
            "translationLanguage": self.translation_language,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Fact:
        """Create from the persisted favorites format."""
        text = data.get("text")
        if not isinstance(text, str) or not text.strip():
            raise ValueError("Fact entry is missing 'text'")
        return cls(
            text=text,
            category=str(data.get("category", FactCategory.GENERAL.value)),
            is_favorite=bool(data.get("isFavorite", False)),
            translated_text=data.get("translatedText"),
            translation_language=data.get("translationLanguage"),
        )
