"""Translation of facts into supported languages."""

from .translator import (
    TranslationError,
    Translator,
    fallback_translation,
    parse_translation,
)

__all__ = ["TranslationError", "Translator", "fallback_translation", "parse_translation"]
