"""Fact models, sources and the category-aware provider."""

from .errors import (
    CategoryNotFoundError,
    DecodingError,
    FactAPIError,
    InvalidURLError,
    NetworkError,
)
from .models import Fact, FactCategory, TranslationLanguage
from .provider import FactProvider, RecentFacts, matches_keywords, parse_category
from .sources import FactSource, NinjaFactsSource, UselessFactsSource

__all__ = [
    "CategoryNotFoundError",
    "DecodingError",
    "Fact",
    "FactAPIError",
    "FactCategory",
    "FactProvider",
    "FactSource",
    "InvalidURLError",
    "NetworkError",
    "NinjaFactsSource",
    "RecentFacts",
    "TranslationLanguage",
    "UselessFactsSource",
    "matches_keywords",
    "parse_category",
]
