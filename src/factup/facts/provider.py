"""Category-aware fact fetching over the two remote sources."""

from __future__ import annotations

import logging
from collections import deque
from typing import Iterator

import httpx

from .errors import CategoryNotFoundError, FactAPIError, NetworkError
from .models import Fact, FactCategory
from .sources import FactSource, NinjaFactsSource, UselessFactsSource

logger = logging.getLogger(__name__)

GENERIC_ATTEMPTS = 15
KEYWORDED_ATTEMPTS = 5
RECENT_FACTS_CAPACITY = 50

CATEGORY_KEYWORDS: dict[FactCategory, tuple[str, ...]] = {
    FactCategory.ANIMALS: (
        "animal", "dog", "cat", "bird", "fish", "pet", "wildlife", "species",
        "creature", "zoo", "mammal", "reptile", "insect", "bear", "lion", "tiger",
        "elephant", "monkey", "ape", "gorilla", "whale", "dolphin", "shark", "octopus",
        "squid", "snake", "lizard", "frog", "toad", "horse", "cow", "pig", "sheep",
        "goat", "chicken", "duck", "goose", "bee", "ant", "spider", "butterfly",
    ),
    FactCategory.HISTORY: (
        "history", "ancient", "century", "year", "war", "king", "queen", "president",
        "empire", "civilization", "dynasty", "ruler", "throne", "kingdom", "revolution",
        "medieval", "renaissance", "prehistoric", "artifact", "archaeology", "historical",
        "bc", "ad", "bce", "ce", "era", "period", "age", "decade", "millennium", "castle",
        "palace", "monument", "ruins", "heritage", "ancestor", "descendant",
        "conquest", "explorer", "discovery", "expedition", "colony", "settlement",
    ),
    FactCategory.SCIENCE: (
        "science", "physics", "chemistry", "biology", "space", "planet", "atom", "research",
        "scientist", "laboratory", "experiment", "theory", "hypothesis", "discovery",
        "invention", "technology", "innovation", "engineering", "quantum", "molecular",
        "cell", "dna", "rna", "gene", "genome", "protein", "enzyme", "bacteria", "virus",
        "solar", "lunar", "stellar", "cosmic", "galaxy", "universe", "astronomy", "telescope",
        "microscope", "element", "compound", "reaction", "molecule", "particle", "electron",
        "proton", "neutron", "isotope", "radiation", "energy", "force", "gravity", "magnetic",
        "electric", "current", "voltage", "frequency", "wavelength", "spectrum",
    ),
}


def parse_category(name: str) -> FactCategory:
    """Look up a category by name, case-insensitively.

    Raises:
        CategoryNotFoundError: No category has that name.
    """
    wanted = name.strip().lower()
    for category in FactCategory:
        if category.value.lower() == wanted:
            return category
    raise CategoryNotFoundError(f"Unknown category: {name!r}")


def matches_keywords(text: str, keywords: tuple[str, ...]) -> bool:
    """Case-insensitive substring test; any keyword is enough."""
    lowered = text.lower()
    return any(keyword in lowered for keyword in keywords)


class RecentFacts:
    """Bounded FIFO of recently returned fact texts, newest first."""

    def __init__(self, capacity: int = RECENT_FACTS_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._texts: deque[str] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        assert self._texts.maxlen is not None
        return self._texts.maxlen

    def add(self, text: str) -> None:
        self._texts.appendleft(text)

    def contains(self, text: str) -> bool:
        return text in self._texts

    def __len__(self) -> int:
        return len(self._texts)

    def __iter__(self) -> Iterator[str]:
        return iter(self._texts)


class FactProvider:
    """Fetches facts for a category from a generic and a keyworded source.

    Unfiltered categories take one fact from the keyworded source and fall
    back to the generic one. Filtered categories (Animals, History, Science)
    test up to ``generic_attempts`` generic facts and then up to
    ``keyworded_attempts`` keyworded facts against the category keywords. If
    nothing matches, the last fetched fact is returned relabelled, so a call
    never makes more than ``generic_attempts + keyworded_attempts`` requests.
    """

    def __init__(
        self,
        generic: FactSource,
        keyworded: FactSource,
        recent: RecentFacts | None = None,
        generic_attempts: int = GENERIC_ATTEMPTS,
        keyworded_attempts: int = KEYWORDED_ATTEMPTS,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.generic = generic
        self.keyworded = keyworded
        self.recent = recent or RecentFacts()
        self.generic_attempts = generic_attempts
        self.keyworded_attempts = keyworded_attempts
        self._client = client

    @classmethod
    def create(cls, api_key: str, timeout: float = 10.0) -> FactProvider:
        """Build a provider with its own HTTP client for the public endpoints."""
        client = httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        return cls(
            generic=UselessFactsSource(client),
            keyworded=NinjaFactsSource(client, api_key=api_key),
            client=client,
        )

    async def aclose(self) -> None:
        """Close the HTTP client if this provider owns one."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> FactProvider:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _fetch_from(self, source: FactSource) -> Fact | None:
        fact = await source.fetch()
        if fact is not None:
            self.recent.add(fact.text)
        return fact

    async def fetch_by_category(self, category: FactCategory | str) -> Fact:
        """Fetch one fact labelled with ``category``.

        Unknown category names are served from the generic source.

        Raises:
            FactAPIError: Every permitted request failed.
        """
        if not isinstance(category, FactCategory):
            try:
                category = parse_category(category)
            except CategoryNotFoundError:
                logger.warning("Unknown category %r, using generic source", category)
                fact = await self._fetch_from(self.generic)
                if fact is None:
                    raise NetworkError("Generic source returned no fact")
                return fact

        if category.is_filtered:
            return await self._fetch_filtered(category)
        return await self._fetch_unfiltered(category)

    async def _fetch_unfiltered(self, category: FactCategory) -> Fact:
        fact: Fact | None = None
        try:
            fact = await self._fetch_from(self.keyworded)
        except FactAPIError as e:
            logger.warning("%s failed, falling back to %s: %s", self.keyworded.name, self.generic.name, e)

        if fact is None:
            fact = await self._fetch_from(self.generic)
        if fact is None:
            raise NetworkError("No fact returned by either source")

        return fact.with_category(category)

    async def _fetch_filtered(self, category: FactCategory) -> Fact:
        keywords = CATEGORY_KEYWORDS[category]
        last_fact: Fact | None = None
        last_error: FactAPIError | None = None

        for source, attempts in (
            (self.generic, self.generic_attempts),
            (self.keyworded, self.keyworded_attempts),
        ):
            for attempt in range(attempts):
                try:
                    fact = await self._fetch_from(source)
                except FactAPIError as e:
                    logger.debug("%s attempt %d failed: %s", source.name, attempt + 1, e)
                    last_error = e
                    continue

                if fact is None:
                    continue
                last_fact = fact
                if matches_keywords(fact.text, keywords):
                    return fact.with_category(category)

        if last_fact is not None:
            logger.info("No %s match found, relabelling an unmatched fact", category.value)
            return last_fact.with_category(category)

        if last_error is not None:
            raise last_error
        raise NetworkError("No fact returned by either source")
