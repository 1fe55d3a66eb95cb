"""HTTP clients for the remote fact sources."""

from abc import ABC, abstractmethod
from typing import Any
from urllib.parse import urlparse

import httpx

from .errors import DecodingError, InvalidURLError, NetworkError
from .models import Fact, FactCategory

USELESS_FACTS_URL = "https://uselessfacts.jsph.pl/api/v2/facts/random"
API_NINJAS_URL = "https://api.api-ninjas.com/v1/facts"

ALLOWED_SCHEMES = {"http", "https"}


def validate_url(url: str) -> str:
    """Check that ``url`` is an absolute http(s) URL with a hostname."""
    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise InvalidURLError(f"Invalid URL: {e}") from e

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise InvalidURLError(f"Scheme not allowed: {parsed.scheme!r}")
    if not parsed.hostname:
        raise InvalidURLError("URL must have a hostname")
    return url


class FactSource(ABC):
    """A remote endpoint that returns uncategorized facts."""

    def __init__(self, client: httpx.AsyncClient, url: str) -> None:
        self._client = client
        self.url = url

    @property
    @abstractmethod
    def name(self) -> str:
        """Short name used in logs."""
        ...

    @abstractmethod
    def parse(self, payload: Any) -> Fact | None:
        """Turn a decoded JSON payload into a fact.

        Returns None when the payload is well-formed but holds no fact.
        """
        ...

    def headers(self) -> dict[str, str]:
        return {}

    async def fetch(self) -> Fact | None:
        """Fetch one fact.

        Raises:
            InvalidURLError: The endpoint URL is unusable.
            NetworkError: Transport failure or non-200 status.
            DecodingError: The body is not the expected JSON.
        """
        validate_url(self.url)

        try:
            response = await self._client.get(self.url, headers=self.headers())
        except httpx.TimeoutException as e:
            raise NetworkError(f"Request to {self.name} timed out") from e
        except httpx.RequestError as e:
            raise NetworkError(f"Request failed: {e}") from e

        if response.status_code != 200:
            raise NetworkError(f"HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise DecodingError(f"Invalid JSON from {self.name}: {e}") from e

        return self.parse(payload)


class UselessFactsSource(FactSource):
    """Generic source: ``{id, text, source, source_url, language, permalink}``."""

    def __init__(self, client: httpx.AsyncClient, url: str = USELESS_FACTS_URL) -> None:
        super().__init__(client, url)

    @property
    def name(self) -> str:
        return "uselessfacts"

    def parse(self, payload: Any) -> Fact | None:
        if not isinstance(payload, dict):
            raise DecodingError("Expected a JSON object")

        text = payload.get("text")
        if not isinstance(text, str) or not text.strip():
            raise DecodingError("Missing 'text' field")

        return Fact(text=text.strip(), category=FactCategory.GENERAL)


class NinjaFactsSource(FactSource):
    """Keyworded source: ``[{"fact": ...}]`` behind an ``X-Api-Key`` header."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        url: str = API_NINJAS_URL,
    ) -> None:
        super().__init__(client, url)
        self._api_key = api_key

    @property
    def name(self) -> str:
        return "api-ninjas"

    def headers(self) -> dict[str, str]:
        return {"X-Api-Key": self._api_key}

    def parse(self, payload: Any) -> Fact | None:
        if not isinstance(payload, list):
            raise DecodingError("Expected a JSON array")
        if not payload:
            return None

        item = payload[0]
        if not isinstance(item, dict) or not isinstance(item.get("fact"), str):
            raise DecodingError("Missing 'fact' field")
        if not item["fact"].strip():
            return None

        return Fact(text=item["fact"].strip(), category=FactCategory.GENERAL)
