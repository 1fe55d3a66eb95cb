"""Fact translation through the public Google Translate endpoint."""

import logging
from typing import Any

import httpx

from ..facts.models import TranslationLanguage

logger = logging.getLogger(__name__)

TRANSLATE_URL = "https://translate.googleapis.com/translate_a/single"


class TranslationError(Exception):
    """The translation endpoint failed or returned something unusable."""


def fallback_translation(text: str, language: TranslationLanguage) -> str:
    """Deterministic stand-in used when the endpoint cannot be reached."""
    return f"[{language.provider_code.upper()}] {text}"


def parse_translation(payload: Any) -> str:
    """Concatenate the translated segments of a ``translate_a/single`` response.

    The payload is a nested array whose first element lists
    ``[translated, original, ...]`` tuples.
    """
    if not isinstance(payload, list) or not payload or not isinstance(payload[0], list):
        raise TranslationError("Unexpected translation payload")

    parts = []
    for item in payload[0]:
        if isinstance(item, list) and item and isinstance(item[0], str):
            parts.append(item[0])

    translated = "".join(parts)
    if not translated:
        raise TranslationError("Translation payload had no segments")
    return translated


class Translator:
    """Translates text, never raising to the caller."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        url: str = TRANSLATE_URL,
        timeout: float = 10.0,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._url = url
        self._timeout = timeout

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def request_translation(self, text: str, language: TranslationLanguage) -> str:
        """Call the endpoint.

        Raises:
            TranslationError: Unencodable text, transport failure, non-200
                status or bad payload.
        """
        params = {
            "client": "gtx",
            "sl": "auto",
            "tl": language.provider_code,
            "dt": "t",
            "q": text,
        }
        try:
            response = await self._get_client().get(
                self._url,
                params=params,
                headers={"User-Agent": "Mozilla/5.0"},
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TranslationError(f"Request failed: {e}") from e
        except UnicodeError as e:
            # Lone surrogates cannot be percent-encoded into the query.
            raise TranslationError(f"Cannot encode text: {e}") from e

        if response.status_code != 200:
            raise TranslationError(f"HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise TranslationError(f"Invalid JSON: {e}") from e

        return parse_translation(payload)

    async def translate(self, text: str, language: TranslationLanguage) -> str:
        """Translate ``text``, or return :func:`fallback_translation` on any failure."""
        try:
            return await self.request_translation(text, language)
        except TranslationError as e:
            logger.warning("Translation to %s failed: %s", language.value, e)
            return fallback_translation(text, language)
