"""Tests for the remote fact sources."""

import httpx
import pytest

from factup.facts import (
    DecodingError,
    FactCategory,
    InvalidURLError,
    NetworkError,
    NinjaFactsSource,
    UselessFactsSource,
)
from factup.facts.sources import validate_url


def make_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


USELESS_PAYLOAD = {
    "id": "abc123",
    "text": "Bananas are berries, but strawberries are not.",
    "source": "djtech.net",
    "source_url": "http://www.djtech.net/humor/useless_facts.htm",
    "language": "en",
    "permalink": "https://uselessfacts.jsph.pl/api/v2/facts/abc123",
}


class TestValidateUrl:
    def test_https_allowed(self):
        assert validate_url("https://example.com/api") == "https://example.com/api"

    def test_file_scheme_blocked(self):
        with pytest.raises(InvalidURLError, match="Scheme"):
            validate_url("file:///etc/passwd")

    def test_no_hostname(self):
        with pytest.raises(InvalidURLError, match="hostname"):
            validate_url("http:///path")


@pytest.mark.asyncio
class TestUselessFactsSource:
    async def test_parses_text(self):
        async with make_client(lambda request: httpx.Response(200, json=USELESS_PAYLOAD)) as client:
            fact = await UselessFactsSource(client).fetch()

        assert fact is not None
        assert fact.text == USELESS_PAYLOAD["text"]
        assert fact.category == FactCategory.GENERAL.value

    async def test_non_200_is_network_error(self):
        async with make_client(lambda request: httpx.Response(503)) as client:
            with pytest.raises(NetworkError, match="HTTP 503"):
                await UselessFactsSource(client).fetch()

    async def test_transport_failure_is_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with make_client(handler) as client:
            with pytest.raises(NetworkError) as excinfo:
                await UselessFactsSource(client).fetch()

        assert "connection refused" in excinfo.value.detail

    async def test_invalid_json_is_decoding_error(self):
        async with make_client(lambda request: httpx.Response(200, text="<html>")) as client:
            with pytest.raises(DecodingError):
                await UselessFactsSource(client).fetch()

    async def test_missing_text_is_decoding_error(self):
        async with make_client(lambda request: httpx.Response(200, json={"id": "x"})) as client:
            with pytest.raises(DecodingError):
                await UselessFactsSource(client).fetch()

    async def test_invalid_url(self):
        async with make_client(lambda request: httpx.Response(200, json=USELESS_PAYLOAD)) as client:
            with pytest.raises(InvalidURLError):
                await UselessFactsSource(client, url="ftp://facts.example").fetch()


@pytest.mark.asyncio
class TestNinjaFactsSource:
    async def test_sends_api_key_and_parses_first_fact(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["key"] = request.headers.get("X-Api-Key")
            return httpx.Response(200, json=[{"fact": "Octopuses have three hearts."}])

        async with make_client(handler) as client:
            fact = await NinjaFactsSource(client, api_key="secret").fetch()

        assert seen["key"] == "secret"
        assert fact is not None
        assert fact.text == "Octopuses have three hearts."

    async def test_empty_array_returns_none(self):
        async with make_client(lambda request: httpx.Response(200, json=[])) as client:
            assert await NinjaFactsSource(client, api_key="k").fetch() is None

    async def test_object_payload_is_decoding_error(self):
        async with make_client(lambda request: httpx.Response(200, json={"fact": "x"})) as client:
            with pytest.raises(DecodingError):
                await NinjaFactsSource(client, api_key="k").fetch()

    async def test_unauthorized(self):
        async with make_client(lambda request: httpx.Response(401)) as client:
            with pytest.raises(NetworkError, match="HTTP 401"):
                await NinjaFactsSource(client, api_key="bad").fetch()
