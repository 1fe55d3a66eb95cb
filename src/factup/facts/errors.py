"""Errors raised while fetching facts."""


class FactAPIError(Exception):
    """Base error for the fact sources."""


class InvalidURLError(FactAPIError):
    """The configured endpoint is not a usable http(s) URL."""


class NetworkError(FactAPIError):
    """Transport failure or non-200 response."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class DecodingError(FactAPIError):
    """The response body did not match the expected payload."""


class CategoryNotFoundError(FactAPIError):
    """No fetch pipeline exists for the requested category."""
