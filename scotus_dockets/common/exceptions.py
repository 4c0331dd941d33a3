"""Exception hierarchy for docket fetching and parsing.

Two families of errors exist:

- ScraperAssumptionException: the page did not look the way the parser
  assumes docket pages look. Retrying will not help.
- TransientException: the server or network misbehaved. Retrying later may
  succeed.
"""

from typing import Any


class ScraperAssumptionException(Exception):
    """Base class for violated assumptions about a docket page.

    Attributes:
        message: Human readable description of the failure.
        request_url: URL of the page being parsed, if known.
        context: Extra details useful for debugging.
    """

    def __init__(
        self,
        message: str,
        request_url: str = "",
        context: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.request_url = request_url
        self.context = context or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.request_url:
            return f"{self.message} (url: {self.request_url})"
        return self.message


class HTMLStructuralAssumptionException(ScraperAssumptionException):
    """A mandatory element of the page layout is missing."""


class DataFormatAssumptionException(ScraperAssumptionException):
    """A mandatory value is present but cannot be interpreted.

    Raised for proceeding lines that carry no leading date and for date
    triples that do not name a real calendar day.
    """

    def __init__(
        self,
        message: str,
        text: str,
        request_url: str = "",
        context: dict[str, Any] | None = None,
    ) -> None:
        self.text = text
        super().__init__(
            message,
            request_url=request_url,
            context={"text": text, **(context or {})},
        )


class TransientException(Exception):
    """Base class for failures that may succeed on retry."""


class HTMLResponseAssumptionException(TransientException):
    """The server answered with an unexpected status code."""

    def __init__(
        self, status_code: int, expected_codes: list[int], url: str
    ) -> None:
        self.status_code = status_code
        self.expected_codes = expected_codes
        self.url = url
        super().__init__(
            f"Unexpected status {status_code} from {url} "
            f"(expected one of {expected_codes})"
        )


class RequestTimeoutException(TransientException):
    """The server did not answer within the configured timeout."""

    def __init__(self, url: str, timeout_seconds: float) -> None:
        self.url = url
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Request to {url} timed out after {timeout_seconds} seconds"
        )
