"""Data types shared by the fetcher and the parsers.

- DocketKind / DocketRequest describe which docket page to fetch.
- Response is what the driver (or an interceptor) hands back for a request.
- ParsedDate / UnparseableDate are the tagged result of the two-stage
  date parse used for header metadata.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from scotus_dockets.common.config import DEFAULT_CONFIG, DocketConfig


class DocketKind(Enum):
    """Which of the two docket series a number belongs to."""

    APPLICATION = "a"
    MOTION = "m"


@dataclass(frozen=True)
class DocketRequest:
    """A request for one docket page.

    Use DocketRequest.for_docket() to build one from a term and number; it
    validates the term and renders the URL from the configured template.

    Attributes:
        term: Four digit term year, e.g. 2011.
        number: Docket number within the term and series.
        kind: Application or motion series.
        url: Absolute URL of the docket page.
        headers: Extra HTTP headers to send.
    """

    term: int
    number: int
    kind: DocketKind
    url: str
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def for_docket(
        cls,
        term: int,
        number: int,
        kind: DocketKind = DocketKind.APPLICATION,
        config: DocketConfig = DEFAULT_CONFIG,
    ) -> DocketRequest:
        """Build the request for a docket.

        Raises:
            ValueError: If the term predates the published dockets.
        """
        if term < config.oldest_term:
            raise ValueError(
                f"Only available since {config.oldest_term} term, got {term}"
            )
        url = config.docket_url.format(
            term=str(term)[-2:], kind=kind.value, number=number
        )
        return cls(term=term, number=number, kind=kind, url=url)


@dataclass
class Response:
    """HTTP response for a docket page.

    Modeled after httpx.Response to provide a familiar interface.

    Attributes:
        status_code: HTTP status code (200, 404, etc.).
        headers: Response headers.
        content: Raw response bytes.
        text: Decoded response text.
        url: URL that was fetched.
        request: The DocketRequest that triggered this response.
    """

    status_code: int
    headers: dict[str, str]
    content: bytes
    text: str
    url: str
    request: DocketRequest


@dataclass(frozen=True)
class ParsedDate:
    """A date string that was understood."""

    value: date
    __match_args__ = ("value",)


@dataclass(frozen=True)
class UnparseableDate:
    """A date string that matched none of the accepted formats."""

    raw: str
    __match_args__ = ("raw",)


DateParseResult = ParsedDate | UnparseableDate
