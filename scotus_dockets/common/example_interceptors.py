"""Ready-made interceptors.

Useful for debugging a run and for tests that must not touch the network.
"""

import logging
from dataclasses import replace

from scotus_dockets.data_types import DocketRequest, Response

logger = logging.getLogger(__name__)


class LoggingInterceptor:
    """Logs every request and response, leaving both unchanged."""

    def __init__(self, prefix: str = "") -> None:
        self.prefix = prefix
        self.request_count = 0
        self.response_count = 0

    def modify_request(self, request: DocketRequest) -> DocketRequest | Response:
        self.request_count += 1
        logger.info(
            f"{self.prefix}Request #{self.request_count}: GET {request.url}"
        )
        return request

    def modify_response(
        self, response: Response, request: DocketRequest
    ) -> Response:
        self.response_count += 1
        logger.info(
            f"{self.prefix}Response #{self.response_count}: "
            f"{response.status_code} from {response.url}"
        )
        return response


class MockInterceptor:
    """Answers requests for known URLs with canned pages.

    Requests for other URLs pass through to the network.
    """

    def __init__(self, pages: dict[str, bytes | None]) -> None:
        """Initialize the mock interceptor.

        Args:
            pages: Map of URLs to page bodies. A body of None stands for a
                docket that does not exist (HTTP 404).
        """
        self.pages = pages
        self.mock_hits = 0
        self.mock_misses = 0

    def modify_request(self, request: DocketRequest) -> DocketRequest | Response:
        if request.url not in self.pages:
            self.mock_misses += 1
            return request
        self.mock_hits += 1
        body = self.pages[request.url]
        content = body if body is not None else b"Not Found"
        return Response(
            status_code=200 if body is not None else 404,
            headers={"content-type": "text/html"},
            content=content,
            text=content.decode("utf-8", errors="replace"),
            url=request.url,
            request=request,
        )

    def modify_response(
        self, response: Response, request: DocketRequest
    ) -> Response:
        return response


class HeaderInterceptor:
    """Adds fixed headers (e.g. a User-Agent) to every request."""

    def __init__(self, headers: dict[str, str]) -> None:
        self.headers = headers

    def modify_request(self, request: DocketRequest) -> DocketRequest | Response:
        return replace(request, headers={**request.headers, **self.headers})

    def modify_response(
        self, response: Response, request: DocketRequest
    ) -> Response:
        return response
