"""Synchronous driver: fetches docket pages and parses them.

The driver owns everything that touches the network. It renders the docket
URL, runs the request through the interceptor chain, performs the GET with
httpx, and hands the page to the parsers. A 404 means the docket does not
exist and is reported as None; every other failure propagates.
"""

import logging
from collections.abc import Callable

import httpx

from scotus_dockets.common.config import DEFAULT_CONFIG, DocketConfig
from scotus_dockets.common.exceptions import (
    HTMLResponseAssumptionException,
    RequestTimeoutException,
)
from scotus_dockets.common.interceptors import SyncInterceptor
from scotus_dockets.common.models import CaseRecord
from scotus_dockets.data_types import DocketKind, DocketRequest, Response
from scotus_dockets.parsers.document import parse
from scotus_dockets.parsers.html import parse_html

logger = logging.getLogger(__name__)


class DocketDriver:
    """Fetches and parses Supreme Court application and motion dockets.

    Example usage:
        driver = DocketDriver(
            interceptors=[RateLimitInterceptor(requests_per_minute=30)]
        )
        case = driver.get_case(2011, 45)
        if case is not None:
            print(case.to_dict())
    """

    def __init__(
        self,
        config: DocketConfig = DEFAULT_CONFIG,
        interceptors: list[SyncInterceptor] | None = None,
        client: httpx.Client | None = None,
        on_data: Callable[[CaseRecord], None] | None = None,
        on_run_start: Callable[[DocketRequest], None] | None = None,
        on_run_complete: Callable[
            [DocketRequest, str, Exception | None], None
        ]
        | None = None,
    ) -> None:
        """Initialize the driver.

        Args:
            config: Roster, date tables and docket URL template.
            interceptors: Interceptors applied in order to requests, and in
                reverse order to responses. Order matters; a mock should
                come before a rate limiter.
            client: httpx client to reuse. One is created if not provided.
            on_data: Optional callback invoked with every parsed CaseRecord.
            on_run_start: Optional callback invoked before each docket is
                fetched.
            on_run_complete: Optional callback invoked after each docket,
                with the status ("completed", "not_found" or "error") and
                the error, if any.
        """
        self.config = config
        self.interceptors = interceptors or []
        self.on_data = on_data
        self.on_run_start = on_run_start
        self.on_run_complete = on_run_complete
        self._client = client or httpx.Client(
            timeout=config.timeout_seconds, follow_redirects=True
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "DocketDriver":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def request_for(
        self,
        term: int,
        number: int,
        kind: DocketKind = DocketKind.APPLICATION,
    ) -> DocketRequest:
        return DocketRequest.for_docket(term, number, kind, self.config)

    def fetch(self, request: DocketRequest) -> Response | None:
        """Fetch a docket page.

        Returns:
            The response, or None if the docket does not exist (HTTP 404).

        Raises:
            HTMLResponseAssumptionException: On any other non-200 status.
            RequestTimeoutException: If the request times out.
            httpx.TransportError: On other network failures, unchanged.
        """
        response = self._resolve(request)

        if response.status_code == 404:
            logger.info(f"No docket at {request.url}")
            return None
        if response.status_code != 200:
            raise HTMLResponseAssumptionException(
                status_code=response.status_code,
                expected_codes=[200, 404],
                url=request.url,
            )
        return response

    def _resolve(self, request: DocketRequest) -> Response:
        modified_request = request
        for interceptor in self.interceptors:
            result = interceptor.modify_request(modified_request)
            if isinstance(result, Response):
                # Short-circuit: skip HTTP and remaining request interceptors
                response = result
                for resp_interceptor in reversed(self.interceptors):
                    response = resp_interceptor.modify_response(
                        response, request
                    )
                return response
            modified_request = result

        try:
            http_response = self._client.get(
                modified_request.url, headers=modified_request.headers
            )
        except httpx.TimeoutException as e:
            raise RequestTimeoutException(
                url=modified_request.url,
                timeout_seconds=self.config.timeout_seconds,
            ) from e

        response = Response(
            status_code=http_response.status_code,
            headers=dict(http_response.headers),
            content=http_response.content,
            text=http_response.text,
            url=modified_request.url,
            request=modified_request,
        )

        for interceptor in reversed(self.interceptors):
            response = interceptor.modify_response(response, request)

        return response

    def get_case(
        self,
        term: int,
        number: int,
        kind: DocketKind = DocketKind.APPLICATION,
    ) -> CaseRecord | None:
        """Fetch and parse one docket.

        Args:
            term: Four digit term year, 2003 or later.
            number: Docket number within the term.
            kind: Application (default) or motion docket.

        Returns:
            The parsed case, or None if the docket does not exist.
        """
        request = self.request_for(term, number, kind)
        if self.on_run_start:
            self.on_run_start(request)

        status = "completed"
        error: Exception | None = None
        try:
            response = self.fetch(request)
            if response is None:
                status = "not_found"
                return None
            case = parse(
                parse_html(response.content, url=response.url),
                config=self.config,
                url=response.url,
            )
            if case is not None and self.on_data:
                self.on_data(case)
            return case
        except Exception as e:
            status = "error"
            error = e
            raise
        finally:
            if self.on_run_complete:
                self.on_run_complete(request, status, error)
