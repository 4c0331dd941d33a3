"""Tests for DocketDriver and its interceptors.

Key behaviors tested:
- Docket pages are fetched, parsed and handed to on_data
- A 404 is "no such case", not an error
- Server errors, timeouts and transport failures propagate
- Interceptors can short-circuit, add headers and log traffic
- Lifecycle hooks fire with the outcome of each docket
"""

import httpx
import pytest

from scotus_dockets.common.example_interceptors import (
    HeaderInterceptor,
    LoggingInterceptor,
    MockInterceptor,
)
from scotus_dockets.common.exceptions import (
    HTMLResponseAssumptionException,
    HTMLStructuralAssumptionException,
    RequestTimeoutException,
)
from scotus_dockets.common.rate_limit_interceptor import RateLimitInterceptor
from scotus_dockets.data_types import DocketKind, DocketRequest, Response
from scotus_dockets.driver.sync_driver import DocketDriver
from tests.docket_parsing.utils import collect_results

DOCKET_URL = "http://www.supremecourt.gov/docketfiles/11a45.htm"


def no_network(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"Unexpected network request to {request.url}")


def offline_client(handler=no_network) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestGetCase:
    """Tests for fetching and parsing a docket."""

    def test_parses_mocked_page(self, docket_page: bytes) -> None:
        """A canned page shall be parsed into a CaseRecord."""
        mock = MockInterceptor({DOCKET_URL: docket_page})
        callback, results = collect_results()
        driver = DocketDriver(
            interceptors=[mock], client=offline_client(), on_data=callback
        )

        case = driver.get_case(2011, 45)

        assert case is not None
        assert case.id == "12A45"
        assert len(case.proceedings) == 5
        assert results == [case]
        assert mock.mock_hits == 1

    def test_not_found_is_none(self) -> None:
        """A 404 shall return None."""
        mock = MockInterceptor({DOCKET_URL: None})
        callback, results = collect_results()
        driver = DocketDriver(
            interceptors=[mock], client=offline_client(), on_data=callback
        )

        assert driver.get_case(2011, 45) is None
        assert results == []

    def test_fetches_over_http(self, docket_page: bytes) -> None:
        """Without interceptors the page shall be fetched with httpx."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, content=docket_page)

        driver = DocketDriver(client=offline_client(handler))
        case = driver.get_case(2011, 45, DocketKind.APPLICATION)

        assert seen == [DOCKET_URL]
        assert case.number == 45

    def test_motion_docket_url(self) -> None:
        """Motion dockets shall be fetched from the motion URL."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(404)

        driver = DocketDriver(client=offline_client(handler))
        assert driver.get_case(2008, 370, DocketKind.MOTION) is None
        assert seen == ["http://www.supremecourt.gov/docketfiles/08m370.htm"]


class TestFailures:
    """Tests for failures that must reach the caller."""

    def test_server_error_raises(self) -> None:
        """A 5xx status shall raise HTMLResponseAssumptionException."""
        driver = DocketDriver(
            client=offline_client(lambda request: httpx.Response(503))
        )
        with pytest.raises(HTMLResponseAssumptionException) as exc_info:
            driver.get_case(2011, 45)
        assert exc_info.value.status_code == 503

    def test_timeout_raises(self) -> None:
        """A timeout shall raise RequestTimeoutException chained to httpx's."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        driver = DocketDriver(client=offline_client(handler))
        with pytest.raises(RequestTimeoutException) as exc_info:
            driver.get_case(2011, 45)
        assert exc_info.value.url == DOCKET_URL
        assert isinstance(exc_info.value.__cause__, httpx.ReadTimeout)

    def test_transport_failure_propagates_unchanged(self) -> None:
        """Other transport failures shall propagate as raised."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        driver = DocketDriver(client=offline_client(handler))
        with pytest.raises(httpx.ConnectError):
            driver.get_case(2011, 45)

    def test_old_terms_are_rejected(self) -> None:
        """Terms before 2003 shall raise ValueError before any request."""
        driver = DocketDriver(client=offline_client())
        with pytest.raises(ValueError):
            driver.get_case(2002, 1)


class TestLifecycleHooks:
    """Tests for on_run_start and on_run_complete."""

    def test_hooks_report_outcomes(self, docket_page: bytes) -> None:
        """Each docket shall report completed, not_found or error."""
        outcomes = []
        started = []
        mock = MockInterceptor(
            {
                DOCKET_URL: docket_page,
                "http://www.supremecourt.gov/docketfiles/11a46.htm": None,
                "http://www.supremecourt.gov/docketfiles/11a47.htm": (
                    b"<html><body><p>Moved</p></body></html>"
                ),
            }
        )
        driver = DocketDriver(
            interceptors=[mock],
            client=offline_client(),
            on_run_start=lambda request: started.append(request.number),
            on_run_complete=lambda request, status, error: outcomes.append(
                (request.number, status, type(error).__name__ if error else None)
            ),
        )

        driver.get_case(2011, 45)
        driver.get_case(2011, 46)
        with pytest.raises(HTMLStructuralAssumptionException):
            driver.get_case(2011, 47)

        assert started == [45, 46, 47]
        assert outcomes == [
            (45, "completed", None),
            (46, "not_found", None),
            (47, "error", "HTMLStructuralAssumptionException"),
        ]


class TestInterceptors:
    """Tests for the interceptor chain."""

    def test_header_interceptor_adds_headers(self, docket_page: bytes) -> None:
        """Headers added by an interceptor shall be sent."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers.get("user-agent"))
            return httpx.Response(200, content=docket_page)

        driver = DocketDriver(
            interceptors=[HeaderInterceptor({"User-Agent": "docket-bot"})],
            client=offline_client(handler),
        )
        driver.get_case(2011, 45)
        assert seen == ["docket-bot"]

    def test_logging_interceptor_sees_short_circuited_responses(
        self, docket_page: bytes
    ) -> None:
        """Response interceptors shall run on short-circuited responses."""
        logger = LoggingInterceptor(prefix="[TEST] ")
        mock = MockInterceptor({DOCKET_URL: docket_page})
        driver = DocketDriver(
            interceptors=[logger, mock], client=offline_client()
        )

        driver.get_case(2011, 45)

        assert logger.request_count == 1
        assert logger.response_count == 1

    def test_short_circuit_skips_later_interceptors(
        self, docket_page: bytes
    ) -> None:
        """Interceptors after a short-circuit shall not see the request."""
        mock = MockInterceptor({DOCKET_URL: docket_page})
        logger = LoggingInterceptor()
        driver = DocketDriver(
            interceptors=[mock, logger], client=offline_client()
        )

        driver.get_case(2011, 45)

        assert logger.request_count == 0
        assert logger.response_count == 1

    def test_mock_misses_pass_through(self) -> None:
        """Requests for unknown URLs shall reach the network."""
        mock = MockInterceptor({})
        driver = DocketDriver(
            interceptors=[mock],
            client=offline_client(lambda request: httpx.Response(404)),
        )
        assert driver.get_case(2011, 45) is None
        assert mock.mock_misses == 1


def too_many_requests(request: DocketRequest) -> Response:
    return Response(
        status_code=429,
        headers={},
        content=b"",
        text="",
        url=request.url,
        request=request,
    )


class TestRateLimitInterceptor:
    """Tests for the docket rate limiter."""

    def test_rejects_rate_below_floor(self) -> None:
        """A rate below min_rate shall raise ValueError."""
        with pytest.raises(ValueError):
            RateLimitInterceptor(requests_per_minute=0.5)

    def test_counts_fetches(self) -> None:
        """Every request shall be counted."""
        limiter = RateLimitInterceptor(requests_per_minute=600)
        request = DocketRequest.for_docket(2011, 45)
        limiter.modify_request(request)
        limiter.modify_request(request)
        assert limiter.get_stats()["fetches"] == 2

    def test_slows_down_on_429(self) -> None:
        """A 429 shall divide the rate by 1 + backoff."""
        limiter = RateLimitInterceptor(requests_per_minute=60, backoff=0.5)
        request = DocketRequest.for_docket(2011, 45)
        limiter.modify_response(too_many_requests(request), request)
        stats = limiter.get_stats()
        assert stats["slowdowns"] == 1
        assert stats["requests_per_minute"] == pytest.approx(40.0)

    def test_never_drops_below_floor(self) -> None:
        """Repeated 429s shall stop at min_rate."""
        limiter = RateLimitInterceptor(requests_per_minute=2, min_rate=1.5)
        request = DocketRequest.for_docket(2011, 45)
        for _ in range(5):
            limiter.modify_response(too_many_requests(request), request)
        assert limiter.get_stats()["requests_per_minute"] == 1.5
        assert limiter.slowdowns == 5

    def test_other_statuses_leave_rate_alone(self) -> None:
        """Only 429 shall slow the limiter down."""
        limiter = RateLimitInterceptor(requests_per_minute=60)
        request = DocketRequest.for_docket(2011, 45)
        response = too_many_requests(request)
        response.status_code = 404
        limiter.modify_response(response, request)
        assert limiter.get_stats()["requests_per_minute"] == 60

    def test_429_is_still_an_error(self) -> None:
        """A 429 shall raise after the rate limiter has seen it."""
        limiter = RateLimitInterceptor(requests_per_minute=600)
        driver = DocketDriver(
            interceptors=[limiter],
            client=offline_client(lambda request: httpx.Response(429)),
        )
        with pytest.raises(HTMLResponseAssumptionException):
            driver.get_case(2011, 45)
        assert limiter.get_stats()["slowdowns"] == 1
