"""Throttling for docket fetches.

The Court's site answers 429 when a crawl walks the docket numbers too
quickly. RateLimitInterceptor spaces requests out with pyrate_limiter and
backs off further each time it sees a 429.
"""

import logging
import time
from threading import Lock
from urllib.parse import urlsplit

from pyrate_limiter import Duration, Limiter, Rate

from scotus_dockets.data_types import DocketRequest, Response

logger = logging.getLogger(__name__)


class RateLimitInterceptor:
    """Limits docket fetches to a number of requests per minute.

    Each 429 divides the rate by ``1 + backoff``, but never below
    ``min_rate``. Requests are counted against the docket host.

    Example:
        driver = DocketDriver(
            interceptors=[RateLimitInterceptor(requests_per_minute=30)]
        )
    """

    def __init__(
        self,
        requests_per_minute: float = 30.0,
        backoff: float = 0.10,
        min_rate: float = 1.0,
    ) -> None:
        if requests_per_minute < min_rate:
            raise ValueError(
                f"requests_per_minute must be at least {min_rate}, "
                f"got {requests_per_minute}"
            )
        self.requests_per_minute = requests_per_minute
        self.backoff = backoff
        self.min_rate = min_rate
        self.fetches = 0
        self.slowdowns = 0
        self.seconds_waited = 0.0
        self._lock = Lock()
        self._limiter = self._limiter_for(requests_per_minute)

    @staticmethod
    def _limiter_for(requests_per_minute: float) -> Limiter:
        # Limiter sleeps up to max_delay instead of raising
        rate = Rate(max(1, int(requests_per_minute)), Duration.MINUTE)
        return Limiter(rate, max_delay=Duration.HOUR)

    def modify_request(self, request: DocketRequest) -> DocketRequest | Response:
        started = time.monotonic()
        with self._lock:
            self._limiter.try_acquire(urlsplit(request.url).netloc)
            self.fetches += 1
        self.seconds_waited += time.monotonic() - started
        return request

    def modify_response(
        self, response: Response, request: DocketRequest
    ) -> Response:
        if response.status_code == 429:
            self._slow_down(request)
        return response

    def _slow_down(self, request: DocketRequest) -> None:
        with self._lock:
            previous = self.requests_per_minute
            self.requests_per_minute = max(
                self.min_rate, previous / (1.0 + self.backoff)
            )
            self._limiter = self._limiter_for(self.requests_per_minute)
            self.slowdowns += 1

        logger.warning(
            f"429 on docket {request.term} {request.kind.value}{request.number}, "
            f"slowing from {previous:.1f} to "
            f"{self.requests_per_minute:.1f} requests per minute",
            extra={"url": request.url},
        )

    def get_stats(self) -> dict[str, int | float]:
        with self._lock:
            return {
                "fetches": self.fetches,
                "slowdowns": self.slowdowns,
                "seconds_waited": self.seconds_waited,
                "requests_per_minute": self.requests_per_minute,
            }
