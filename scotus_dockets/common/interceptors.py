"""Hooks around the driver's fetch step."""

from typing import Protocol

from scotus_dockets.data_types import DocketRequest, Response


class SyncInterceptor(Protocol):
    """Something DocketDriver runs each docket request and response through.

    Returning a Response from modify_request answers the request without
    touching the network; later interceptors' modify_request is then skipped.
    Responses pass back through every interceptor, last one first.
    """

    def modify_request(self, request: DocketRequest) -> DocketRequest | Response:
        return request

    def modify_response(
        self, response: Response, request: DocketRequest
    ) -> Response:
        return response
