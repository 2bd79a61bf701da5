"""Metrics middleware recording HTTP request metrics to Prometheus."""

import time
from collections.abc import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Match

from hearthline.infrastructure.monitoring.metrics import get_metrics_collector


def _classify_error_type(status_code: int) -> str:
    """Classify an HTTP error status code."""
    if status_code == 401:
        return "unauthorized"
    if status_code == 404:
        return "not_found"
    if status_code == 422:
        return "unprocessable"
    if 400 <= status_code < 500:
        return "client_error"
    if status_code == 500:
        return "internal_error"
    if status_code >= 500:
        return "server_error"
    return "unknown"


def _endpoint_label(request: Request) -> str:
    """Route template (e.g. /v1/families/{family_id}/messages), not the raw path.

    Raw paths embed family and thread ids and would explode label cardinality.
    """
    for route in request.app.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return getattr(route, "path", request.url.path)
    return "unmatched"


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to record HTTP request metrics.

    Records:
    - Request duration (histogram)
    - Total requests (counter)
    - Failed requests (counter for 4xx/5xx)
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        method = request.method
        endpoint = _endpoint_label(request)
        status = str(response.status_code)

        collector = get_metrics_collector()
        collector.observe_request_duration(
            method=method, endpoint=endpoint, duration=duration
        )
        collector.increment_requests(method=method, endpoint=endpoint, status=status)
        if response.status_code >= 400:
            collector.increment_failed_requests(
                method=method,
                endpoint=endpoint,
                status=status,
                error_type=_classify_error_type(response.status_code),
            )
        return response
