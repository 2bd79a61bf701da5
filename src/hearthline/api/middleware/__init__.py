"""API middleware components."""

from hearthline.api.middleware.logging_middleware import LoggingMiddleware
from hearthline.api.middleware.metrics_middleware import MetricsMiddleware

__all__: list[str] = [
    "LoggingMiddleware",
    "MetricsMiddleware",
]
