"""Observability infrastructure for structured logging and correlation.

- Structured JSON logging with structlog
- Correlation ID management for request tracing
- Sensitive-data scrubbing of every log entry

Usage:
    from hearthline.infrastructure.observability import (
        configure_structlog,
        get_correlation_id,
        set_correlation_id,
    )

    # At startup
    configure_structlog(environment="production")

    # In request handling
    set_correlation_id(request_correlation_id)
"""

from hearthline.infrastructure.observability.correlation import (
    correlation_id_processor,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from hearthline.infrastructure.observability.logging import configure_structlog
from hearthline.infrastructure.observability.sanitizer import sanitize_event_processor

__all__: list[str] = [
    "configure_structlog",
    "correlation_id_processor",
    "generate_correlation_id",
    "get_correlation_id",
    "sanitize_event_processor",
    "set_correlation_id",
]
