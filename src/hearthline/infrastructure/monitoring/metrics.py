"""Prometheus metrics for the messaging and moderation pipeline.

Operational metrics only: classifier latency, fallbacks, admission
decisions, token spend, chain appends and HTTP traffic. Message bodies and
identities never appear as label values.

Labels:
- service, environment on every metric
- operation on classifier metrics ("tone_analysis", "mediation_assistant")
"""

import os
import threading
import time

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

# Content type for Prometheus metrics endpoint
METRICS_CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"

_collector_lock = threading.Lock()

# Classifier calls are bounded by the request timeout (default 10s)
DEFAULT_HISTOGRAM_BUCKETS = (0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)


class MetricsCollector:
    """Collects and manages operational Prometheus metrics.

    Attributes:
        moderation_request_duration_seconds: Latency of successful classifier calls.
        errors_total: Classifier failures by source and operation.
        moderation_fallbacks_total: Fallback verdicts by degradation reason.
        moderation_rate_limit_hits_total: Calls refused by the rate limiter.
        moderation_circuit_open: 1 while the breaker is open, else 0.
        moderation_circuit_opened_total: Breaker closed-to-open transitions.
        moderation_tokens_total: Billed tokens by direction (input/output).
        moderation_estimated_cost_usd_total: Estimated classifier spend.
        messages_appended_total: Messages linked and persisted.
        messages_blocked_total: Drafts blocked as hostile.
        http_request_duration_seconds: Histogram for request latency.
        http_requests_total: Counter for all HTTP requests.
        http_requests_failed_total: Counter for failed requests (4xx, 5xx).
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics collector.

        Args:
            registry: Optional custom registry for testing isolation.
        """
        self._registry = registry or CollectorRegistry()
        self.histogram_buckets = DEFAULT_HISTOGRAM_BUCKETS
        self.startup_times: dict[str, float] = {}

        self._environment = os.environ.get("ENVIRONMENT", "development")
        self._service_name = os.environ.get("SERVICE_NAME", "hearthline-api")

        self.uptime_seconds = Gauge(
            name="uptime_seconds",
            documentation="Seconds since service start",
            labelnames=["service", "environment"],
            registry=self._registry,
        )

        # Classifier metrics

        self.moderation_request_duration_seconds = Histogram(
            name="moderation_request_duration_seconds",
            documentation="Duration of successful classifier calls in seconds",
            labelnames=["service", "environment", "operation"],
            buckets=self.histogram_buckets,
            registry=self._registry,
        )

        self.errors_total = Counter(
            name="errors_total",
            documentation="Total errors by source and operation",
            labelnames=["service", "environment", "source", "operation"],
            registry=self._registry,
        )

        self.moderation_fallbacks_total = Counter(
            name="moderation_fallbacks_total",
            documentation="Total fallback verdicts returned instead of a live verdict",
            labelnames=["service", "environment", "operation", "reason"],
            registry=self._registry,
        )

        self.moderation_rate_limit_hits_total = Counter(
            name="moderation_rate_limit_hits_total",
            documentation="Total classifier calls refused by the rate limiter",
            labelnames=["service", "environment"],
            registry=self._registry,
        )

        self.moderation_circuit_open = Gauge(
            name="moderation_circuit_open",
            documentation="1 while the classifier circuit breaker is open",
            labelnames=["service", "environment"],
            registry=self._registry,
        )

        self.moderation_circuit_opened_total = Counter(
            name="moderation_circuit_opened_total",
            documentation="Total times the classifier circuit breaker opened",
            labelnames=["service", "environment"],
            registry=self._registry,
        )

        self.moderation_tokens_total = Counter(
            name="moderation_tokens_total",
            documentation="Total classifier tokens billed",
            labelnames=["service", "environment", "operation", "direction"],
            registry=self._registry,
        )

        self.moderation_estimated_cost_usd_total = Counter(
            name="moderation_estimated_cost_usd_total",
            documentation="Estimated classifier spend in US dollars",
            labelnames=["service", "environment", "operation"],
            registry=self._registry,
        )

        # Message chain metrics

        self.messages_appended_total = Counter(
            name="messages_appended_total",
            documentation="Total messages linked into a thread chain and persisted",
            labelnames=["service", "environment"],
            registry=self._registry,
        )

        self.messages_blocked_total = Counter(
            name="messages_blocked_total",
            documentation="Total drafts blocked as hostile",
            labelnames=["service", "environment"],
            registry=self._registry,
        )

        # HTTP metrics

        self.http_request_duration_seconds = Histogram(
            name="http_request_duration_seconds",
            documentation="HTTP request duration in seconds",
            labelnames=["service", "environment", "method", "endpoint"],
            buckets=self.histogram_buckets,
            registry=self._registry,
        )

        self.http_requests_total = Counter(
            name="http_requests_total",
            documentation="Total HTTP requests",
            labelnames=["service", "environment", "method", "endpoint", "status"],
            registry=self._registry,
        )

        self.http_requests_failed_total = Counter(
            name="http_requests_failed_total",
            documentation="Total failed HTTP requests (4xx, 5xx)",
            labelnames=[
                "service",
                "environment",
                "method",
                "endpoint",
                "status",
                "error_type",
            ],
            registry=self._registry,
        )

    def _base_labels(self) -> dict[str, str]:
        return {"service": self._service_name, "environment": self._environment}

    def observe_moderation_duration(self, operation: str, duration: float) -> None:
        """Record the duration of a successful classifier call.

        Args:
            operation: Classifier operation name.
            duration: Call duration in seconds.
        """
        self.moderation_request_duration_seconds.labels(
            operation=operation, **self._base_labels()
        ).observe(duration)

    def increment_errors(self, source: str, operation: str) -> None:
        """Increment the error counter.

        Args:
            source: Error source (e.g. "classifier").
            operation: Operation that failed.
        """
        self.errors_total.labels(
            source=source, operation=operation, **self._base_labels()
        ).inc()

    def increment_moderation_fallbacks(self, operation: str, reason: str) -> None:
        """Increment the fallback counter for one degradation reason."""
        self.moderation_fallbacks_total.labels(
            operation=operation, reason=reason, **self._base_labels()
        ).inc()

    def increment_rate_limit_hits(self) -> None:
        """Increment the rate limiter refusal counter."""
        self.moderation_rate_limit_hits_total.labels(**self._base_labels()).inc()

    def set_circuit_open(self, is_open: bool) -> None:
        """Set the breaker state gauge.

        Args:
            is_open: Whether the breaker is currently open.
        """
        self.moderation_circuit_open.labels(**self._base_labels()).set(
            1 if is_open else 0
        )

    def increment_circuit_opened(self) -> None:
        """Record a closed-to-open breaker transition."""
        self.moderation_circuit_opened_total.labels(**self._base_labels()).inc()
        self.set_circuit_open(True)

    def record_token_usage(
        self,
        operation: str,
        input_tokens: int,
        output_tokens: int,
        estimated_cost_usd: float,
    ) -> None:
        """Record billed tokens and estimated spend for one classifier call.

        Args:
            operation: Classifier operation name.
            input_tokens: Prompt tokens billed.
            output_tokens: Completion tokens billed.
            estimated_cost_usd: Estimated cost of the call.
        """
        labels = self._base_labels()
        self.moderation_tokens_total.labels(
            operation=operation, direction="input", **labels
        ).inc(input_tokens)
        self.moderation_tokens_total.labels(
            operation=operation, direction="output", **labels
        ).inc(output_tokens)
        self.moderation_estimated_cost_usd_total.labels(
            operation=operation, **labels
        ).inc(estimated_cost_usd)

    def increment_messages_appended(self) -> None:
        """Increment the persisted message counter."""
        self.messages_appended_total.labels(**self._base_labels()).inc()

    def increment_messages_blocked(self) -> None:
        """Increment the blocked draft counter."""
        self.messages_blocked_total.labels(**self._base_labels()).inc()

    def observe_request_duration(
        self, method: str, endpoint: str, duration: float
    ) -> None:
        """Record a request duration observation.

        Args:
            method: HTTP method (GET, POST, etc.).
            endpoint: Request endpoint path.
            duration: Request duration in seconds.
        """
        self.http_request_duration_seconds.labels(
            method=method, endpoint=endpoint, **self._base_labels()
        ).observe(duration)

    def increment_requests(self, method: str, endpoint: str, status: str) -> None:
        """Increment total requests counter."""
        self.http_requests_total.labels(
            method=method, endpoint=endpoint, status=status, **self._base_labels()
        ).inc()

    def increment_failed_requests(
        self, method: str, endpoint: str, status: str, error_type: str = "http_error"
    ) -> None:
        """Increment failed requests counter.

        Args:
            method: HTTP method.
            endpoint: Request endpoint.
            status: HTTP status code as string (4xx or 5xx).
            error_type: client_error or server_error.
        """
        self.http_requests_failed_total.labels(
            method=method,
            endpoint=endpoint,
            status=status,
            error_type=error_type,
            **self._base_labels(),
        ).inc()

    def record_startup(self, service: str) -> None:
        """Record service startup time."""
        self.startup_times[service] = time.time()

    def update_uptime_gauges(self) -> None:
        """Update uptime gauges for all registered services."""
        now = time.time()
        for service, started in self.startup_times.items():
            self.uptime_seconds.labels(
                service=service, environment=self._environment
            ).set(now - started)

    def get_registry(self) -> CollectorRegistry:
        """Get the collector registry."""
        return self._registry


_metrics_collector: MetricsCollector | None = None


def get_metrics_collector() -> MetricsCollector:
    """Get the singleton MetricsCollector instance (thread-safe).

    Uses double-checked locking for lazy initialization.
    """
    global _metrics_collector
    if _metrics_collector is None:
        with _collector_lock:
            if _metrics_collector is None:
                _metrics_collector = MetricsCollector()
    return _metrics_collector


def generate_metrics() -> bytes:
    """Generate Prometheus metrics in exposition format."""
    collector = get_metrics_collector()
    collector.update_uptime_gauges()
    return generate_latest(collector.get_registry())


def reset_metrics_collector() -> None:
    """Reset the singleton collector (for testing only)."""
    global _metrics_collector
    with _collector_lock:
        _metrics_collector = None
