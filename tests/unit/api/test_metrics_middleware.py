"""Unit tests for the metrics and logging middleware.

Tests for FastAPI middleware that records request metrics and propagates
correlation IDs.
"""

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from hearthline.api.middleware.logging_middleware import (
    CORRELATION_HEADER,
    LoggingMiddleware,
)
from hearthline.api.middleware.metrics_middleware import (
    MetricsMiddleware,
    _classify_error_type,
)
from tests.helpers import metric_value


@pytest.fixture
def app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(LoggingMiddleware)

    @app.get("/v1/threads/{thread_id}/verification")
    async def verification_endpoint(thread_id: str) -> dict[str, str]:
        return {"thread_id": thread_id}

    @app.get("/v1/unavailable")
    async def unavailable_endpoint() -> None:
        raise HTTPException(status_code=503, detail="Service unavailable")

    return app


class TestMetricsMiddleware:
    """Tests for MetricsMiddleware class."""

    def test_endpoint_label_is_route_template(self, app: FastAPI) -> None:
        client = TestClient(app)

        for thread_id in ("a1", "b2", "c3"):
            assert client.get(f"/v1/threads/{thread_id}/verification").status_code == 200

        assert (
            metric_value(
                "http_requests_total",
                method="GET",
                endpoint="/v1/threads/{thread_id}/verification",
                status="200",
            )
            == 3.0
        )
        assert metric_value("http_requests_total", endpoint="/v1/threads/a1/verification") == 0.0

    def test_failed_counter_for_errors(self, app: FastAPI) -> None:
        client = TestClient(app)

        for _ in range(2):
            assert client.get("/v1/unavailable").status_code == 503

        assert (
            metric_value(
                "http_requests_failed_total",
                endpoint="/v1/unavailable",
                error_type="server_error",
            )
            == 2.0
        )

    def test_unknown_path_is_unmatched(self, app: FastAPI) -> None:
        client = TestClient(app)

        assert client.get("/v1/nowhere/12345").status_code == 404

        assert (
            metric_value(
                "http_requests_failed_total", endpoint="unmatched", error_type="not_found"
            )
            == 1.0
        )

    def test_duration_observed(self, app: FastAPI) -> None:
        TestClient(app).get("/v1/threads/x/verification")

        assert (
            metric_value(
                "http_request_duration_seconds_count",
                endpoint="/v1/threads/{thread_id}/verification",
            )
            == 1.0
        )


class TestLoggingMiddleware:
    """Tests for correlation ID propagation."""

    def test_incoming_correlation_id_echoed(self, app: FastAPI) -> None:
        response = TestClient(app).get(
            "/v1/threads/x/verification", headers={CORRELATION_HEADER: "corr-abc"}
        )

        assert response.headers[CORRELATION_HEADER] == "corr-abc"

    def test_correlation_id_generated_when_absent(self, app: FastAPI) -> None:
        first = TestClient(app).get("/v1/threads/x/verification")
        second = TestClient(app).get("/v1/threads/x/verification")

        assert first.headers[CORRELATION_HEADER]
        assert first.headers[CORRELATION_HEADER] != second.headers[CORRELATION_HEADER]

    def test_request_logged_without_body(self, app: FastAPI) -> None:
        from structlog.testing import capture_logs

        with capture_logs() as logs:
            TestClient(app).get("/v1/threads/x/verification")

        events = [entry["event"] for entry in logs]
        assert events == ["request_started", "request_completed"]
        assert logs[1]["status_code"] == 200
        assert "body" not in logs[1]


class TestErrorTypeClassifier:
    """Tests for _classify_error_type function."""

    def test_classify_named_codes(self) -> None:
        assert _classify_error_type(401) == "unauthorized"
        assert _classify_error_type(404) == "not_found"
        assert _classify_error_type(422) == "unprocessable"
        assert _classify_error_type(500) == "internal_error"

    def test_classify_other_4xx_as_client_error(self) -> None:
        assert _classify_error_type(400) == "client_error"
        assert _classify_error_type(429) == "client_error"

    def test_classify_other_5xx_as_server_error(self) -> None:
        assert _classify_error_type(503) == "server_error"

    def test_classify_success_as_unknown(self) -> None:
        assert _classify_error_type(201) == "unknown"
