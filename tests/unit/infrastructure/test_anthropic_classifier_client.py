"""Unit tests for the Anthropic classifier adapter.

HTTP traffic is served by httpx.MockTransport; no network access.
"""

import json

import httpx
import pytest

from hearthline.application.ports.classifier_client import ClassifierRequest
from hearthline.config.moderation_config import TEST_MODERATION_CONFIG
from hearthline.domain.errors.moderation import (
    MalformedResponseError,
    TransportFailureError,
)
from hearthline.infrastructure.adapters.anthropic_classifier_client import (
    ERROR_BODY_LIMIT,
    AnthropicClassifierClient,
    build_request_body,
    parse_response_body,
)

REQUEST = ClassifierRequest(
    model="claude-3-5-haiku-latest",
    max_tokens=280,
    system_prompt="Respond with one JSON object.",
    user_content="Pickup is at 5pm.",
)


def _client(handler) -> AnthropicClassifierClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return AnthropicClassifierClient(TEST_MODERATION_CONFIG, http_client=http)


class TestBuildRequestBody:
    """Tests for the outbound body shape."""

    def test_body_fields(self) -> None:
        body = build_request_body(REQUEST)

        assert body == {
            "model": "claude-3-5-haiku-latest",
            "max_tokens": 280,
            "temperature": 0.0,
            "system": "Respond with one JSON object.",
            "messages": [{"role": "user", "content": "Pickup is at 5pm."}],
        }


class TestParseResponseBody:
    """Tests for extracting text and usage."""

    def test_first_text_block_wins(self) -> None:
        response = parse_response_body(
            {
                "content": [
                    {"type": "tool_use", "id": "t1"},
                    {"type": "text", "text": "first"},
                    {"type": "text", "text": "second"},
                ],
                "usage": {"input_tokens": 150, "output_tokens": 40},
            }
        )

        assert response.text == "first"
        assert response.input_tokens == 150
        assert response.output_tokens == 40
        assert response.total_tokens == 190

    def test_missing_usage_counts_zero(self) -> None:
        response = parse_response_body({"content": [{"type": "text", "text": "{}"}]})

        assert response.input_tokens == 0
        assert response.output_tokens == 0

    @pytest.mark.parametrize(
        "payload",
        [
            [],
            {},
            {"content": []},
            {"content": [{"type": "text", "text": ""}]},
            {"content": [{"type": "image"}]},
        ],
    )
    def test_no_text_is_malformed(self, payload) -> None:
        with pytest.raises(MalformedResponseError):
            parse_response_body(payload)


class TestAnthropicClassifierClient:
    """Tests for complete() over a mocked transport."""

    async def test_sends_credentials_and_body(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "content": [{"type": "text", "text": '{"isHostile": false}'}],
                    "usage": {"input_tokens": 120, "output_tokens": 20},
                },
            )

        response = await _client(handler).complete(REQUEST)

        assert response.text == '{"isHostile": false}'
        assert response.total_tokens == 140
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == TEST_MODERATION_CONFIG.api_url
        assert request.headers["x-api-key"] == "test-key"
        assert request.headers["anthropic-version"] == TEST_MODERATION_CONFIG.api_version
        assert json.loads(request.content) == build_request_body(REQUEST)

    async def test_non_success_status_is_transport_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(529, text="x" * 2000)

        with pytest.raises(TransportFailureError) as exc_info:
            await _client(handler).complete(REQUEST)

        assert exc_info.value.status_code == 529
        message = str(exc_info.value)
        assert "x" * ERROR_BODY_LIMIT in message
        assert "x" * (ERROR_BODY_LIMIT + 1) not in message

    async def test_connection_error_is_transport_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransportFailureError) as exc_info:
            await _client(handler).complete(REQUEST)

        assert exc_info.value.status_code is None
        assert "ConnectError" in str(exc_info.value)

    async def test_timeout_is_transport_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(TransportFailureError):
            await _client(handler).complete(REQUEST)

    async def test_non_json_body_is_malformed(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>gateway</html>")

        with pytest.raises(MalformedResponseError):
            await _client(handler).complete(REQUEST)

    async def test_success_without_text_is_malformed(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"content": [], "usage": {}})

        with pytest.raises(MalformedResponseError):
            await _client(handler).complete(REQUEST)
