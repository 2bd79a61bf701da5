"""Anthropic Messages API adapter for the classifier port.

Wire format:
    POST {api_url}
    headers: x-api-key, anthropic-version, content-type: application/json
    body: {model, max_tokens, temperature, system,
           messages: [{"role": "user", "content": ...}]}

The first content block of type "text" is the classifier's answer;
usage.input_tokens / usage.output_tokens are read when present.

Exactly one attempt per call, no retries. The overall deadline is enforced
by the moderation gateway; the httpx timeout here only bounds a single
socket operation.
"""

from __future__ import annotations

from typing import Any

import httpx

from hearthline.application.ports.classifier_client import (
    ClassifierClientProtocol,
    ClassifierRequest,
    ClassifierResponse,
)
from hearthline.config.moderation_config import ModerationConfig
from hearthline.domain.errors.moderation import (
    MalformedResponseError,
    TransportFailureError,
)

# Truncation length for error bodies carried in exceptions and logs
ERROR_BODY_LIMIT = 500


def build_request_body(request: ClassifierRequest) -> dict[str, Any]:
    """Render a ClassifierRequest as a Messages API request body."""
    return {
        "model": request.model,
        "max_tokens": request.max_tokens,
        "temperature": request.temperature,
        "system": request.system_prompt,
        "messages": [{"role": "user", "content": request.user_content}],
    }


def parse_response_body(payload: Any) -> ClassifierResponse:
    """Extract the first text block and token usage from a response body.

    Raises:
        MalformedResponseError: No text content in the response.
    """
    if not isinstance(payload, dict):
        raise MalformedResponseError("Classifier response body is not an object")

    text: str | None = None
    content = payload.get("content")
    if isinstance(content, list):
        for block in content:
            if (
                isinstance(block, dict)
                and block.get("type") == "text"
                and isinstance(block.get("text"), str)
            ):
                text = block["text"]
                break
    if not text:
        raise MalformedResponseError("Classifier did not return text content")

    usage = payload.get("usage")
    if not isinstance(usage, dict):
        usage = {}
    input_tokens = usage.get("input_tokens")
    output_tokens = usage.get("output_tokens")
    return ClassifierResponse(
        text=text,
        input_tokens=input_tokens if isinstance(input_tokens, int) else 0,
        output_tokens=output_tokens if isinstance(output_tokens, int) else 0,
    )


class AnthropicClassifierClient(ClassifierClientProtocol):
    """httpx-based classifier client.

    Example:
        async with httpx.AsyncClient() as http:
            client = AnthropicClassifierClient(config, http_client=http)
            response = await client.complete(request)
    """

    def __init__(
        self,
        config: ModerationConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Supplies endpoint, credential, API version and timeout.
            http_client: Shared AsyncClient. When None, a client is opened
                per call.
        """
        self._config = config
        self._http_client = http_client

    def _headers(self) -> dict[str, str]:
        return {
            "content-type": "application/json",
            "x-api-key": self._config.api_key,
            "anthropic-version": self._config.api_version,
        }

    async def complete(self, request: ClassifierRequest) -> ClassifierResponse:
        """Send one request and return the free-text answer.

        Raises:
            TransportFailureError: Network error or non-2xx status.
            MalformedResponseError: 2xx status without usable text content.
        """
        if self._http_client is not None:
            response = await self._post(self._http_client, request)
        else:
            async with httpx.AsyncClient() as client:
                response = await self._post(client, request)

        if not response.is_success:
            raise TransportFailureError(
                f"Classifier request failed ({response.status_code}): "
                f"{response.text[:ERROR_BODY_LIMIT]}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedResponseError("Classifier response body is not JSON") from e
        return parse_response_body(payload)

    async def _post(
        self, client: httpx.AsyncClient, request: ClassifierRequest
    ) -> httpx.Response:
        try:
            return await client.post(
                self._config.api_url,
                json=build_request_body(request),
                headers=self._headers(),
                timeout=self._config.request_timeout_seconds,
            )
        except httpx.HTTPError as e:
            raise TransportFailureError(
                f"Classifier request failed: {type(e).__name__}"
            ) from e
