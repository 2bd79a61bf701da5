"""Scripted classifier client for development and testing.

Responses are consumed in order; once the script is exhausted the default
response is repeated. Entries may be ClassifierResponse values, raw text
(wrapped in a response), or exceptions (raised from complete).
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

from hearthline.application.ports.classifier_client import (
    ClassifierClientProtocol,
    ClassifierRequest,
    ClassifierResponse,
)

NOT_HOSTILE_RESPONSE = ClassifierResponse(
    text=json.dumps({"isHostile": False, "indicators": [], "neutralRewrite": ""}),
    input_tokens=120,
    output_tokens=20,
)


class ClassifierClientStub(ClassifierClientProtocol):
    """In-memory classifier that replays a script.

    Attributes:
        requests: Every request received, in order.
    """

    def __init__(
        self,
        default: ClassifierResponse | str | BaseException = NOT_HOSTILE_RESPONSE,
        delay_seconds: float = 0.0,
    ) -> None:
        """Initialize the stub.

        Args:
            default: Answer used once the script is exhausted.
            delay_seconds: Artificial latency per call.
        """
        self._default = default
        self._script: list[ClassifierResponse | str | BaseException] = []
        self._delay_seconds = delay_seconds
        self.requests: list[ClassifierRequest] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def enqueue(self, *entries: ClassifierResponse | str | BaseException) -> None:
        """Append entries to the script."""
        self._script.extend(entries)

    def enqueue_json(self, payload: dict[str, Any], **usage: int) -> None:
        """Append a response whose text is the given JSON object."""
        self._script.append(ClassifierResponse(text=json.dumps(payload), **usage))

    def set_default(self, default: ClassifierResponse | str | BaseException) -> None:
        self._default = default

    def set_delay(self, delay_seconds: float) -> None:
        self._delay_seconds = delay_seconds

    async def complete(self, request: ClassifierRequest) -> ClassifierResponse:
        self.requests.append(request)
        if self._delay_seconds:
            await asyncio.sleep(self._delay_seconds)

        entry = self._script.pop(0) if self._script else self._default
        if isinstance(entry, BaseException):
            raise entry
        if isinstance(entry, str):
            return ClassifierResponse(text=entry)
        return entry
