"""Classifier client port for the remote safety classifier.

The classifier is consumed as an opaque JSON-over-HTTP service. One
request carries a model identifier, a bounded output size, temperature
pinned to 0, a system instruction and user content. The response body
contains, as free text, the JSON object the system instruction asked for.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class ClassifierRequest:
    """One classifier call.

    Attributes:
        model: Model identifier.
        max_tokens: Output bound.
        system_prompt: Instruction mandating a single JSON object response.
        user_content: Already-redacted user content.
        temperature: Sampling temperature (pinned to 0 for determinism).
    """

    model: str
    max_tokens: int
    system_prompt: str
    user_content: str
    temperature: float = 0.0


@dataclass(frozen=True)
class ClassifierResponse:
    """Free-text classifier answer plus usage accounting.

    Attributes:
        text: First text block of the response.
        input_tokens: Prompt tokens billed (0 if not reported).
        output_tokens: Completion tokens billed (0 if not reported).
    """

    text: str
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


@runtime_checkable
class ClassifierClientProtocol(Protocol):
    """Protocol for issuing one classifier call.

    Implementations make exactly one attempt and never retry.

    Raises (from complete):
        TransportFailureError: Network failure or non-success status.
        MalformedResponseError: Success status but no usable text block.
    """

    async def complete(self, request: ClassifierRequest) -> ClassifierResponse:
        """Send one request and return the free-text answer."""
        ...
