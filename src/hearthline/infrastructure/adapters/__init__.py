"""Infrastructure adapters for Hearthline.

Adapters implement the ports defined in the application layer,
providing concrete implementations for external services.
"""

from hearthline.infrastructure.adapters.anthropic_classifier_client import (
    AnthropicClassifierClient,
    build_request_body,
    parse_response_body,
)

__all__: list[str] = [
    "AnthropicClassifierClient",
    "build_request_body",
    "parse_response_body",
]
