"""API models (Pydantic DTOs) for Hearthline."""

from hearthline.api.models.health import HealthResponse
from hearthline.api.models.messaging import (
    ChainVerificationResponse,
    ErrorResponse,
    MediationTipsResponse,
    MessageResponse,
    SendMessageRequest,
    SendMessageResponse,
)

__all__: list[str] = [
    "ChainVerificationResponse",
    "ErrorResponse",
    "HealthResponse",
    "MediationTipsResponse",
    "MessageResponse",
    "SendMessageRequest",
    "SendMessageResponse",
]
