"""Health check response models."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: Health status string (e.g., "healthy").
        moderation_active: Whether the classifier feature flag is on.
        circuit_open: Whether the classifier breaker is short-circuiting.
    """

    status: str
    moderation_active: bool
    circuit_open: bool
