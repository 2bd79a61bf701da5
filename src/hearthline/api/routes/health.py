"""Health check endpoint for the Hearthline API."""

from fastapi import APIRouter, Depends

from hearthline.api.dependencies.messaging import (
    get_circuit_breaker,
    get_moderation_config,
)
from hearthline.api.models.health import HealthResponse
from hearthline.application.services.circuit_breaker_service import CircuitBreaker
from hearthline.config.moderation_config import ModerationConfig

router = APIRouter(prefix="/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    config: ModerationConfig = Depends(get_moderation_config),
    breaker: CircuitBreaker = Depends(get_circuit_breaker),
) -> HealthResponse:
    """Return health status.

    A degraded classifier does not make the service unhealthy: messages
    still flow under the fail-open policy.
    """
    return HealthResponse(
        status="healthy",
        moderation_active=config.is_active,
        circuit_open=breaker.is_open(),
    )
