"""Mediation tips route."""

from uuid import UUID

from fastapi import APIRouter, Depends

from hearthline.api.dependencies.messaging import (
    get_current_user_id,
    get_mediation_advisor,
    get_message_repository,
    get_messaging_config,
)
from hearthline.api.models.messaging import MediationTipsResponse
from hearthline.application.ports.message_repository import MessageRepositoryProtocol
from hearthline.application.services.mediation_advisor_service import MediationAdvisor
from hearthline.config.moderation_config import MessagingConfig

router = APIRouter(prefix="/v1", tags=["mediation"])


@router.get(
    "/families/{family_id}/mediation-tips",
    response_model=MediationTipsResponse,
    summary="Get de-escalation tips for a family conversation",
)
async def get_mediation_tips(
    family_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    repository: MessageRepositoryProtocol = Depends(get_message_repository),
    advisor: MediationAdvisor = Depends(get_mediation_advisor),
    config: MessagingConfig = Depends(get_messaging_config),
) -> MediationTipsResponse:
    """Return advice once the family has enough conversation to analyze."""
    messages = await repository.list_by_family(family_id)
    recent = messages[: config.mediation_context_size]
    if len(recent) < config.mediation_min_messages:
        return MediationTipsResponse(eligible=False, message_count=len(recent))

    outcome = await advisor.advise_detailed(str(user_id), recent)
    return MediationTipsResponse(
        eligible=True,
        message_count=len(recent),
        conflict_level=outcome.value.conflict_level.value,
        deescalation_tips=list(outcome.value.deescalation_tips),
        from_fallback=outcome.is_fallback,
    )
