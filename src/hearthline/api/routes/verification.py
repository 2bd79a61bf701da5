"""Thread chain verification route."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request

from hearthline.api.dependencies.messaging import (
    get_chain_verification_service,
    get_current_user_id,
    get_thread_repository,
)
from hearthline.api.models.messaging import ChainVerificationResponse, ErrorResponse
from hearthline.application.ports.message_repository import ThreadRepositoryProtocol
from hearthline.application.services.chain_verification_service import (
    ChainVerificationService,
)

router = APIRouter(prefix="/v1", tags=["verification"])


@router.get(
    "/threads/{thread_id}/verification",
    response_model=ChainVerificationResponse,
    responses={404: {"model": ErrorResponse, "description": "Thread not found"}},
    summary="Verify a thread's message hash chain",
)
async def verify_thread(
    thread_id: UUID,
    request: Request,
    user_id: UUID = Depends(get_current_user_id),
    threads: ThreadRepositoryProtocol = Depends(get_thread_repository),
    service: ChainVerificationService = Depends(get_chain_verification_service),
) -> ChainVerificationResponse:
    """Recompute every hash in the thread and report the first inconsistency."""
    if await threads.get(thread_id) is None:
        raise HTTPException(
            status_code=404,
            detail={
                "type": "urn:hearthline:messages:thread-not-found",
                "title": "Thread Not Found",
                "status": 404,
                "detail": f"Thread {thread_id} not found",
                "instance": str(request.url),
            },
        )

    report = await service.verify_thread(thread_id)
    return ChainVerificationResponse(
        thread_id=report.thread_id,
        verified_at=report.verified_at,
        is_valid=report.is_valid,
        messages_checked=report.messages_checked,
        tamper_detected_at_index=report.tamper_detected_at_index,
        failure_reason=report.failure_reason.value if report.failure_reason else None,
    )
