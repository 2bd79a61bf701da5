"""Message submission route.

Status codes:
- 201: message screened, linked and persisted
- 200: message blocked as hostile; draft and rewrite returned
- 422: draft rejected (empty, too long, or screening unavailable under
  fail-closed); draft returned
- 404: explicit thread unknown for this family
- 500: the linked message could not be persisted
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse

from hearthline.api.dependencies.messaging import (
    get_current_user_id,
    get_submission_workflow,
)
from hearthline.api.models.messaging import (
    ErrorResponse,
    SendMessageRequest,
    SendMessageResponse,
)
from hearthline.application.services.message_submission_service import (
    MessageSubmissionWorkflow,
)
from hearthline.domain.errors.chain import ChainPersistenceError
from hearthline.domain.errors.submission import ThreadNotFoundError
from hearthline.domain.models.submission import SubmissionStatus

router = APIRouter(prefix="/v1", tags=["messages"])


@router.post(
    "/families/{family_id}/messages",
    response_model=SendMessageResponse,
    status_code=201,
    responses={
        200: {"model": SendMessageResponse, "description": "Message blocked as hostile"},
        404: {"model": ErrorResponse, "description": "Thread not found"},
        422: {"model": SendMessageResponse, "description": "Draft rejected"},
        500: {"model": ErrorResponse, "description": "Message could not be stored"},
    },
    summary="Send a family message",
)
async def send_message(
    family_id: UUID,
    request_data: SendMessageRequest,
    request: Request,
    response: Response,
    user_id: UUID = Depends(get_current_user_id),
    workflow: MessageSubmissionWorkflow = Depends(get_submission_workflow),
) -> SendMessageResponse | JSONResponse:
    """Screen, link and store one message."""
    try:
        outcome = await workflow.submit(
            family_id=family_id,
            sender_id=user_id,
            body=request_data.body,
            thread_id=request_data.thread_id,
        )
    except ThreadNotFoundError as e:
        raise HTTPException(
            status_code=404,
            detail={
                "type": "urn:hearthline:messages:thread-not-found",
                "title": "Thread Not Found",
                "status": 404,
                "detail": str(e),
                "instance": str(request.url),
            },
        ) from None
    except ChainPersistenceError:
        raise HTTPException(
            status_code=500,
            detail={
                "type": "urn:hearthline:messages:persistence-failed",
                "title": "Message Not Stored",
                "status": 500,
                "detail": "The message could not be stored. Please try again.",
                "instance": str(request.url),
            },
        ) from None

    body = SendMessageResponse.from_outcome(outcome)
    if outcome.status is SubmissionStatus.REJECTED:
        return JSONResponse(status_code=422, content=body.model_dump(mode="json"))
    if outcome.status is SubmissionStatus.BLOCKED:
        response.status_code = 200
    return body
