"""Messaging API request/response models."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal
from uuid import UUID

from pydantic import BaseModel, Field, PlainSerializer

from hearthline.domain.models.message import Message
from hearthline.domain.models.submission import SubmissionOutcome

# ISO 8601 with Z suffix
DateTimeWithZ = Annotated[
    datetime,
    PlainSerializer(
        lambda v: v.isoformat().replace("+00:00", "Z") if v else None, return_type=str
    ),
]


class SendMessageRequest(BaseModel):
    """Request body for sending a message.

    Attributes:
        body: Message text as typed. Trimmed and length-checked server side.
        thread_id: Target thread; the family's default thread when omitted.
    """

    body: str = Field(..., description="Message text")
    thread_id: UUID | None = Field(default=None, description="Target thread")


class ToneAnalysisModel(BaseModel):
    """Tone verdict stored with a delivered message."""

    is_hostile: bool
    indicators: list[str] = Field(default_factory=list)


class MessageResponse(BaseModel):
    """A delivered, hash-linked message."""

    id: UUID
    thread_id: UUID
    family_id: UUID
    sender_id: UUID
    body: str
    sent_at: DateTimeWithZ
    message_hash: str
    chain_index: int
    previous_hash: str | None = None
    tone_analysis: ToneAnalysisModel

    @classmethod
    def from_domain(cls, message: Message) -> MessageResponse:
        return cls(
            id=message.id,
            thread_id=message.thread_id,
            family_id=message.family_id,
            sender_id=message.sender_id,
            body=message.body,
            sent_at=message.sent_at,
            message_hash=message.message_hash,
            chain_index=message.chain_index,
            previous_hash=message.previous_hash,
            tone_analysis=ToneAnalysisModel(
                is_hostile=message.tone_analysis.is_hostile,
                indicators=list(message.tone_analysis.indicators),
            ),
        )


class SendMessageResponse(BaseModel):
    """Outcome of a send attempt.

    Attributes:
        status: sent, blocked or rejected.
        message: The persisted message (sent only).
        draft: The draft handed back (blocked and rejected).
        indicators: Why the draft was blocked.
        neutral_rewrite: Suggested calmer wording.
        rejection_reason: EMPTY, TOO_LONG or MODERATION_UNAVAILABLE.
        error_message: User-facing correction hint.
        moderation_degraded: Screening fell back instead of using the classifier.
    """

    status: Literal["sent", "blocked", "rejected"]
    message: MessageResponse | None = None
    draft: str | None = None
    indicators: list[str] = Field(default_factory=list)
    neutral_rewrite: str = ""
    rejection_reason: str | None = None
    error_message: str | None = None
    moderation_degraded: bool = False

    @classmethod
    def from_outcome(cls, outcome: SubmissionOutcome) -> SendMessageResponse:
        return cls(
            status=outcome.status.value,
            message=MessageResponse.from_domain(outcome.message)
            if outcome.message
            else None,
            draft=outcome.draft,
            indicators=list(outcome.indicators),
            neutral_rewrite=outcome.neutral_rewrite,
            rejection_reason=outcome.rejection_reason.value
            if outcome.rejection_reason
            else None,
            error_message=outcome.error_message,
            moderation_degraded=outcome.moderation_degraded,
        )


class MediationTipsResponse(BaseModel):
    """De-escalation advice for a family conversation.

    Attributes:
        eligible: False when the family has too few messages for advice.
        message_count: Messages considered.
        conflict_level: low, medium or high (eligible only).
        deescalation_tips: 3 to 5 tips (eligible only).
        from_fallback: Advice was generated locally.
    """

    eligible: bool
    message_count: int
    conflict_level: Literal["low", "medium", "high"] | None = None
    deescalation_tips: list[str] = Field(default_factory=list)
    from_fallback: bool = False


class ChainVerificationResponse(BaseModel):
    """Result of re-verifying a thread's hash chain."""

    thread_id: UUID
    verified_at: DateTimeWithZ
    is_valid: bool
    messages_checked: int
    tamper_detected_at_index: int | None = None
    failure_reason: str | None = None


class ErrorResponse(BaseModel):
    """Error response (RFC 7807 Problem Details).

    Attributes:
        type: Error type URI.
        title: Human-readable error title.
        status: HTTP status code.
        detail: Detailed error message.
        instance: Request path that caused the error.
    """

    type: str = Field(..., description="Error type URI")
    title: str = Field(..., description="Human-readable error title")
    status: int = Field(..., description="HTTP status code")
    detail: str = Field(..., description="Detailed error message")
    instance: str = Field(..., description="Request path that caused the error")
