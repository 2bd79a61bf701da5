"""Message submission errors.

Constraints:
- A rejected draft is never lost: every validation error carries the
  draft so the caller can hand it back to the user for correction.
"""

from __future__ import annotations

from enum import Enum
from uuid import UUID

from hearthline.domain.exceptions import HearthlineError


class DraftRejectionReason(Enum):
    """Why a draft was sent back to its author.

    Reasons:
        EMPTY: Nothing left after trimming whitespace.
        TOO_LONG: Body exceeds the configured maximum length.
        MODERATION_UNAVAILABLE: Classifier unavailable and fail-closed policy active.
    """

    EMPTY = "EMPTY"
    TOO_LONG = "TOO_LONG"
    MODERATION_UNAVAILABLE = "MODERATION_UNAVAILABLE"


_REASON_MESSAGES: dict[DraftRejectionReason, str] = {
    DraftRejectionReason.EMPTY: "Please enter a message before sending.",
    DraftRejectionReason.TOO_LONG: "Please keep your message under {limit:,} characters.",
    DraftRejectionReason.MODERATION_UNAVAILABLE: (
        "Message screening is temporarily unavailable. Please try again shortly."
    ),
}


class DraftValidationError(HearthlineError):
    """A draft failed validation and must be corrected by its author.

    Attributes:
        reason: Machine-readable rejection reason.
        draft: The draft exactly as it should be handed back.
        user_message: Correctable, user-facing explanation.
    """

    def __init__(
        self,
        reason: DraftRejectionReason,
        draft: str,
        max_length: int | None = None,
    ) -> None:
        self.reason = reason
        self.draft = draft
        self.user_message = _REASON_MESSAGES[reason].format(limit=max_length or 0)
        super().__init__(self.user_message)


class InvalidSubmissionTransitionError(HearthlineError):
    """The submission workflow attempted a transition outside its state machine.

    Attributes:
        from_state: State the workflow was in.
        to_state: State it tried to enter.
    """

    def __init__(self, from_state: str, to_state: str) -> None:
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(f"Invalid submission transition: {from_state} -> {to_state}")


class ThreadNotFoundError(HearthlineError):
    """The target thread does not exist or belongs to another family.

    Attributes:
        thread_id: Thread that was requested.
    """

    def __init__(self, thread_id: UUID) -> None:
        self.thread_id = thread_id
        super().__init__(f"Thread {thread_id} not found")
