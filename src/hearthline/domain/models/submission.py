"""Message submission workflow states and outcome.

State Machine:
    DRAFTED -> VALIDATED (draft trimmed and within length bounds)
    DRAFTED -> REJECTED (empty or too long; draft preserved)
    VALIDATED -> TONE_CHECKED (tone classifier consulted or fell back)
    TONE_CHECKED -> BLOCKED (classifier judged the draft hostile)
    TONE_CHECKED -> LINKED (chain position and hash computed)
    TONE_CHECKED -> REJECTED (classifier unavailable under fail-closed policy)
    LINKED -> PERSISTED (message stored)

Terminal States:
    BLOCKED, PERSISTED and REJECTED. BLOCKED is a deliberate positive
    outcome of screening, distinct from both validation rejections and
    moderation-unavailability fallbacks.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from hearthline.domain.errors.submission import DraftRejectionReason
from hearthline.domain.models.message import Message


class SubmissionState(Enum):
    """State in the message submission lifecycle."""

    DRAFTED = "DRAFTED"
    VALIDATED = "VALIDATED"
    TONE_CHECKED = "TONE_CHECKED"
    BLOCKED = "BLOCKED"
    LINKED = "LINKED"
    PERSISTED = "PERSISTED"
    REJECTED = "REJECTED"

    def is_terminal(self) -> bool:
        """Check if no further transitions are permitted from this state."""
        return self in TERMINAL_SUBMISSION_STATES

    def valid_transitions(self) -> frozenset[SubmissionState]:
        """Get the states reachable from this one."""
        return SUBMISSION_TRANSITIONS.get(self, frozenset())


TERMINAL_SUBMISSION_STATES: frozenset[SubmissionState] = frozenset(
    {
        SubmissionState.BLOCKED,
        SubmissionState.PERSISTED,
        SubmissionState.REJECTED,
    }
)

SUBMISSION_TRANSITIONS: dict[SubmissionState, frozenset[SubmissionState]] = {
    SubmissionState.DRAFTED: frozenset(
        {SubmissionState.VALIDATED, SubmissionState.REJECTED}
    ),
    SubmissionState.VALIDATED: frozenset({SubmissionState.TONE_CHECKED}),
    SubmissionState.TONE_CHECKED: frozenset(
        {
            SubmissionState.BLOCKED,
            SubmissionState.LINKED,
            SubmissionState.REJECTED,
        }
    ),
    SubmissionState.LINKED: frozenset({SubmissionState.PERSISTED}),
    SubmissionState.BLOCKED: frozenset(),
    SubmissionState.PERSISTED: frozenset(),
    SubmissionState.REJECTED: frozenset(),
}


class SubmissionStatus(Enum):
    """Caller-facing status of a send attempt."""

    BLOCKED = "blocked"
    SENT = "sent"
    REJECTED = "rejected"


@dataclass(frozen=True)
class SubmissionOutcome:
    """Result of one send attempt.

    Attributes:
        status: blocked, sent or rejected.
        state: Terminal workflow state reached.
        draft: Draft to hand back (blocked/rejected), None once sent.
        message: Persisted message (sent only).
        indicators: Hostility indicators (blocked only).
        neutral_rewrite: Suggested calmer wording (blocked only).
        rejection_reason: Why the draft was rejected (rejected only).
        error_message: User-facing correction hint (rejected only).
        moderation_degraded: True when screening fell back instead of using
            the classifier.
    """

    status: SubmissionStatus
    state: SubmissionState
    draft: str | None = None
    message: Message | None = None
    indicators: tuple[str, ...] = ()
    neutral_rewrite: str = ""
    rejection_reason: DraftRejectionReason | None = None
    error_message: str | None = None
    moderation_degraded: bool = False
