"""Mediation suggestion models used by the local suggestion engine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class DisputeCategory(Enum):
    """Broad category of a disputed topic."""

    SCHEDULE_ADJUSTMENT = "schedule_adjustment"
    FINANCIAL = "financial"
    MEDICAL_EDUCATION = "medical_education"
    ACTIVITY_FEES = "activity_fees"
    PARENTING_DECISION = "parenting_decision"
    MISCOMMUNICATION = "miscommunication"


@dataclass(frozen=True)
class MediationSuggestion:
    """A neutral draft one family member can send to another.

    Attributes:
        id: Deterministic suggestion identifier.
        template_id: Template group the draft came from.
        category: Dispute category of the template group.
        feasibility_score: 0-100, higher is easier to agree to.
        draft_text: Ready-to-send text with placeholders filled.
        reasoning: Why this framing is neutral.
        expires_at: Suggested expiry of the offer.
    """

    id: str
    template_id: str
    category: DisputeCategory
    feasibility_score: int
    draft_text: str
    reasoning: str
    expires_at: datetime | None = None


@dataclass(frozen=True)
class NeutralityReport:
    """Neutrality score for a user's own draft.

    Attributes:
        score: 0-100, higher is more neutral.
        feedback: Concrete rewording hints.
    """

    score: int
    feedback: tuple[str, ...] = ()
