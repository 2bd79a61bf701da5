"""Moderation result models.

Caller-facing shapes returned by the tone classifier and the mediation
advisor, plus the degradation record the gateway attaches when it had to
fall back instead of using the remote classifier.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ModerationOperation(Enum):
    """Kinds of classifier operation routed through the gateway."""

    TONE_ANALYSIS = "tone_analysis"
    MEDIATION_ASSISTANT = "mediation_assistant"


class ModerationDegradation(Enum):
    """Why the gateway returned its fallback instead of a classifier result.

    Reasons:
        FEATURE_DISABLED: Moderation switched off by configuration.
        RATE_LIMITED: Identity exceeded its per-window quota.
        BREAKER_OPEN: Circuit breaker short-circuited the call.
        TRANSPORT_FAILURE: Network error, timeout, cancellation or non-2xx status.
        MALFORMED_RESPONSE: Response had no parseable or valid JSON object.
    """

    FEATURE_DISABLED = "feature_disabled"
    RATE_LIMITED = "rate_limited"
    BREAKER_OPEN = "breaker_open"
    TRANSPORT_FAILURE = "transport_failure"
    MALFORMED_RESPONSE = "malformed_response"


@dataclass(frozen=True)
class ModerationOutcome(Generic[T]):
    """Value produced by one gateway call.

    Attributes:
        value: Validated classifier result, or the caller's fallback.
        degradation: None when value came from the classifier.
    """

    value: T
    degradation: ModerationDegradation | None = None

    @property
    def is_fallback(self) -> bool:
        """True when value is the fallback."""
        return self.degradation is not None


@dataclass(frozen=True, eq=True)
class ToneAnalysisResult:
    """Verdict of the pre-send hostility gate.

    Attributes:
        is_hostile: Whether the message should be held back.
        indicators: Short, specific reasons for the verdict.
        neutral_rewrite: Suggested calmer wording ("" when not hostile).
        from_fallback: True when the classifier could not be consulted.
    """

    is_hostile: bool
    indicators: tuple[str, ...] = ()
    neutral_rewrite: str = ""
    from_fallback: bool = False


# Fail-open verdict: classifier unavailability never blocks delivery.
SAFE_TONE_ANALYSIS = ToneAnalysisResult(is_hostile=False, indicators=(), neutral_rewrite="")


class ConflictLevel(Enum):
    """Conversation-level conflict estimate."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True, eq=True)
class MediationAssistantResult:
    """De-escalation advice for a conversation.

    Attributes:
        conflict_level: Estimated conflict level.
        deescalation_tips: Between 3 and 5 practical tips.
        from_fallback: True when generated locally instead of by the classifier.
    """

    conflict_level: ConflictLevel
    deescalation_tips: tuple[str, ...]
    from_fallback: bool = False
