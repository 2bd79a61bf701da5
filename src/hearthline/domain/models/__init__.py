"""Domain models for Hearthline."""

from hearthline.domain.models.admission import (
    BreakerSnapshot,
    BreakerState,
    RateLimitDecision,
    RateWindow,
)
from hearthline.domain.models.chain_verification import (
    ChainFailureReason,
    ChainVerificationReport,
)
from hearthline.domain.models.mediation_suggestion import (
    DisputeCategory,
    MediationSuggestion,
    NeutralityReport,
)
from hearthline.domain.models.message import Message, MessageThread, StoredToneAnalysis
from hearthline.domain.models.moderation import (
    SAFE_TONE_ANALYSIS,
    ConflictLevel,
    MediationAssistantResult,
    ModerationDegradation,
    ModerationOperation,
    ModerationOutcome,
    ToneAnalysisResult,
)
from hearthline.domain.models.submission import (
    SUBMISSION_TRANSITIONS,
    TERMINAL_SUBMISSION_STATES,
    SubmissionOutcome,
    SubmissionState,
    SubmissionStatus,
)

__all__: list[str] = [
    "SAFE_TONE_ANALYSIS",
    "SUBMISSION_TRANSITIONS",
    "TERMINAL_SUBMISSION_STATES",
    "BreakerSnapshot",
    "BreakerState",
    "ChainFailureReason",
    "ChainVerificationReport",
    "ConflictLevel",
    "DisputeCategory",
    "MediationAssistantResult",
    "MediationSuggestion",
    "Message",
    "MessageThread",
    "ModerationDegradation",
    "ModerationOperation",
    "ModerationOutcome",
    "NeutralityReport",
    "RateLimitDecision",
    "RateWindow",
    "StoredToneAnalysis",
    "SubmissionOutcome",
    "SubmissionState",
    "SubmissionStatus",
    "ToneAnalysisResult",
]
