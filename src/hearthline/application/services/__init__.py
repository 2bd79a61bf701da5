"""Application services for moderated family messaging."""

from hearthline.application.services.base import LoggingMixin
from hearthline.application.services.chain_verification_service import (
    ChainVerificationService,
)
from hearthline.application.services.circuit_breaker_service import CircuitBreaker
from hearthline.application.services.mediation_advisor_service import (
    GENERIC_TIPS,
    MediationAdvisor,
    parse_mediation_result,
)
from hearthline.application.services.message_chain_service import MessageChain
from hearthline.application.services.message_submission_service import (
    MessageSubmissionWorkflow,
)
from hearthline.application.services.moderation_gateway import (
    MODEL_COST_PER_MILLION,
    ModerationGateway,
    ModerationRequest,
    estimate_cost_usd,
)
from hearthline.application.services.rate_limiter_service import ModerationRateLimiter
from hearthline.application.services.time_authority_service import SystemTimeAuthority
from hearthline.application.services.tone_classifier_service import (
    ToneClassifier,
    parse_tone_result,
)

__all__: list[str] = [
    "GENERIC_TIPS",
    "MODEL_COST_PER_MILLION",
    "ChainVerificationService",
    "CircuitBreaker",
    "LoggingMixin",
    "MediationAdvisor",
    "MessageChain",
    "MessageSubmissionWorkflow",
    "ModerationGateway",
    "ModerationRateLimiter",
    "ModerationRequest",
    "SystemTimeAuthority",
    "ToneClassifier",
    "estimate_cost_usd",
    "parse_mediation_result",
    "parse_tone_result",
]
