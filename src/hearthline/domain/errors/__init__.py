"""Domain errors for Hearthline.

All exceptions inherit from HearthlineError.
"""

from hearthline.domain.errors.chain import (
    ChainAppendConflictError,
    ChainPersistenceError,
)
from hearthline.domain.errors.moderation import (
    BreakerOpenError,
    FeatureDisabledError,
    MalformedResponseError,
    ModerationUnavailableError,
    RateLimitedError,
    TransportFailureError,
)
from hearthline.domain.errors.submission import (
    DraftRejectionReason,
    DraftValidationError,
    InvalidSubmissionTransitionError,
    ThreadNotFoundError,
)

__all__: list[str] = [
    "BreakerOpenError",
    "ChainAppendConflictError",
    "ChainPersistenceError",
    "DraftRejectionReason",
    "DraftValidationError",
    "FeatureDisabledError",
    "InvalidSubmissionTransitionError",
    "MalformedResponseError",
    "ModerationUnavailableError",
    "RateLimitedError",
    "ThreadNotFoundError",
    "TransportFailureError",
]
