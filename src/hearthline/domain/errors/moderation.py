"""Moderation errors.

These errors describe why the remote classifier could not be used for a
request. They are raised inside the moderation gateway and absorbed there:
callers only ever observe the fallback value plus a degradation reason.
"""

from __future__ import annotations

from hearthline.domain.exceptions import HearthlineError


class ModerationUnavailableError(HearthlineError):
    """Base class for every reason the classifier result is unavailable."""

    pass


class FeatureDisabledError(ModerationUnavailableError):
    """Moderation is switched off or has no credentials configured."""

    def __init__(self) -> None:
        super().__init__("Moderation feature is disabled")


class RateLimitedError(ModerationUnavailableError):
    """The identity exhausted its classifier quota for the current window.

    Attributes:
        identity: Identity that was denied.
        retry_after_seconds: Seconds until the window resets.
    """

    def __init__(self, identity: str, retry_after_seconds: int) -> None:
        self.identity = identity
        self.retry_after_seconds = retry_after_seconds
        super().__init__(
            f"Classifier rate limit exceeded for {identity}, "
            f"retry after {retry_after_seconds}s"
        )


class BreakerOpenError(ModerationUnavailableError):
    """The circuit breaker is short-circuiting classifier calls.

    Attributes:
        open_for_seconds: Remaining cooldown in seconds.
    """

    def __init__(self, open_for_seconds: float) -> None:
        self.open_for_seconds = open_for_seconds
        super().__init__(
            f"Classifier circuit breaker open for another {open_for_seconds:.1f}s"
        )


class TransportFailureError(ModerationUnavailableError):
    """The remote call failed, timed out, or returned a non-success status.

    Attributes:
        status_code: HTTP status if the server answered, None otherwise.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class MalformedResponseError(ModerationUnavailableError):
    """The classifier answered but the answer could not be parsed or validated."""

    pass
