"""Admission control state models.

RateWindow and BreakerState are owned exclusively by the rate limiter
and the circuit breaker respectively. They live for the lifetime of the
owning service and are never persisted. Times are monotonic-clock
seconds, not wall-clock timestamps.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class RateWindow:
    """Fixed admission window for one identity.

    Attributes:
        identity: Identity the window belongs to.
        window_started_at: Monotonic time the window opened.
        count: Requests admitted in this window.
    """

    identity: str
    window_started_at: float
    count: int


@dataclass(frozen=True)
class RateLimitDecision:
    """Result of one admission check.

    Attributes:
        allowed: Whether the request was admitted.
        retry_after_seconds: Seconds until the window resets (denials only).
    """

    allowed: bool
    retry_after_seconds: int | None = None


@dataclass
class BreakerState:
    """Rolling error accounting for one guarded operation class.

    Attributes:
        window_started_at: Monotonic time the accounting window opened.
        total_requests: Outcomes recorded in this window.
        total_errors: Failed outcomes recorded in this window.
        open_until: Monotonic time the breaker closes again (0.0 when closed).
    """

    window_started_at: float
    total_requests: int = 0
    total_errors: int = 0
    open_until: float = 0.0

    @property
    def error_rate(self) -> float:
        """Errors over requests, 0.0 for an empty window."""
        return self.total_errors / max(1, self.total_requests)


@dataclass(frozen=True)
class BreakerSnapshot:
    """Point-in-time copy of BreakerState for inspection and metrics."""

    window_started_at: float
    total_requests: int
    total_errors: int
    open_until: float
    is_open: bool
