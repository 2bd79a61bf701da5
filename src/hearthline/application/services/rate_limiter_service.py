"""Per-identity admission control for classifier calls.

Fixed window of rate_window_seconds (W) with capacity rate_limit_per_window
(N). The first request for an identity, or the first after its window
expired, opens a new window with count 1. Bursts of up to 2N are possible
across a window edge; this dampens abuse and is not a hard quota.

State is process-lifetime and held by the service instance. Every
read-modify-write of a window happens under one lock, so two concurrent
checks for the same identity can never both be admitted past capacity.
"""

from __future__ import annotations

import math
import threading

from hearthline.application.ports.time_authority import TimeAuthorityProtocol
from hearthline.application.services.base import LoggingMixin
from hearthline.config.moderation_config import DEFAULT_MODERATION_CONFIG, ModerationConfig
from hearthline.domain.models.admission import RateLimitDecision, RateWindow


class ModerationRateLimiter(LoggingMixin):
    """Fixed-window rate limiter keyed by identity.

    Attributes:
        _capacity: Maximum admissions per window (N).
        _window_seconds: Window length in seconds (W).
        _windows: Active window per identity.
    """

    def __init__(
        self,
        time_authority: TimeAuthorityProtocol,
        config: ModerationConfig = DEFAULT_MODERATION_CONFIG,
    ) -> None:
        """Initialize the rate limiter.

        Args:
            time_authority: Source of monotonic time.
            config: Supplies capacity and window length.
        """
        self._time = time_authority
        self._capacity = config.rate_limit_per_window
        self._window_seconds = config.rate_window_seconds
        self._windows: dict[str, RateWindow] = {}
        self._last_pruned_at = time_authority.monotonic()
        self._lock = threading.Lock()

        self._init_logger(component="moderation.rate_limit")

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    @property
    def tracked_identities(self) -> int:
        """Identities currently holding a window."""
        with self._lock:
            return len(self._windows)

    def admit(self, identity: str) -> RateLimitDecision:
        """Admit or deny one request for an identity.

        Expired windows of other identities are dropped at most once per
        window length.

        Args:
            identity: The caller identity (user id).

        Returns:
            RateLimitDecision. Denials carry retry_after_seconds >= 1.
        """
        now = self._time.monotonic()
        with self._lock:
            if now - self._last_pruned_at >= self._window_seconds:
                self._prune_locked(now)
            window = self._windows.get(identity)
            if window is None or now - window.window_started_at >= self._window_seconds:
                self._windows[identity] = RateWindow(
                    identity=identity, window_started_at=now, count=1
                )
                return RateLimitDecision(allowed=True)

            if window.count < self._capacity:
                window.count += 1
                return RateLimitDecision(allowed=True)

            elapsed = now - window.window_started_at

        retry_after = max(1, math.ceil(self._window_seconds - elapsed))
        self._log_operation("admit", identity=identity).info(
            "rate_limit_exceeded",
            limit=self._capacity,
            retry_after_seconds=retry_after,
        )
        return RateLimitDecision(allowed=False, retry_after_seconds=retry_after)

    def remaining(self, identity: str) -> int:
        """Admissions left in the identity's current window."""
        now = self._time.monotonic()
        with self._lock:
            window = self._windows.get(identity)
            if window is None or now - window.window_started_at >= self._window_seconds:
                return self._capacity
            return max(0, self._capacity - window.count)

    def prune_expired(self) -> int:
        """Drop windows that have fully expired.

        Returns:
            Number of identities removed.
        """
        now = self._time.monotonic()
        with self._lock:
            return self._prune_locked(now)

    def _prune_locked(self, now: float) -> int:
        expired = [
            identity
            for identity, window in self._windows.items()
            if now - window.window_started_at >= self._window_seconds
        ]
        for identity in expired:
            del self._windows[identity]
        self._last_pruned_at = now
        return len(expired)

    def reset(self) -> None:
        """Clear all windows."""
        with self._lock:
            self._windows.clear()
