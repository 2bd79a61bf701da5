"""Rolling error-rate circuit breaker guarding the remote classifier.

Counts outcomes over a window of breaker_window_seconds. Once the window
has run its length, the next recorded outcome starts a fresh window
(counts zeroed, open_until cleared). After every outcome, if at least
breaker_min_requests were recorded and the error rate exceeds
breaker_error_threshold, the breaker opens for breaker_open_seconds.

Recovery is time-based only. There is no half-open trial permit: the
first call after the cooldown is a normal call and its outcome feeds the
(possibly reset) window like any other.
"""

from __future__ import annotations

import threading

from hearthline.application.ports.time_authority import TimeAuthorityProtocol
from hearthline.application.services.base import LoggingMixin
from hearthline.config.moderation_config import DEFAULT_MODERATION_CONFIG, ModerationConfig
from hearthline.domain.models.admission import BreakerSnapshot, BreakerState
from hearthline.infrastructure.monitoring.metrics import get_metrics_collector


class CircuitBreaker(LoggingMixin):
    """Single breaker instance shared by every classifier operation."""

    def __init__(
        self,
        time_authority: TimeAuthorityProtocol,
        config: ModerationConfig = DEFAULT_MODERATION_CONFIG,
    ) -> None:
        """Initialize the breaker.

        Args:
            time_authority: Source of monotonic time.
            config: Supplies window, cooldown and trip thresholds.
        """
        self._time = time_authority
        self._window_seconds = config.breaker_window_seconds
        self._open_seconds = config.breaker_open_seconds
        self._min_requests = config.breaker_min_requests
        self._error_threshold = config.breaker_error_threshold
        self._state = BreakerState(window_started_at=time_authority.monotonic())
        self._lock = threading.Lock()

        self._init_logger(component="moderation.breaker")

    def is_open(self) -> bool:
        """True while the cooldown started by the last trip is running."""
        now = self._time.monotonic()
        with self._lock:
            return now < self._state.open_until

    def open_for_seconds(self) -> float:
        """Seconds of cooldown remaining, 0.0 when closed."""
        now = self._time.monotonic()
        with self._lock:
            return max(0.0, self._state.open_until - now)

    def record_outcome(self, success: bool) -> None:
        """Record one classifier call outcome and trip if needed.

        Args:
            success: Whether the call produced a validated verdict.
        """
        now = self._time.monotonic()
        with self._lock:
            state = self._state
            if now - state.window_started_at >= self._window_seconds:
                state.window_started_at = now
                state.total_requests = 0
                state.total_errors = 0
                state.open_until = 0.0

            state.total_requests += 1
            if not success:
                state.total_errors += 1

            was_open = now < state.open_until
            should_trip = (
                state.total_requests >= self._min_requests
                and state.error_rate > self._error_threshold
            )
            if should_trip:
                state.open_until = now + self._open_seconds
            total_requests = state.total_requests
            total_errors = state.total_errors

        if should_trip and not was_open:
            get_metrics_collector().increment_circuit_opened()
            self._log_operation("record_outcome").warning(
                "circuit_breaker_opened",
                total_requests=total_requests,
                total_errors=total_errors,
                open_seconds=self._open_seconds,
            )

    def snapshot(self) -> BreakerSnapshot:
        """Return a consistent copy of the current state."""
        now = self._time.monotonic()
        with self._lock:
            state = self._state
            return BreakerSnapshot(
                window_started_at=state.window_started_at,
                total_requests=state.total_requests,
                total_errors=state.total_errors,
                open_until=state.open_until,
                is_open=now < state.open_until,
            )
