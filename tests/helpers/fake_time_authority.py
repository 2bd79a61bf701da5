"""FakeTimeAuthority - Controllable time authority for deterministic tests.

Rate windows, breaker cooldowns and message timestamps all read the
injected TimeAuthorityProtocol, so tests can move time forward without
sleeping.

Usage Patterns:
--------------

1. Frozen Time Pattern:

    >>> fake_time = FakeTimeAuthority(frozen_at=datetime(2026, 1, 15, 10, 0, 0, tzinfo=timezone.utc))
    >>> assert fake_time.utcnow() == datetime(2026, 1, 15, 10, 0, 0, tzinfo=timezone.utc)

2. Time Advancement Pattern:

    >>> fake_time = FakeTimeAuthority()
    >>> limiter = ModerationRateLimiter(fake_time, config)
    >>> fake_time.advance(seconds=60)  # next rate window

3. Monotonic Clock Testing:
    The monotonic clock is tied to time advancement.

    >>> fake_time = FakeTimeAuthority()
    >>> m1 = fake_time.monotonic()
    >>> fake_time.advance(seconds=10)
    >>> assert fake_time.monotonic() - m1 == 10.0
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from hearthline.application.ports.time_authority import TimeAuthorityProtocol

DEFAULT_FROZEN_AT = datetime(2026, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


class FakeTimeAuthority(TimeAuthorityProtocol):
    """Controllable time authority for deterministic tests.

    Attributes:
        _current_time: The controlled current time.
        _monotonic_base: Starting value of the monotonic clock.
        _monotonic_advances: Accumulated advances for monotonic clock.
    """

    def __init__(
        self,
        frozen_at: datetime | None = None,
        *,
        start_monotonic: float = 0.0,
    ) -> None:
        """Initialize the fake time authority.

        Args:
            frozen_at: Optional datetime to freeze time at. Defaults to
                2026-01-01T00:00:00 UTC. Naive values are taken as UTC.
            start_monotonic: Starting value for monotonic clock.
        """
        if frozen_at is None:
            frozen_at = DEFAULT_FROZEN_AT
        if frozen_at.tzinfo is None:
            frozen_at = frozen_at.replace(tzinfo=timezone.utc)

        self._current_time: datetime = frozen_at
        self._monotonic_base: float = start_monotonic
        self._monotonic_advances: float = 0.0

    def now(self) -> datetime:
        return self._current_time

    def utcnow(self) -> datetime:
        return self._current_time

    def monotonic(self) -> float:
        return self._monotonic_base + self._monotonic_advances

    def advance(
        self,
        seconds: float | int | None = None,
        delta: timedelta | None = None,
    ) -> None:
        """Advance wall clock and monotonic clock together.

        Args:
            seconds: Number of seconds to advance.
            delta: A timedelta to advance by. Takes precedence over seconds.

        Raises:
            ValueError: If neither argument is given, or the amount is negative.
        """
        if delta is not None:
            advance_seconds = delta.total_seconds()
        elif seconds is not None:
            advance_seconds = float(seconds)
        else:
            raise ValueError("Must provide either 'seconds' or 'delta' argument")

        if advance_seconds < 0:
            raise ValueError(
                f"Cannot advance time backwards. Got {advance_seconds} seconds. "
                "Use set_time() for explicit time changes."
            )

        self._current_time += timedelta(seconds=advance_seconds)
        self._monotonic_advances += advance_seconds

    def set_time(self, dt: datetime) -> None:
        """Set the wall clock without touching the monotonic clock."""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        self._current_time = dt

    @property
    def elapsed_monotonic(self) -> float:
        """Accumulated advances in seconds."""
        return self._monotonic_advances

    def __repr__(self) -> str:
        return (
            f"FakeTimeAuthority("
            f"current_time={self._current_time.isoformat()}, "
            f"monotonic={self.monotonic():.3f})"
        )
