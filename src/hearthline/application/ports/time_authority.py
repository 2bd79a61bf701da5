"""Time Authority Protocol - interface for consistent time provisioning.

All services that need wall-clock timestamps or elapsed-time measurement
inject a TimeAuthorityProtocol implementation instead of calling
datetime.now() or time.monotonic() directly.

Benefits:
1. **Testability**: Tests inject FakeTimeAuthority for deterministic windows
2. **Consistency**: Message timestamps and admission windows share one clock
"""

from abc import ABC, abstractmethod
from datetime import datetime


class TimeAuthorityProtocol(ABC):
    """Abstract interface for time authority.

    Example usage:
        class MyService:
            def __init__(self, time_authority: TimeAuthorityProtocol) -> None:
                self._time = time_authority

            def process(self) -> None:
                now = self._time.utcnow()  # NOT datetime.now()
                ...

    For production:
        Use SystemTimeAuthority from hearthline.application.services

    For testing:
        Use FakeTimeAuthority from tests/helpers/fake_time_authority.py
    """

    @abstractmethod
    def now(self) -> datetime:
        """Return current local time with timezone awareness."""
        ...

    @abstractmethod
    def utcnow(self) -> datetime:
        """Return current UTC time (timezone-aware)."""
        ...

    @abstractmethod
    def monotonic(self) -> float:
        """Return monotonic clock value for measuring elapsed time.

        Returns:
            Monotonically increasing float value (in seconds).

        Note:
            Use this for measuring elapsed time, not for timestamps.
            The reference point is arbitrary - only differences are meaningful.
        """
        ...
