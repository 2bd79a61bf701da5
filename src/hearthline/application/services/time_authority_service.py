"""System clock implementation of TimeAuthorityProtocol."""

import time
from datetime import datetime, timezone

from hearthline.application.ports.time_authority import TimeAuthorityProtocol


class SystemTimeAuthority(TimeAuthorityProtocol):
    """Production time authority backed by the system clocks."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc).astimezone()

    def utcnow(self) -> datetime:
        return datetime.now(timezone.utc)

    def monotonic(self) -> float:
        return time.monotonic()
