"""Chain verification report model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class ChainFailureReason(Enum):
    """First inconsistency found while walking a thread's chain."""

    INDEX_GAP = "index_gap"
    BROKEN_LINK = "broken_link"
    HASH_MISMATCH = "hash_mismatch"


@dataclass(frozen=True)
class ChainVerificationReport:
    """Outcome of re-verifying one thread's hash chain.

    Attributes:
        thread_id: Thread that was verified.
        verified_at: When verification ran.
        is_valid: True when every message checked out.
        messages_checked: Messages examined before stopping.
        tamper_detected_at_index: Position of the first inconsistency.
        failure_reason: Kind of the first inconsistency.
    """

    thread_id: UUID
    verified_at: datetime
    is_valid: bool
    messages_checked: int
    tamper_detected_at_index: int | None = None
    failure_reason: ChainFailureReason | None = None
