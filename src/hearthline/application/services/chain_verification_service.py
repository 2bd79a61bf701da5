"""Re-verification of a thread's hash chain.

Walks the stored messages in chain order and stops at the first
inconsistency:
- INDEX_GAP: chain_index is not the message's position.
- BROKEN_LINK: previous_hash differs from the prior message's hash.
- HASH_MISMATCH: the stored hash differs from the recomputed one.
"""

from __future__ import annotations

import hmac
from uuid import UUID

from hearthline.application.ports.message_repository import MessageRepositoryProtocol
from hearthline.application.ports.time_authority import TimeAuthorityProtocol
from hearthline.application.services.base import LoggingMixin
from hearthline.domain.models.chain_verification import (
    ChainFailureReason,
    ChainVerificationReport,
)
from hearthline.domain.services.message_hash import recompute_message_hash


class ChainVerificationService(LoggingMixin):
    """Detects retroactive edits in a thread."""

    def __init__(
        self,
        repository: MessageRepositoryProtocol,
        time_authority: TimeAuthorityProtocol,
    ) -> None:
        self._repository = repository
        self._time = time_authority
        self._init_logger(component="messaging.verification")

    async def verify_thread(self, thread_id: UUID) -> ChainVerificationReport:
        """Verify every message of a thread.

        Args:
            thread_id: Thread to verify.

        Returns:
            Report with the first inconsistency, if any. An empty thread is valid.
        """
        log = self._log_operation("verify_thread", thread_id=str(thread_id))
        messages = await self._repository.list_by_thread(thread_id)

        previous_hash: str | None = None
        for position, message in enumerate(messages):
            reason: ChainFailureReason | None = None
            if message.chain_index != position:
                reason = ChainFailureReason.INDEX_GAP
            elif message.previous_hash != previous_hash:
                reason = ChainFailureReason.BROKEN_LINK
            elif not hmac.compare_digest(
                recompute_message_hash(message).encode(),
                message.message_hash.encode(),
            ):
                reason = ChainFailureReason.HASH_MISMATCH

            if reason is not None:
                log.warning(
                    "chain_tamper_detected",
                    chain_index=position,
                    failure_reason=reason.value,
                )
                return ChainVerificationReport(
                    thread_id=thread_id,
                    verified_at=self._time.utcnow(),
                    is_valid=False,
                    messages_checked=position + 1,
                    tamper_detected_at_index=position,
                    failure_reason=reason,
                )
            previous_hash = message.message_hash

        log.info("chain_verified", messages_checked=len(messages))
        return ChainVerificationReport(
            thread_id=thread_id,
            verified_at=self._time.utcnow(),
            is_valid=True,
            messages_checked=len(messages),
        )
