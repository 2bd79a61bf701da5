"""Append-only, hash-linked message chain per thread.

Each message's hash covers its own fields plus the previous message's hash,
so any retroactive change to a stored message breaks continuity for that
message and every message after it.

Appends are linearizable per thread: append_and_store holds the thread's
lock across read-last, compute and store, so two concurrent sends can
never compute the same (chain_index, previous_hash) pair. Repositories
also reject a stale chain_index.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from uuid import UUID, uuid4

from hearthline.application.ports.message_repository import MessageRepositoryProtocol
from hearthline.application.services.base import LoggingMixin
from hearthline.domain.errors.chain import ChainPersistenceError
from hearthline.domain.exceptions import HearthlineError
from hearthline.domain.models.message import Message, StoredToneAnalysis
from hearthline.domain.services.message_hash import compute_message_hash
from hearthline.infrastructure.monitoring.metrics import get_metrics_collector


class MessageChain(LoggingMixin):
    """Builds and stores hash-linked messages."""

    def __init__(self, repository: MessageRepositoryProtocol) -> None:
        """Initialize the chain.

        Args:
            repository: Ordered reads and atomic appends of thread messages.
        """
        self._repository = repository
        self._locks: dict[UUID, asyncio.Lock] = {}
        self._lock_users: dict[UUID, int] = {}

        self._init_logger(component="messaging.chain")

    @property
    def active_thread_locks(self) -> int:
        """Threads with an append in progress or waiting."""
        return len(self._locks)

    def _claim_lock(self, thread_id: UUID) -> asyncio.Lock:
        lock = self._locks.get(thread_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[thread_id] = lock
        self._lock_users[thread_id] = self._lock_users.get(thread_id, 0) + 1
        return lock

    def _release_lock(self, thread_id: UUID) -> None:
        # Drop the lock once no append holds or awaits it
        users = self._lock_users[thread_id] - 1
        if users:
            self._lock_users[thread_id] = users
        else:
            del self._lock_users[thread_id]
            del self._locks[thread_id]

    async def append(
        self,
        thread_id: UUID,
        sender_id: UUID,
        family_id: UUID,
        body: str,
        sent_at: datetime,
        tone_analysis: StoredToneAnalysis | None = None,
    ) -> Message:
        """Build the next message of a thread, ready for storage.

        Reads the thread's current head; does not store anything. Callers
        that store the result themselves must serialize per thread; use
        append_and_store otherwise.

        Args:
            thread_id: Thread to extend.
            sender_id: Sending family member.
            family_id: Owning family.
            body: Plaintext body.
            sent_at: UTC timestamp of the append.
            tone_analysis: Verdict that let the message through.

        Returns:
            Fully linked Message.
        """
        existing = await self._repository.list_by_thread(thread_id)
        previous = existing[-1] if existing else None
        next_index = previous.chain_index + 1 if previous else 0
        previous_hash = previous.message_hash if previous else None

        message_hash = compute_message_hash(
            thread_id=thread_id,
            family_id=family_id,
            sender_id=sender_id,
            body=body,
            sent_at=sent_at,
            chain_index=next_index,
            previous_hash=previous_hash,
        )
        return Message(
            id=uuid4(),
            thread_id=thread_id,
            family_id=family_id,
            sender_id=sender_id,
            body=body,
            sent_at=sent_at,
            message_hash=message_hash,
            chain_index=next_index,
            previous_hash=previous_hash,
            tone_analysis=tone_analysis or StoredToneAnalysis(is_hostile=False),
        )

    async def append_and_store(
        self,
        thread_id: UUID,
        sender_id: UUID,
        family_id: UUID,
        body: str,
        sent_at: datetime,
        tone_analysis: StoredToneAnalysis | None = None,
    ) -> Message:
        """Build the next message and persist it under the thread's lock.

        Returns:
            The persisted Message.

        Raises:
            ChainAppendConflictError: Storage saw a different chain head.
            ChainPersistenceError: Storage failed for any other reason.
        """
        log = self._log_operation("append_and_store", thread_id=str(thread_id))

        lock = self._claim_lock(thread_id)
        try:
            async with lock:
                message = await self.append(
                    thread_id, sender_id, family_id, body, sent_at, tone_analysis
                )
                try:
                    await self._repository.append(message)
                except HearthlineError:
                    log.error(
                        "message_append_failed", chain_index=message.chain_index
                    )
                    raise
                except Exception as e:
                    log.error(
                        "message_append_failed",
                        chain_index=message.chain_index,
                        error=str(e),
                    )
                    raise ChainPersistenceError(thread_id, message.chain_index) from e
        finally:
            self._release_lock(thread_id)

        get_metrics_collector().increment_messages_appended()
        log.info(
            "message_appended",
            message_id=str(message.id),
            chain_index=message.chain_index,
            message_hash=message.message_hash,
        )
        return message
