"""In-memory message and thread repositories.

For development and testing. Not suitable for production use.

The message stub enforces the append contract the chain relies on: an
append is accepted only if its chain_index equals the thread's current
length (compare-and-swap on the chain head).
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from uuid import UUID, uuid4

from hearthline.application.ports.message_repository import (
    MessageRepositoryProtocol,
    ThreadRepositoryProtocol,
)
from hearthline.domain.errors.chain import (
    ChainAppendConflictError,
    ChainPersistenceError,
)
from hearthline.domain.models.message import Message, MessageThread


class MessageRepositoryStub(MessageRepositoryProtocol):
    """In-memory append-only message storage.

    Attributes:
        _threads: Messages per thread in chain order.
        _fail_appends: When True, every append raises ChainPersistenceError.
    """

    def __init__(self) -> None:
        """Initialize the stub with empty storage."""
        self._threads: dict[UUID, list[Message]] = {}
        self._append_lock = asyncio.Lock()
        self._fail_appends = False

    def set_fail_appends(self, fail: bool) -> None:
        """Make subsequent appends fail (simulates a storage outage)."""
        self._fail_appends = fail

    async def append(self, message: Message) -> None:
        """Store a linked message if it extends the current chain head.

        Raises:
            ChainPersistenceError: Storage outage simulated.
            ChainAppendConflictError: chain_index is not the thread's length.
        """
        async with self._append_lock:
            if self._fail_appends:
                raise ChainPersistenceError(
                    message.thread_id,
                    message.chain_index,
                    "Simulated storage failure",
                )
            messages = self._threads.setdefault(message.thread_id, [])
            if message.chain_index != len(messages):
                raise ChainAppendConflictError(
                    message.thread_id, message.chain_index, len(messages)
                )
            messages.append(message)

    async def list_by_thread(self, thread_id: UUID) -> list[Message]:
        """Return a copy of the thread's messages in chain order."""
        return list(self._threads.get(thread_id, []))

    async def list_by_family(self, family_id: UUID) -> list[Message]:
        """Return the family's messages, newest first."""
        messages = [
            message
            for thread in self._threads.values()
            for message in thread
            if message.family_id == family_id
        ]
        return sorted(messages, key=lambda m: (m.sent_at, m.chain_index), reverse=True)

    def replace_for_testing(self, message: Message) -> None:
        """Overwrite a stored message in place (simulates tampering)."""
        messages = self._threads[message.thread_id]
        messages[message.chain_index] = message

    def clear(self) -> None:
        """Clear all stored messages (for testing)."""
        self._threads.clear()


class ThreadRepositoryStub(ThreadRepositoryProtocol):
    """In-memory thread storage."""

    def __init__(self) -> None:
        self._threads: dict[UUID, MessageThread] = {}
        self._lock = asyncio.Lock()

    async def get(self, thread_id: UUID) -> MessageThread | None:
        return self._threads.get(thread_id)

    async def find_or_create(self, family_id: UUID, subject: str) -> MessageThread:
        """Return the family's oldest thread, creating one if none exists."""
        async with self._lock:
            family_threads = [
                t for t in self._threads.values() if t.family_id == family_id
            ]
            if family_threads:
                return min(family_threads, key=lambda t: t.created_at)

            thread = MessageThread(
                id=uuid4(),
                family_id=family_id,
                subject=subject,
                created_at=datetime.now(timezone.utc),
            )
            self._threads[thread.id] = thread
            return thread

    async def add(self, thread: MessageThread) -> None:
        """Register an existing thread (for testing)."""
        self._threads[thread.id] = thread

    def clear(self) -> None:
        """Clear all stored threads (for testing)."""
        self._threads.clear()
