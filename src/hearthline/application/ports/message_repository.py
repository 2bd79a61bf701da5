"""Persistence ports for messages and threads.

The message chain depends only on ordered reads of a thread's existing
messages and an atomic append. Storage technology is unconstrained.

Constraints:
- Append-only: no update or delete operations exist on this port.
- append MUST fail (not silently succeed) when it cannot store the message;
  a lost append would leave the chain unverifiable.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable
from uuid import UUID

from hearthline.domain.models.message import Message, MessageThread


@runtime_checkable
class MessageRepositoryProtocol(Protocol):
    """Append-only message storage."""

    async def append(self, message: Message) -> None:
        """Persist a fully-linked message.

        Implementations should reject a message whose chain_index is not
        exactly the thread's current length.

        Raises:
            ChainAppendConflictError: If the chain head moved underneath the caller.
            ChainPersistenceError: On any other storage failure.
        """
        ...

    async def list_by_thread(self, thread_id: UUID) -> list[Message]:
        """Return a thread's messages ordered by chain_index ascending."""
        ...

    async def list_by_family(self, family_id: UUID) -> list[Message]:
        """Return all of a family's messages, newest sent_at first."""
        ...


@runtime_checkable
class ThreadRepositoryProtocol(Protocol):
    """Thread lookup and creation."""

    async def get(self, thread_id: UUID) -> MessageThread | None:
        """Return the thread, or None if unknown."""
        ...

    async def find_or_create(self, family_id: UUID, subject: str) -> MessageThread:
        """Return the family's first thread, creating it with subject if none exists."""
        ...
