"""Message chain errors.

A chain append that cannot be persisted is the one fatal case of the
messaging core: dropping it silently would leave the thread history
unverifiable, so these errors always propagate to the caller.
"""

from __future__ import annotations

from uuid import UUID

from hearthline.domain.exceptions import HearthlineError


class ChainPersistenceError(HearthlineError):
    """Persisting a linked message failed.

    Attributes:
        thread_id: Thread whose chain could not be extended.
        chain_index: Index the message would have taken.
    """

    def __init__(self, thread_id: UUID, chain_index: int, message: str = "") -> None:
        self.thread_id = thread_id
        self.chain_index = chain_index
        super().__init__(
            message
            or f"Failed to persist message at index {chain_index} of thread {thread_id}"
        )


class ChainAppendConflictError(ChainPersistenceError):
    """Storage refused an append computed against a stale chain head.

    Attributes:
        expected_index: Index storage would have accepted.
    """

    def __init__(self, thread_id: UUID, chain_index: int, expected_index: int) -> None:
        self.expected_index = expected_index
        super().__init__(
            thread_id,
            chain_index,
            f"Chain append conflict on thread {thread_id}: "
            f"got index {chain_index}, expected {expected_index}",
        )
