"""Message and thread domain models.

Constraints:
- A Message is immutable once persisted (frozen dataclass). Later edits
  are not prevented at storage level but break hash continuity and are
  therefore detectable.
- chain_index is strictly increasing per thread, starting at 0, no gaps.
- previous_hash of message i equals message_hash of message i-1 and is
  None for the genesis message (i = 0).
- body is the original plaintext. Redaction only ever applies to the
  copy sent to the remote classifier, never to what is stored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, eq=True)
class StoredToneAnalysis:
    """Tone verdict persisted alongside a delivered message.

    Attributes:
        is_hostile: Always False for persisted messages.
        indicators: Indicators the classifier reported, if any.
    """

    is_hostile: bool
    indicators: tuple[str, ...] = ()


@dataclass(frozen=True, eq=True)
class Message:
    """A delivered, hash-linked family message.

    Attributes:
        id: Unique message identifier.
        thread_id: Thread the message belongs to.
        family_id: Family that owns the thread.
        sender_id: Family member who sent the message.
        body: Original plaintext body (never redacted).
        sent_at: UTC timestamp assigned at append time.
        message_hash: SHA-256 over the canonical hash input (64 hex chars).
        chain_index: Zero-based position within the thread.
        previous_hash: Hash of the message at chain_index - 1, None at index 0.
        read_at: When the recipient read the message, if known.
        attachment_ids: Identifiers of attached files.
        tone_analysis: Verdict that allowed the message through.
    """

    id: UUID
    thread_id: UUID
    family_id: UUID
    sender_id: UUID
    body: str
    sent_at: datetime
    message_hash: str
    chain_index: int
    previous_hash: str | None = None
    read_at: datetime | None = None
    attachment_ids: tuple[str, ...] = ()
    tone_analysis: StoredToneAnalysis = field(
        default_factory=lambda: StoredToneAnalysis(is_hostile=False)
    )

    def __post_init__(self) -> None:
        """Validate chain position invariants."""
        if self.chain_index < 0:
            raise ValueError(f"chain_index must be >= 0, got {self.chain_index}")
        if self.chain_index == 0 and self.previous_hash is not None:
            raise ValueError("Genesis message (chain_index 0) cannot have previous_hash")
        if self.chain_index > 0 and not self.previous_hash:
            raise ValueError(
                f"Message at chain_index {self.chain_index} requires previous_hash"
            )

    @property
    def is_genesis(self) -> bool:
        """True for the first message of a thread."""
        return self.chain_index == 0


@dataclass(frozen=True, eq=True)
class MessageThread:
    """A family conversation thread.

    Messages are not held here; the thread's ordered sequence is implicit
    in the stored messages' chain_index values.

    Attributes:
        id: Unique thread identifier.
        family_id: Owning family.
        subject: Thread subject line.
        created_at: When the thread was created.
    """

    id: UUID
    family_id: UUID
    subject: str
    created_at: datetime
