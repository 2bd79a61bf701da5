"""Hash utilities for the per-thread message chain.

Every delivered message is hash-linked to its predecessor using SHA-256
over a canonical JSON serialization, so any retroactive edit of a stored
message breaks continuity for that message and every one after it.

Hash input (all keys always present):
    thread_id, family_id, sender_id: UUID strings
    body: original plaintext, byte-for-byte (no normalization)
    sent_at: ISO 8601 string
    chain_index: integer
    previous_hash: predecessor hash, "" for the genesis message
"""

from __future__ import annotations

import hashlib
import json
from datetime import datetime
from typing import Any
from uuid import UUID

from hearthline.domain.models.message import Message

HASH_ALG_NAME: str = "SHA-256"


def canonical_json(data: Any) -> str:
    """Produce deterministic JSON representation for hashing.

    - Sorted: keys are sorted alphabetically (recursive)
    - Compact: no whitespace between elements
    - Unicode-aware: does not escape non-ASCII characters

    Unlike display text, message bodies are hashed without Unicode
    normalization so that a compatibility-equivalent substitution still
    changes the hash.

    Args:
        data: Any JSON-serializable data.

    Returns:
        Canonical JSON string suitable for hashing.

    Example:
        >>> canonical_json({"b": 1, "a": 2})
        '{"a":2,"b":1}'
    """
    return json.dumps(
        data,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


def message_hash_input(
    *,
    thread_id: UUID,
    family_id: UUID,
    sender_id: UUID,
    body: str,
    sent_at: datetime,
    chain_index: int,
    previous_hash: str | None,
) -> dict[str, Any]:
    """Build the hashable field set for one message."""
    return {
        "thread_id": str(thread_id),
        "family_id": str(family_id),
        "sender_id": str(sender_id),
        "body": body,
        "sent_at": sent_at.isoformat(),
        "chain_index": chain_index,
        "previous_hash": previous_hash or "",
    }


def compute_message_hash(
    *,
    thread_id: UUID,
    family_id: UUID,
    sender_id: UUID,
    body: str,
    sent_at: datetime,
    chain_index: int,
    previous_hash: str | None,
) -> str:
    """Compute the SHA-256 message hash.

    Returns:
        Lowercase hexadecimal SHA-256 hash (64 characters).
    """
    hashable = message_hash_input(
        thread_id=thread_id,
        family_id=family_id,
        sender_id=sender_id,
        body=body,
        sent_at=sent_at,
        chain_index=chain_index,
        previous_hash=previous_hash,
    )
    return hashlib.sha256(canonical_json(hashable).encode("utf-8")).hexdigest()


def recompute_message_hash(message: Message) -> str:
    """Recompute a stored message's hash from its own fields."""
    return compute_message_hash(
        thread_id=message.thread_id,
        family_id=message.family_id,
        sender_id=message.sender_id,
        body=message.body,
        sent_at=message.sent_at,
        chain_index=message.chain_index,
        previous_hash=message.previous_hash,
    )


def is_valid_sha256_hex(value: str) -> bool:
    """Check if a string is a 64-character lowercase hexadecimal hash."""
    if len(value) != 64:
        return False
    try:
        int(value, 16)
    except ValueError:
        return False
    return value == value.lower()
