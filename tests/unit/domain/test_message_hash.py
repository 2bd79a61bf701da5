"""Unit tests for message hash utilities.

Tests for canonical JSON serialization, message hash computation and
recomputation from stored messages.
"""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

import pytest

THREAD_ID = UUID("11111111-1111-4111-8111-111111111111")
FAMILY_ID = UUID("22222222-2222-4222-8222-222222222222")
SENDER_ID = UUID("33333333-3333-4333-8333-333333333333")
SENT_AT = datetime(2026, 1, 1, 9, 30, tzinfo=timezone.utc)


def _hash(**overrides: object) -> str:
    from hearthline.domain.services.message_hash import compute_message_hash

    fields: dict[str, object] = {
        "thread_id": THREAD_ID,
        "family_id": FAMILY_ID,
        "sender_id": SENDER_ID,
        "body": "Pickup is at 5pm on Friday.",
        "sent_at": SENT_AT,
        "chain_index": 0,
        "previous_hash": None,
    }
    fields.update(overrides)
    return compute_message_hash(**fields)  # type: ignore[arg-type]


class TestCanonicalJson:
    """Tests for canonical_json()."""

    def test_keys_sorted_recursively(self) -> None:
        """Keys are sorted at every level."""
        from hearthline.domain.services.message_hash import canonical_json

        data = {"zebra": 1, "apple": {"beta": 2, "alpha": 3}}
        assert canonical_json(data) == '{"apple":{"alpha":3,"beta":2},"zebra":1}'

    def test_compact_separators(self) -> None:
        """No whitespace between elements."""
        from hearthline.domain.services.message_hash import canonical_json

        result = canonical_json({"key": "value", "items": [1, 2]})
        assert " " not in result

    def test_unicode_not_escaped(self) -> None:
        """Non-ASCII characters are kept as-is."""
        from hearthline.domain.services.message_hash import canonical_json

        assert canonical_json({"body": "café"}) == '{"body":"café"}'

    def test_nan_rejected(self) -> None:
        """NaN has no canonical form."""
        from hearthline.domain.services.message_hash import canonical_json

        with pytest.raises(ValueError):
            canonical_json({"x": float("nan")})


class TestComputeMessageHash:
    """Tests for compute_message_hash()."""

    def test_hash_is_lowercase_sha256_hex(self) -> None:
        """Hash is 64 lowercase hex characters."""
        from hearthline.domain.services.message_hash import is_valid_sha256_hex

        digest = _hash()
        assert len(digest) == 64
        assert is_valid_sha256_hex(digest)

    def test_hash_is_deterministic(self) -> None:
        """Same fields produce the same hash."""
        assert _hash() == _hash()

    def test_genesis_previous_hash_none_equals_empty(self) -> None:
        """Genesis messages hash previous_hash as the empty string."""
        assert _hash(previous_hash=None) == _hash(previous_hash="")

    @pytest.mark.parametrize(
        "override",
        [
            {"body": "Pickup is at 6pm on Friday."},
            {"chain_index": 1, "previous_hash": "a" * 64},
            {"sent_at": datetime(2026, 1, 1, 9, 31, tzinfo=timezone.utc)},
            {"sender_id": UUID("44444444-4444-4444-8444-444444444444")},
        ],
    )
    def test_any_field_change_changes_hash(self, override: dict[str, object]) -> None:
        """Every hashed field contributes to the digest."""
        assert _hash(**override) != _hash()

    def test_body_is_not_unicode_normalized(self) -> None:
        """A compatibility-equivalent substitution still changes the hash."""
        assert _hash(body="ﬁle the form") != _hash(body="file the form")

    def test_whitespace_is_significant(self) -> None:
        """Bodies are hashed byte-for-byte."""
        assert _hash(body="See you soon") != _hash(body="See you  soon")


class TestRecomputeMessageHash:
    """Tests for recompute_message_hash()."""

    def test_recompute_matches_stored_hash(self) -> None:
        """A correctly built message recomputes to its own hash."""
        from hearthline.domain.services.message_hash import recompute_message_hash
        from tests.helpers import make_chain

        for message in make_chain(["one", "two", "three"]):
            assert recompute_message_hash(message) == message.message_hash

    def test_recompute_detects_body_edit(self) -> None:
        """Editing a body after hashing is detectable."""
        from dataclasses import replace

        from hearthline.domain.services.message_hash import recompute_message_hash
        from tests.helpers import make_message

        message = make_message(body="I'll pay half.")
        edited = replace(message, body="I'll pay nothing.")

        assert recompute_message_hash(edited) != edited.message_hash


class TestIsValidSha256Hex:
    """Tests for is_valid_sha256_hex()."""

    def test_rejects_wrong_length(self) -> None:
        from hearthline.domain.services.message_hash import is_valid_sha256_hex

        assert not is_valid_sha256_hex("abc")

    def test_rejects_uppercase(self) -> None:
        from hearthline.domain.services.message_hash import is_valid_sha256_hex

        assert not is_valid_sha256_hex("A" * 64)

    def test_rejects_non_hex(self) -> None:
        from hearthline.domain.services.message_hash import is_valid_sha256_hex

        assert not is_valid_sha256_hex("g" * 64)
