"""Unit tests for the in-memory message and thread repositories."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from hearthline.domain.errors.chain import (
    ChainAppendConflictError,
    ChainPersistenceError,
)
from hearthline.domain.models.message import MessageThread
from hearthline.infrastructure.stubs import MessageRepositoryStub, ThreadRepositoryStub
from tests.helpers import make_chain, make_message


class TestMessageRepositoryStub:
    """Tests for append-only storage."""

    async def test_appends_in_chain_order(self) -> None:
        repo = MessageRepositoryStub()
        chain = make_chain(["one", "two", "three"])

        for message in chain:
            await repo.append(message)

        stored = await repo.list_by_thread(chain[0].thread_id)
        assert [m.chain_index for m in stored] == [0, 1, 2]

    async def test_rejects_stale_chain_index(self) -> None:
        repo = MessageRepositoryStub()
        chain = make_chain(["one", "two"])
        await repo.append(chain[0])

        stale = make_message(
            body="late",
            chain_index=0,
            thread_id=chain[0].thread_id,
            family_id=chain[0].family_id,
        )
        with pytest.raises(ChainAppendConflictError) as exc_info:
            await repo.append(stale)

        assert exc_info.value.expected_index == 1

    async def test_simulated_outage(self) -> None:
        repo = MessageRepositoryStub()
        repo.set_fail_appends(True)
        message = make_message()

        with pytest.raises(ChainPersistenceError):
            await repo.append(message)

        assert await repo.list_by_thread(message.thread_id) == []

    async def test_list_by_thread_returns_copy(self) -> None:
        repo = MessageRepositoryStub()
        message = make_message()
        await repo.append(message)

        listed = await repo.list_by_thread(message.thread_id)
        listed.clear()

        assert len(await repo.list_by_thread(message.thread_id)) == 1

    async def test_list_by_family_newest_first(self) -> None:
        repo = MessageRepositoryStub()
        family_id = uuid4()
        start = datetime(2026, 3, 1, tzinfo=timezone.utc)
        first_thread = make_chain(["a", "b"], family_id=family_id, start=start)
        second_thread = make_chain(
            ["c"], family_id=family_id, start=start + timedelta(seconds=90)
        )
        other_family = make_chain(["z"])

        for message in first_thread + second_thread + other_family:
            await repo.append(message)

        listed = await repo.list_by_family(family_id)

        assert [m.body for m in listed] == ["c", "b", "a"]


class TestThreadRepositoryStub:
    """Tests for thread lookup and creation."""

    async def test_find_or_create_is_idempotent(self) -> None:
        repo = ThreadRepositoryStub()
        family_id = uuid4()

        first = await repo.find_or_create(family_id, "Family conversation")
        second = await repo.find_or_create(family_id, "Ignored subject")

        assert first == second
        assert second.subject == "Family conversation"
        assert await repo.get(first.id) == first

    async def test_families_get_separate_threads(self) -> None:
        repo = ThreadRepositoryStub()

        first = await repo.find_or_create(uuid4(), "Family conversation")
        second = await repo.find_or_create(uuid4(), "Family conversation")

        assert first.id != second.id

    async def test_get_unknown_thread(self) -> None:
        assert await ThreadRepositoryStub().get(uuid4()) is None

    async def test_added_thread_is_preferred_when_oldest(self) -> None:
        repo = ThreadRepositoryStub()
        family_id = uuid4()
        existing = MessageThread(
            id=uuid4(),
            family_id=family_id,
            subject="School",
            created_at=datetime(2025, 9, 1, tzinfo=timezone.utc),
        )
        await repo.add(existing)

        assert await repo.find_or_create(family_id, "Family conversation") == existing
