# backend/tests/test_profile_service.py
# Cycle lecture-modification-écriture, conflits de version et rafraîchissement à la lecture.

import asyncio
import datetime as dt

import pytest

from bookit.core.errors import ConcurrentUpdateError, ProfileConflictError
from bookit.db.profile_store import InMemoryProfileStore
from bookit.models.challenge import ChallengeType, TimeFrame
from bookit.models.profile import Profile
from bookit.models.reading_log import ReadingLogItem
from bookit.services.challenges import build_challenge
from bookit.services.profile_service import ProfileService


def utc(*args) -> dt.datetime:
    return dt.datetime(*args, tzinfo=dt.timezone.utc)


NOW = utc(2024, 1, 8)


class FlakyStore(InMemoryProfileStore):
    """Store qui simule `conflicts` écritures concurrentes avant d'accepter."""

    def __init__(self, conflicts: int):
        super().__init__()
        self.conflicts = conflicts
        self.save_calls = 0

    async def save(self, profile, expected_version):
        self.save_calls += 1
        if self.conflicts > 0:
            self.conflicts -= 1
            raise ProfileConflictError(profile.id, expected_version)
        return await super().save(profile, expected_version)


def _service(store, max_retries=3) -> ProfileService:
    return ProfileService(store, clock=lambda: NOW, max_retries=max_retries)


def _seeded_profile() -> Profile:
    challenge = build_challenge(
        "user-1",
        {
            "name": "January",
            "type": ChallengeType.PAGES,
            "time_frame": TimeFrame.MONTH,
            "start_date": utc(2024, 1, 1),
            "end_date": utc(2024, 1, 31),
            "target": 1000,
        },
        [],
        utc(2024, 1, 1),
    )
    return Profile(
        id="user-1",
        reading_log=[ReadingLogItem(id="e1", book_id="b1", date=utc(2024, 1, 2), pages_read=120)],
        challenges=[challenge],
    )


# ---------- store ----------

def test_in_memory_store_rejects_stale_version():
    store = InMemoryProfileStore()

    async def scenario():
        first = await store.save(Profile(id="user-1"), 0)
        assert first.version == 1

        a = await store.load("user-1")
        b = await store.load("user-1")
        await store.save(a, a.version)
        with pytest.raises(ProfileConflictError):
            await store.save(b, b.version)

        stored = await store.load("user-1")
        assert stored.version == 2

    asyncio.run(scenario())


def test_in_memory_store_returns_independent_copies():
    store = InMemoryProfileStore()

    async def scenario():
        await store.save(Profile(id="user-1"), 0)
        loaded = await store.load("user-1")
        loaded.profile_information.username = "changed"
        again = await store.load("user-1")
        assert again.profile_information.username is None

    asyncio.run(scenario())


# ---------- load / get_profile ----------

def test_missing_profile_is_empty():
    store = InMemoryProfileStore()
    service = _service(store)

    profile = asyncio.run(service.get_profile("nobody"))

    assert profile.id == "nobody"
    assert profile.version == 0
    assert profile.challenges == []
    assert asyncio.run(store.load("nobody")) is None


def test_get_profile_refreshes_and_persists():
    store = InMemoryProfileStore()
    service = _service(store)
    asyncio.run(store.save(_seeded_profile(), 0))

    profile = asyncio.run(service.get_profile("user-1"))

    assert profile.challenges[0].progress.current == 120
    assert profile.challenges[0].updated_at == NOW
    stored = asyncio.run(store.load("user-1"))
    assert stored.version == 2
    assert stored.challenges[0].progress.current == 120


def test_get_profile_conflict_still_returns_fresh_progress():
    store = FlakyStore(conflicts=0)
    asyncio.run(store.save(_seeded_profile(), 0))
    store.conflicts = 1
    service = _service(store)

    profile = asyncio.run(service.get_profile("user-1"))

    assert profile.challenges[0].progress.current == 120
    stored = asyncio.run(store.load("user-1"))
    assert stored.version == 1
    assert stored.challenges[0].progress.current == 0


# ---------- mutate ----------

def test_mutate_retries_after_conflict():
    store = FlakyStore(conflicts=2)
    service = _service(store, max_retries=3)
    calls = []

    def _rename(profile):
        calls.append(profile.version)
        profile.profile_information.username = "reader"
        return "done"

    saved, result = asyncio.run(service.mutate("user-1", _rename))

    assert result == "done"
    assert len(calls) == 3
    assert store.save_calls == 3
    assert saved.version == 1
    assert saved.profile_information.username == "reader"


def test_mutate_gives_up_after_max_retries():
    store = FlakyStore(conflicts=10)
    service = _service(store, max_retries=3)

    with pytest.raises(ConcurrentUpdateError) as exc:
        asyncio.run(service.mutate("user-1", lambda p: None))

    assert exc.value.http_status == 409
    assert exc.value.code == "CONCURRENT_UPDATE"
    assert store.save_calls == 3
    assert asyncio.run(store.load("user-1")) is None


def test_mutate_business_error_does_not_write():
    store = InMemoryProfileStore()
    service = _service(store)

    def _fail(profile):
        profile.profile_information.username = "half-done"
        raise ValueError("boom")

    with pytest.raises(ValueError):
        asyncio.run(service.mutate("user-1", _fail))
    assert asyncio.run(store.load("user-1")) is None


def test_update_profile_information_keeps_missing_fields():
    store = InMemoryProfileStore()
    service = _service(store)

    asyncio.run(service.update_profile_information("user-1", username="reader", email="r@example.com"))
    profile = asyncio.run(service.update_profile_information("user-1", username="new-name"))

    assert profile.profile_information.username == "new-name"
    assert profile.profile_information.email == "r@example.com"
    assert profile.version == 2
