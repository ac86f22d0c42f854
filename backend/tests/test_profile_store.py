# backend/tests/test_profile_store.py
# Écriture conditionnelle de MongoProfileStore sur une collection simulée.

import asyncio

import pytest
from pymongo.errors import DuplicateKeyError

from bookit.core.errors import ProfileConflictError
from bookit.db.profile_store import MongoProfileStore
from bookit.models.profile import Profile


class MockCollection:
    """Collection minimale : find_one / replace_one sur `_id`, avec les filtres utilisés par le store."""

    class Result:
        def __init__(self, matched_count):
            self.matched_count = matched_count

    def __init__(self, docs=None):
        self.docs = {d["_id"]: dict(d) for d in (docs or [])}
        self.queries = []

    @staticmethod
    def _matches(doc, query):
        for key, expected in query.items():
            if key == "$or":
                if not any(MockCollection._matches(doc, q) for q in expected):
                    return False
            elif isinstance(expected, dict) and "$exists" in expected:
                if (key in doc) != expected["$exists"]:
                    return False
            elif doc.get(key) != expected:
                return False
        return True

    async def find_one(self, query):
        return self.docs.get(query["_id"])

    async def replace_one(self, query, doc, upsert=False):
        self.queries.append(query)
        current = self.docs.get(query["_id"])
        if current is not None and self._matches(current, query):
            self.docs[query["_id"]] = dict(doc)
            return self.Result(1)
        if upsert:
            if current is not None:
                # filtre non satisfait mais `_id` déjà pris : l'insert échoue
                raise DuplicateKeyError("E11000 duplicate key error")
            self.docs[query["_id"]] = dict(doc)
            return self.Result(0)
        return self.Result(0)


def test_first_save_inserts_version_1():
    collection = MockCollection()
    store = MongoProfileStore(collection)

    saved = asyncio.run(store.save(Profile(id="user-1"), 0))

    assert saved.version == 1
    assert collection.docs["user-1"]["version"] == 1
    loaded = asyncio.run(store.load("user-1"))
    assert loaded.id == "user-1"
    assert loaded.version == 1


def test_concurrent_creation_is_a_conflict():
    collection = MockCollection()
    store = MongoProfileStore(collection)
    asyncio.run(store.save(Profile(id="user-1"), 0))

    with pytest.raises(ProfileConflictError) as exc:
        asyncio.run(store.save(Profile(id="user-1"), 0))
    assert exc.value.expected_version == 0
    assert collection.docs["user-1"]["version"] == 1


def test_stale_version_is_a_conflict():
    collection = MockCollection()
    store = MongoProfileStore(collection)
    asyncio.run(store.save(Profile(id="user-1"), 0))

    a = asyncio.run(store.load("user-1"))
    b = asyncio.run(store.load("user-1"))
    a.profile_information.username = "first"
    b.profile_information.username = "second"

    assert asyncio.run(store.save(a, a.version)).version == 2
    with pytest.raises(ProfileConflictError):
        asyncio.run(store.save(b, b.version))

    assert collection.queries[-1] == {"_id": "user-1", "version": 1}
    assert asyncio.run(store.load("user-1")).profile_information.username == "first"


def test_legacy_document_without_version_is_replaced():
    collection = MockCollection([{"_id": "user-1", "profileInformation": {"username": "old"}}])
    store = MongoProfileStore(collection)

    legacy = asyncio.run(store.load("user-1"))
    assert legacy.version == 0
    legacy.profile_information.username = "migrated"

    saved = asyncio.run(store.save(legacy, legacy.version))

    assert saved.version == 1
    assert collection.docs["user-1"]["version"] == 1
    assert collection.docs["user-1"]["profileInformation"]["username"] == "migrated"


def test_missing_profile_loads_as_none():
    store = MongoProfileStore(MockCollection())
    assert asyncio.run(store.load("nobody")) is None
