# backend/bookit/db/profile_store.py
# Stockage des profils (un document par utilisateur) avec écriture conditionnelle sur `version`.

from __future__ import annotations

import asyncio
import copy
from functools import lru_cache
from typing import Any, Dict, Optional, Protocol

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import DuplicateKeyError

from bookit.core.bson_utils import dump_mongo
from bookit.core.errors import ProfileConflictError
from bookit.core.settings import Settings, get_settings
from bookit.models.profile import Profile


class ProfileStore(Protocol):
    """Contrat de stockage des profils.

    Description:
        `save` est une écriture conditionnelle : elle n'aboutit que si la version stockée
        est encore `expected_version`, sinon elle lève `ProfileConflictError`. La version
        0 désigne un profil jamais enregistré.
    """

    async def load(self, user_id: str) -> Optional[Profile]: ...

    async def save(self, profile: Profile, expected_version: int) -> Profile: ...

    async def ping(self) -> bool: ...


def _next_version(profile: Profile, expected_version: int) -> tuple[Profile, Dict[str, Any]]:
    saved = profile.model_copy(update={"version": expected_version + 1})
    return saved, dump_mongo(saved)


class MongoProfileStore:
    """Profils dans une collection MongoDB, `_id` = identifiant utilisateur."""

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    async def load(self, user_id: str) -> Optional[Profile]:
        doc = await self.collection.find_one({"_id": user_id})
        if doc is None:
            return None
        return Profile.model_validate(doc)

    async def save(self, profile: Profile, expected_version: int) -> Profile:
        """Remplacer le document si sa version est toujours `expected_version`.

        Description:
            - Version 0 : upsert, accepté aussi pour un document hérité sans champ `version`.
              Si un autre écrivain a créé le document entre-temps, l'insert échoue sur `_id`.
            - Sinon : `replace_one` filtré sur la version attendue ; aucun document trouvé
              signifie qu'un autre écrivain est passé.

        Raises:
            ProfileConflictError: Si la version a changé depuis la lecture.
        """
        saved, doc = _next_version(profile, expected_version)

        if expected_version == 0:
            query = {
                "_id": profile.id,
                "$or": [{"version": 0}, {"version": {"$exists": False}}],
            }
            try:
                await self.collection.replace_one(query, doc, upsert=True)
            except DuplicateKeyError as e:
                raise ProfileConflictError(profile.id, expected_version) from e
            return saved

        result = await self.collection.replace_one(
            {"_id": profile.id, "version": expected_version}, doc
        )
        if result.matched_count == 0:
            raise ProfileConflictError(profile.id, expected_version)
        return saved

    async def ping(self) -> bool:
        await self.collection.database.command("ping")
        return True


class InMemoryProfileStore:
    """Profils en mémoire (développement et tests), même contrat que `MongoProfileStore`.

    Les documents sont stockés sérialisés : chaque lecture renvoie une copie indépendante.
    """

    def __init__(self):
        self._docs: Dict[str, Dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    async def load(self, user_id: str) -> Optional[Profile]:
        doc = self._docs.get(user_id)
        if doc is None:
            return None
        return Profile.model_validate(copy.deepcopy(doc))

    async def save(self, profile: Profile, expected_version: int) -> Profile:
        async with self._lock:
            current = self._docs.get(profile.id)
            current_version = current.get("version", 0) if current else 0
            if current_version != expected_version:
                raise ProfileConflictError(profile.id, expected_version)
            saved, doc = _next_version(profile, expected_version)
            self._docs[profile.id] = doc
            return saved

    async def ping(self) -> bool:
        return True


def build_profile_store(settings: Settings) -> ProfileStore:
    """Construit le store configuré (`profile_store_backend` = mongodb | memory)."""
    if settings.profile_store_backend == "memory":
        return InMemoryProfileStore()
    if settings.profile_store_backend == "mongodb":
        from bookit.db.mongodb import get_collection

        return MongoProfileStore(get_collection(settings.profiles_collection))
    raise ValueError(f"Unknown profile store backend: {settings.profile_store_backend}")


@lru_cache
def get_profile_store() -> ProfileStore:
    """Store partagé par l'application (un seul par processus)."""
    return build_profile_store(get_settings())
