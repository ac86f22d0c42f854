# backend/bookit/models/profile.py
# Document Mongo « profil » : un document par utilisateur, lu et réécrit en entier.

from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from bookit.core.bson_utils import CamelModel, MongoBaseModel
from bookit.models.challenge import ReadingChallenge
from bookit.models.reading_log import ReadingLogItem


class ProfileInformation(CamelModel):
    username: Optional[str] = None
    email: Optional[str] = None


class Profile(MongoBaseModel):
    """Profil utilisateur.

    Description:
        `_id` est l'identifiant fourni par le fournisseur d'identité. `version` est le jeton
        de concurrence optimiste : il vaut 0 pour un profil jamais enregistré et est
        incrémenté à chaque écriture réussie.

    Attributes:
        profile_information (ProfileInformation): Nom d'utilisateur, email.
        reading_log (list[ReadingLogItem]): Journal de lecture.
        challenges (list[ReadingChallenge]): Challenges de lecture.
        version (int): Jeton de concurrence.
    """
    profile_information: ProfileInformation = Field(default_factory=ProfileInformation)
    reading_log: List[ReadingLogItem] = Field(default_factory=list)
    challenges: List[ReadingChallenge] = Field(default_factory=list)
    version: int = 0

    def find_challenge(self, challenge_id: str) -> Optional[ReadingChallenge]:
        return next((c for c in self.challenges if c.id == challenge_id), None)

    def find_log_entry(self, entry_id: str) -> Optional[ReadingLogItem]:
        return next((e for e in self.reading_log if e.id == entry_id), None)
