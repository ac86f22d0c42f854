# backend/bookit/models/challenge.py
# Challenge de lecture d'un utilisateur et son cache de progression (recalculé par le moteur).

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field, computed_field

from bookit.core.bson_utils import CamelModel
from bookit.core.utils import utcnow
from bookit.models._shared import UtcDatetime


class ChallengeType(str, Enum):
    """Unité de l'objectif."""
    BOOKS = "BOOKS"
    PAGES = "PAGES"


class TimeFrame(str, Enum):
    """Granularité utilisée pour exprimer le rythme (pas la durée réelle du challenge)."""
    WEEK = "WEEK"
    MONTH = "MONTH"
    YEAR = "YEAR"


class ScheduleStatus(str, Enum):
    AHEAD = "AHEAD"
    BEHIND = "BEHIND"
    ON_TRACK = "ON_TRACK"


class ChallengeRate(CamelModel):
    """Rythmes d'un challenge.

    Attributes:
        required (float): Rythme nécessaire pour finir à temps (unité `unit`).
        current_pace (float): Rythme moyen constaté depuis le début.
        schedule_diff (float): Écart absolu entre progression attendue et réelle (>= 0).
        unit (str): ex. "books/month", "pages/week".
        status (ScheduleStatus): AHEAD | BEHIND | ON_TRACK.
    """
    required: float = 0.0
    current_pace: float = 0.0
    schedule_diff: float = 0.0
    unit: str = ""
    status: ScheduleStatus = ScheduleStatus.ON_TRACK


class ChallengeProgress(CamelModel):
    """Cache de progression, toujours dérivé du journal de lecture.

    Attributes:
        current (int): Quantité atteinte (non bornée).
        percentage (float): `current / target * 100` (non borné, peut dépasser 100).
        rate (ChallengeRate): Rythmes et statut.
    """
    current: int = 0
    percentage: float = 0.0
    rate: ChallengeRate = Field(default_factory=ChallengeRate)

    @computed_field
    @property
    def display_percentage(self) -> float:
        """Pourcentage borné à [0, 100] pour l'affichage."""
        return min(100.0, max(0.0, self.percentage))


class ReadingChallenge(CamelModel):
    """Objectif de lecture déclaré par un utilisateur.

    Description:
        Stocké dans la liste `challenges` du profil. Le champ `progress` n'est qu'un cache
        du dernier calcul du moteur ; la vérité reste le journal de lecture.

    Attributes:
        id (str): Identifiant opaque, immuable.
        user_id (str): Propriétaire, immuable.
        name (str): Libellé libre.
        type (ChallengeType): BOOKS | PAGES.
        time_frame (TimeFrame): WEEK | MONTH | YEAR (alias JSON `timeframe`).
        start_date (datetime): Début (UTC).
        end_date (datetime): Fin (UTC), strictement après `start_date`.
        target (int): Objectif (> 0) dans l'unité `type`.
        progress (ChallengeProgress): Dernier calcul.
        created_at (datetime): Création.
        updated_at (datetime): Dernier recalcul ou modification.
    """
    id: Optional[str] = None
    user_id: Optional[str] = None
    name: str = ""
    type: ChallengeType
    time_frame: TimeFrame = Field(alias="timeframe")
    start_date: UtcDatetime
    end_date: UtcDatetime
    target: int
    progress: ChallengeProgress = Field(default_factory=ChallengeProgress)
    created_at: UtcDatetime = Field(default_factory=utcnow)
    updated_at: UtcDatetime = Field(default_factory=utcnow)
