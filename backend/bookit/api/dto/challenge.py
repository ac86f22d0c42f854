# backend/bookit/api/dto/challenge.py
# Schémas I/O pour les routes « mes challenges » (création, modification).

from __future__ import annotations

from typing import Any, Optional

from pydantic import ConfigDict, Field

from bookit.core.bson_utils import CamelModel
from bookit.models._shared import UtcDatetime
from bookit.models.challenge import ChallengeType, TimeFrame

# Champs modifiables après création.
UPDATABLE_FIELDS = ("name", "target", "end_date", "type", "time_frame")

# Champs de progression qu'un client pourrait tenter d'imposer (ignorés).
PROGRESS_OVERRIDE_FIELDS = ("progress", "current", "percentage")


class ChallengeCreateIn(CamelModel):
    """Entrée de création d'un challenge.

    Attributes:
        name (str): Libellé.
        type (ChallengeType): BOOKS | PAGES.
        time_frame (TimeFrame): WEEK | MONTH | YEAR (JSON `timeframe`).
        start_date (datetime): Début.
        end_date (datetime): Fin (strictement après le début).
        target (int): Objectif (> 0).
    """

    name: str = ""
    type: ChallengeType
    time_frame: TimeFrame = Field(alias="timeframe")
    start_date: UtcDatetime
    end_date: UtcDatetime
    target: int


class ChallengeUpdateIn(CamelModel):
    """Entrée de modification d'un challenge.

    Description:
        Seuls `name`, `target`, `endDate`, `type` et `timeframe` sont modifiables. Les autres
        champs reçus sont conservés dans `model_extra` pour être signalés puis ignorés
        (en particulier toute tentative d'imposer `progress.current`).
    """

    name: Optional[str] = None
    target: Optional[int] = None
    end_date: Optional[UtcDatetime] = None
    type: Optional[ChallengeType] = None
    time_frame: Optional[TimeFrame] = Field(default=None, alias="timeframe")

    model_config = ConfigDict(extra="allow")

    def changes(self) -> dict[str, Any]:
        """Modifications explicitement fournies (attributs Python snake_case)."""
        return {
            field: getattr(self, field)
            for field in UPDATABLE_FIELDS
            if field in self.model_fields_set and getattr(self, field) is not None
        }

    def ignored_fields(self) -> list[str]:
        return sorted((self.model_extra or {}).keys())
