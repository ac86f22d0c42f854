# backend/bookit/models/reading_log.py
# Entrée du journal de lecture (écrite par les flux démarrer / avancer / terminer / retirer un livre).

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import Field, model_validator

from bookit.core.bson_utils import CamelModel
from bookit.core.utils import utcnow
from bookit.models._shared import UtcDatetime

# Ancienne convention : un livre terminé était signalé uniquement par ce texte dans `notes`.
BOOK_FINISHED_NOTE = "Book Finished"


class ReadingLogKind(str, Enum):
    STARTED = "STARTED"
    PROGRESS = "PROGRESS"
    FINISHED = "FINISHED"
    REMOVED = "REMOVED"


def kind_from_notes(notes: str | None) -> ReadingLogKind:
    """Déduire le type d'événement d'une entrée qui n'en porte pas."""
    if notes == BOOK_FINISHED_NOTE:
        return ReadingLogKind.FINISHED
    return ReadingLogKind.PROGRESS


class ReadingLogItem(CamelModel):
    """Entrée du journal de lecture.

    Description:
        Le moteur de challenges ne fait que lire ces entrées. Le champ `kind` est le seul
        signal utilisé pour compter un livre terminé ; les entrées héritées sans `kind`
        sont normalisées à la lecture à partir de `notes`.

    Attributes:
        id (str | None): Identifiant de l'entrée (alias `_id`).
        book_id (str): Livre concerné.
        title (str): Titre affiché.
        date (datetime): Horodatage de l'entrée (UTC).
        book_thumbnail (str | None): Vignette.
        pages_read (int): Pages lues (peut être 0 ou négatif, ex. livre retiré).
        notes (str): Texte libre.
        kind (ReadingLogKind): STARTED | PROGRESS | FINISHED | REMOVED.
    """
    id: Optional[str] = Field(default=None, alias="_id")
    book_id: str = ""
    title: str = ""
    date: UtcDatetime = Field(default_factory=utcnow)
    book_thumbnail: Optional[str] = None
    pages_read: int = 0
    notes: str = ""
    kind: ReadingLogKind = ReadingLogKind.PROGRESS

    @model_validator(mode="before")
    @classmethod
    def _default_kind(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("kind") is None:
            data = {**data, "kind": kind_from_notes(data.get("notes"))}
        return data
