# backend/bookit/api/dto/reading_log.py
# Entrées des routes « mon journal de lecture ».

from __future__ import annotations

from typing import Optional

from bookit.core.bson_utils import CamelModel
from bookit.models._shared import UtcDatetime
from bookit.models.reading_log import ReadingLogKind


class ReadingLogIn(CamelModel):
    """Nouvelle entrée de journal.

    Attributes:
        book_id (str): Livre concerné.
        title (str): Titre.
        pages_read (int): Pages lues (0 ou négatif accepté).
        notes (str): Texte libre ; "Book Finished" vaut `kind=FINISHED` si `kind` est absent.
        kind (ReadingLogKind | None): Type d'événement.
        date (datetime | None): Date de l'entrée (défaut : maintenant).
        book_thumbnail (str | None): Vignette.
    """

    book_id: str
    title: str = ""
    pages_read: int = 0
    notes: str = ""
    kind: Optional[ReadingLogKind] = None
    date: Optional[UtcDatetime] = None
    book_thumbnail: Optional[str] = None


class ReadingLogPatchIn(CamelModel):
    """Modification d'une entrée existante (champs fournis uniquement)."""

    pages_read: Optional[int] = None
    notes: Optional[str] = None
    kind: Optional[ReadingLogKind] = None
    date: Optional[UtcDatetime] = None
