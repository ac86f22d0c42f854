# backend/bookit/services/reading_log_service.py
# Écriture du journal de lecture ; chaque écriture recalcule les challenges dans la même mutation.

from __future__ import annotations

from bookit.api.dto.reading_log import ReadingLogIn, ReadingLogPatchIn
from bookit.core.bson_utils import new_object_id
from bookit.core.errors import ReadingLogEntryNotFoundError
from bookit.core.utils import ensure_utc
from bookit.models.profile import Profile
from bookit.models.reading_log import (
    BOOK_FINISHED_NOTE,
    ReadingLogItem,
    ReadingLogKind,
    kind_from_notes,
)
from bookit.services.challenges.challenge_lifecycle import refresh_all_challenges
from bookit.services.profile_service import ProfileService


class ReadingLogService:
    """Service du journal de lecture.

    Description:
        Les flux démarrer / avancer / terminer / retirer un livre passent par ici. Le type
        d'événement (`kind`) est fixé à l'écriture ; s'il est absent, il est déduit de
        l'ancienne convention sur `notes`.
    """

    def __init__(self, profiles: ProfileService):
        self.profiles = profiles

    async def list_entries(self, user_id: str) -> list[ReadingLogItem]:
        """Lister les entrées, les plus récentes d'abord."""
        profile = await self.profiles.load(user_id)
        return sorted(profile.reading_log, key=lambda e: e.date, reverse=True)

    async def add_entry(self, user_id: str, data: ReadingLogIn) -> ReadingLogItem:
        """Ajouter une entrée au journal.

        Args:
            user_id: Identifiant de l'utilisateur.
            data: Contenu de l'entrée.

        Returns:
            ReadingLogItem: Entrée enregistrée (id et date attribués).
        """

        def _add(profile: Profile) -> ReadingLogItem:
            now = self.profiles.clock()
            entry = ReadingLogItem(
                id=new_object_id(),
                book_id=data.book_id,
                title=data.title,
                date=data.date or now,
                book_thumbnail=data.book_thumbnail,
                pages_read=data.pages_read,
                notes=data.notes,
                kind=data.kind or kind_from_notes(data.notes),
            )
            profile.reading_log.append(entry)
            refresh_all_challenges(profile, now)
            return entry

        _, entry = await self.profiles.mutate(user_id, _add)
        return entry

    async def update_entry(
        self, user_id: str, entry_id: str, data: ReadingLogPatchIn
    ) -> ReadingLogItem:
        """Modifier une entrée existante.

        Raises:
            ReadingLogEntryNotFoundError: Si l'id n'existe pas.
        """

        def _update(profile: Profile) -> ReadingLogItem:
            entry = profile.find_log_entry(entry_id)
            if entry is None:
                raise ReadingLogEntryNotFoundError(entry_id)
            if data.pages_read is not None:
                entry.pages_read = data.pages_read
            if data.notes is not None:
                entry.notes = data.notes
            if data.date is not None:
                entry.date = ensure_utc(data.date)
            if data.kind is not None:
                entry.kind = data.kind
            elif data.notes == BOOK_FINISHED_NOTE:
                entry.kind = ReadingLogKind.FINISHED
            refresh_all_challenges(profile, self.profiles.clock())
            return entry

        _, entry = await self.profiles.mutate(user_id, _update)
        return entry

    async def delete_entry(self, user_id: str, entry_id: str) -> None:
        """Supprimer une entrée.

        Raises:
            ReadingLogEntryNotFoundError: Si l'id n'existe pas.
        """

        def _delete(profile: Profile) -> None:
            remaining = [e for e in profile.reading_log if e.id != entry_id]
            if len(remaining) == len(profile.reading_log):
                raise ReadingLogEntryNotFoundError(entry_id)
            profile.reading_log = remaining
            refresh_all_challenges(profile, self.profiles.clock())

        await self.profiles.mutate(user_id, _delete)
