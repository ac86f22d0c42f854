# backend/bookit/core/errors.py
# Exceptions métier, traduites en réponses HTTP par `exception_handlers`.

from __future__ import annotations

from typing import Any


class BookItError(Exception):
    """Erreur métier de base.

    Attributes:
        code (str): Code stable renvoyé au client.
        http_status (int): Statut HTTP associé.
        details (dict | None): Informations complémentaires (champ fautif, id...).
    """

    code = "BOOKIT_ERROR"
    http_status = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ChallengeValidationError(BookItError):
    """Paramètres de challenge invalides (target <= 0, endDate <= startDate...)."""

    code = "CHALLENGE_INVALID"
    http_status = 422


class ChallengeNotFoundError(BookItError):
    code = "CHALLENGE_NOT_FOUND"
    http_status = 404

    def __init__(self, challenge_id: str):
        super().__init__(f"Challenge not found: {challenge_id}", {"challenge_id": challenge_id})


class ReadingLogEntryNotFoundError(BookItError):
    code = "READING_LOG_ENTRY_NOT_FOUND"
    http_status = 404

    def __init__(self, entry_id: str):
        super().__init__(f"Reading log entry not found: {entry_id}", {"entry_id": entry_id})


class ProfileConflictError(BookItError):
    """Écriture conditionnelle refusée : le profil a changé depuis sa lecture."""

    code = "PROFILE_CONFLICT"
    http_status = 409

    def __init__(self, user_id: str, expected_version: int):
        super().__init__(
            f"Profile {user_id} changed since version {expected_version}",
            {"expected_version": expected_version},
        )
        self.user_id = user_id
        self.expected_version = expected_version


class ConcurrentUpdateError(BookItError):
    """Le cycle lecture-modification-écriture a échoué après toutes les tentatives."""

    code = "CONCURRENT_UPDATE"
    http_status = 409
