# backend/bookit/services/challenges/challenge_service.py
# Service principal des challenges de lecture : orchestration autour du profil et du moteur.

from __future__ import annotations

from typing import TYPE_CHECKING

from bookit.api.dto.challenge import (
    PROGRESS_OVERRIDE_FIELDS,
    ChallengeCreateIn,
    ChallengeUpdateIn,
)
from bookit.core.errors import ChallengeNotFoundError
from bookit.core.logging_config import get_loggers
from bookit.models.challenge import ReadingChallenge
from bookit.models.profile import Profile

from .challenge_lifecycle import apply_changes, build_challenge, refresh_all_challenges

if TYPE_CHECKING:
    from bookit.services.profile_service import ProfileService


class ChallengeService:
    """Service principal de gestion des challenges de lecture.

    Description:
        Chaque opération d'écriture passe par `ProfileService.mutate` (lecture du profil
        complet, modification en mémoire, écriture conditionnelle). Les lectures passent
        par `ProfileService.get_profile`, qui rafraîchit la progression.
    """

    def __init__(self, profiles: ProfileService):
        """Initialiser le service.

        Args:
            profiles: Service d'accès aux profils (porte aussi l'horloge).
        """
        self.profiles = profiles

    @property
    def clock(self):
        return self.profiles.clock

    async def list_challenges(self, user_id: str) -> list[ReadingChallenge]:
        profile = await self.profiles.get_profile(user_id)
        return profile.challenges

    async def get_challenge(self, user_id: str, challenge_id: str) -> ReadingChallenge:
        """Récupérer un challenge (progression rafraîchie).

        Raises:
            ChallengeNotFoundError: Si l'id n'existe pas dans le profil.
        """
        profile = await self.profiles.get_profile(user_id)
        challenge = profile.find_challenge(challenge_id)
        if challenge is None:
            raise ChallengeNotFoundError(challenge_id)
        return challenge

    async def create_challenge(self, user_id: str, data: ChallengeCreateIn) -> ReadingChallenge:
        """Créer un challenge et l'ajouter au profil.

        Args:
            user_id: Propriétaire.
            data: Paramètres validés par le schéma d'entrée.

        Returns:
            ReadingChallenge: Challenge créé (progression initiale calculée si déjà commencé).

        Raises:
            ChallengeValidationError: target <= 0 ou endDate <= startDate.
        """
        logger_generic, _, _ = get_loggers()
        params = data.model_dump()

        def _create(profile: Profile) -> ReadingChallenge:
            challenge = build_challenge(user_id, params, profile.reading_log, self.clock())
            profile.challenges.append(challenge)
            return challenge

        _, challenge = await self.profiles.mutate(user_id, _create)
        logger_generic.info(
            "Challenge %s created for user %s (%s %s/%s)",
            challenge.id, user_id, challenge.target, challenge.type.value, challenge.time_frame.value,
        )
        return challenge

    async def update_challenge(
        self, user_id: str, challenge_id: str, data: ChallengeUpdateIn
    ) -> ReadingChallenge:
        """Modifier un challenge puis recalculer sa progression.

        Description:
            Les champs non modifiables sont ignorés ; une tentative d'imposer la progression
            est tracée, la progression restant toujours recalculée depuis le journal.

        Raises:
            ChallengeNotFoundError: Si l'id n'existe pas.
            ChallengeValidationError: Si le challenge modifié est invalide.
        """
        logger_generic, _, _ = get_loggers()
        changes = data.changes()
        ignored = data.ignored_fields()
        if any(field in PROGRESS_OVERRIDE_FIELDS for field in ignored):
            logger_generic.warning(
                "Ignoring client-supplied progress for challenge %s (user %s)", challenge_id, user_id
            )
        elif ignored:
            logger_generic.info("Ignoring non-updatable fields %s on challenge %s", ignored, challenge_id)

        def _update(profile: Profile) -> ReadingChallenge:
            for i, challenge in enumerate(profile.challenges):
                if challenge.id == challenge_id:
                    updated = apply_changes(challenge, changes, profile.reading_log, self.clock())
                    profile.challenges[i] = updated
                    return updated
            raise ChallengeNotFoundError(challenge_id)

        _, challenge = await self.profiles.mutate(user_id, _update)
        return challenge

    async def delete_challenge(self, user_id: str, challenge_id: str) -> None:
        """Supprimer définitivement un challenge.

        Raises:
            ChallengeNotFoundError: Si l'id n'existe pas.
        """

        def _delete(profile: Profile) -> None:
            remaining = [c for c in profile.challenges if c.id != challenge_id]
            if len(remaining) == len(profile.challenges):
                raise ChallengeNotFoundError(challenge_id)
            profile.challenges = remaining

        await self.profiles.mutate(user_id, _delete)

    async def refresh_challenges(self, user_id: str) -> list[ReadingChallenge]:
        """Forcer le recalcul et la persistance de tous les challenges non terminés."""

        def _refresh(profile: Profile) -> None:
            refresh_all_challenges(profile, self.clock())

        saved, _ = await self.profiles.mutate(user_id, _refresh)
        return saved.challenges
