# backend/bookit/services/profile_service.py
# Service de gestion des profils : lecture avec rafraîchissement des challenges, cycle lecture-modification-écriture.

from __future__ import annotations

import datetime as dt
from typing import Callable, Optional, TypeVar

from bookit.core.errors import ConcurrentUpdateError, ProfileConflictError
from bookit.core.logging_config import extract_user_data, get_loggers
from bookit.core.utils import utcnow
from bookit.db.profile_store import ProfileStore
from bookit.models.profile import Profile
from bookit.services.challenges.challenge_lifecycle import refresh_all_challenges

T = TypeVar("T")

Clock = Callable[[], dt.datetime]


class ProfileService:
    """Service de gestion des profils utilisateur.

    Description:
        Encapsule l'accès au document profil :
        - Lecture (un profil absent est un profil vide)
        - Rafraîchissement opportuniste des challenges à chaque lecture
        - Mutations avec écriture conditionnelle et nouvelles tentatives en cas de conflit
    """

    def __init__(self, store: ProfileStore, clock: Clock = utcnow, max_retries: int = 3):
        """Initialiser le service.

        Args:
            store: Stockage des profils.
            clock: Horloge (renvoie un datetime UTC aware).
            max_retries: Nombre de tentatives du cycle lecture-modification-écriture.
        """
        self.store = store
        self.clock = clock
        self.max_retries = max(1, max_retries)

    async def load(self, user_id: str) -> Profile:
        """Charger le profil brut (sans recalcul)."""
        profile = await self.store.load(user_id)
        return profile if profile is not None else Profile(id=user_id)

    async def get_profile(self, user_id: str) -> Profile:
        """Récupérer le profil avec des challenges à jour.

        Description:
            Recalcule les challenges non terminés. Si quelque chose a changé, tente de
            persister ; un conflit sur cette écriture opportuniste est seulement tracé (la
            prochaine lecture recalculera), le profil calculé est renvoyé quand même.

        Args:
            user_id: Identifiant de l'utilisateur.

        Returns:
            Profile: Profil avec progression fraîche.
        """
        logger_generic, _, data_logger = get_loggers()
        profile = await self.load(user_id)
        now = self.clock()
        changed = refresh_all_challenges(profile, now)
        if not changed:
            return profile

        try:
            profile = await self.store.save(profile, profile.version)
        except ProfileConflictError:
            logger_generic.warning(
                "Profile %s changed during challenge refresh; keeping the stored version", user_id
            )
            return profile

        data_logger.log_data(
            "challenge_refresh",
            {
                "challenges": [
                    {
                        "id": c.id,
                        "current": c.progress.current,
                        "percentage": c.progress.percentage,
                        "status": c.progress.rate.status,
                    }
                    for c in changed
                ]
            },
            extract_user_data(user_id),
        )
        return profile

    async def mutate(self, user_id: str, fn: Callable[[Profile], T]) -> tuple[Profile, T]:
        """Appliquer `fn` au profil et persister, en rejouant le cycle en cas de conflit.

        Description:
            `fn` reçoit un profil fraîchement chargé et le modifie en place ; elle peut lever
            une erreur métier (non trouvé, validation) qui interrompt le cycle sans écrire.
            Rien n'est appliqué à la source de vérité tant que l'écriture n'a pas réussi.

        Args:
            user_id: Identifiant de l'utilisateur.
            fn: Mutation à appliquer, son résultat est renvoyé.

        Returns:
            tuple: (profil enregistré, résultat de `fn`).

        Raises:
            ConcurrentUpdateError: Si toutes les tentatives ont rencontré un conflit.
        """
        logger_generic, _, _ = get_loggers()
        last_conflict: Optional[ProfileConflictError] = None

        for attempt in range(1, self.max_retries + 1):
            profile = await self.load(user_id)
            result = fn(profile)
            try:
                saved = await self.store.save(profile, profile.version)
                return saved, result
            except ProfileConflictError as e:
                last_conflict = e
                logger_generic.info(
                    "Write conflict on profile %s (attempt %d/%d)", user_id, attempt, self.max_retries
                )

        raise ConcurrentUpdateError(
            f"Profile {user_id} is being modified concurrently, please retry",
            {"attempts": self.max_retries},
        ) from last_conflict

    async def update_profile_information(
        self, user_id: str, username: Optional[str] = None, email: Optional[str] = None
    ) -> Profile:
        """Mettre à jour nom d'utilisateur et/ou email."""

        def _apply(profile: Profile) -> None:
            if username is not None:
                profile.profile_information.username = username
            if email is not None:
                profile.profile_information.email = email

        saved, _ = await self.mutate(user_id, _apply)
        return saved
