# backend/bookit/services/challenges/challenge_lifecycle.py
# Création, modification et rafraîchissement des challenges autour du moteur de progression.
# Fonctions sans I/O : elles travaillent sur le profil en mémoire fourni par l'appelant.

from __future__ import annotations

import datetime as dt
from typing import Any, Iterable

from bookit.core.bson_utils import new_object_id
from bookit.core.utils import ensure_utc
from bookit.models.challenge import ChallengeProgress, ReadingChallenge, ScheduleStatus
from bookit.models.profile import Profile
from bookit.models.reading_log import ReadingLogItem
from bookit.services.challenge_progress import compute_required_rate, recompute

from .challenge_validator import ChallengeValidator


def build_challenge(
    user_id: str,
    params: dict[str, Any],
    reading_log: Iterable[ReadingLogItem],
    now: dt.datetime,
) -> ReadingChallenge:
    """Construire un nouveau challenge validé.

    Description:
        - Valide target > 0 et endDate > startDate
        - Attribue id, userId, createdAt/updatedAt
        - Calcule le rythme requis, statut initial ON_TRACK
        - Si le challenge a déjà commencé, recalcule tout de suite depuis le journal pour
          qu'un challenge antidaté ne démarre pas à zéro

    Args:
        user_id (str): Propriétaire.
        params (dict): name, type, time_frame, start_date, end_date, target.
        reading_log (Iterable[ReadingLogItem]): Journal du profil.
        now (datetime): Instant de création.

    Returns:
        ReadingChallenge: Challenge prêt à être ajouté au profil.

    Raises:
        ChallengeValidationError: Paramètres invalides.
    """
    now = ensure_utc(now)
    challenge = ReadingChallenge(
        **params,
        id=new_object_id(),
        user_id=user_id,
        progress=ChallengeProgress(),
        created_at=now,
        updated_at=now,
    )
    ChallengeValidator.validate(challenge)

    rate = challenge.progress.rate
    rate.required, rate.unit = compute_required_rate(challenge)
    rate.status = ScheduleStatus.ON_TRACK

    if challenge.start_date <= now:
        challenge = recompute(challenge, reading_log, now)
    return challenge


def apply_changes(
    challenge: ReadingChallenge,
    changes: dict[str, Any],
    reading_log: Iterable[ReadingLogItem],
    now: dt.datetime,
) -> ReadingChallenge:
    """Appliquer des modifications autorisées puis tout recalculer.

    Description:
        Les modifications sont fusionnées sur une copie, revalidées, puis le rythme requis
        est redérivé et un recalcul complet est lancé.

    Args:
        challenge (ReadingChallenge): Challenge existant.
        changes (dict): Champs autorisés (name, target, end_date, type, time_frame).
        reading_log (Iterable[ReadingLogItem]): Journal du profil.
        now (datetime): Instant de la modification.

    Returns:
        ReadingChallenge: Nouveau challenge.

    Raises:
        ChallengeValidationError: Si le challenge fusionné est invalide.
    """
    merged = challenge.model_copy(update=changes, deep=True)
    if "end_date" in changes:
        merged.end_date = ensure_utc(merged.end_date)
    ChallengeValidator.validate(merged)

    merged.progress.rate.required, merged.progress.rate.unit = compute_required_rate(merged)
    return recompute(merged, reading_log, now)


def refresh_all_challenges(profile: Profile, now: dt.datetime) -> list[ReadingChallenge]:
    """Recalculer tous les challenges non terminés d'un profil (en place).

    Description:
        Les challenges à 100 % ou plus sont figés : ni leur progression ni `updatedAt`
        ne bougent.

    Args:
        profile (Profile): Profil à mettre à jour.
        now (datetime): Instant de calcul.

    Returns:
        list[ReadingChallenge]: Challenges dont la progression a changé.
    """
    changed: list[ReadingChallenge] = []
    for i, challenge in enumerate(profile.challenges):
        if challenge.progress.percentage >= 100:
            continue
        updated = recompute(challenge, profile.reading_log, now)
        profile.challenges[i] = updated
        if updated.progress != challenge.progress:
            changed.append(updated)
    return changed
