# backend/bookit/services/challenge_progress.py
# Moteur de progression des challenges : agrégation du journal, rythmes, écart au planning et statut.
# Fonctions pures (aucune I/O, aucune configuration) ; `now` est toujours passé explicitement.

from __future__ import annotations

import datetime as dt
import logging
from typing import Iterable, Optional, Tuple

from bookit.core.utils import ensure_utc, hours_between, round2
from bookit.models.challenge import (
    ChallengeType,
    ReadingChallenge,
    ScheduleStatus,
    TimeFrame,
)
from bookit.models.reading_log import ReadingLogItem, ReadingLogKind

logger = logging.getLogger("bookit.generic.challenge_progress")

# Écart absolu (en livres ou en pages) en dessous duquel on reste ON_TRACK.
SCHEDULE_TOLERANCE = 0.15

# timeframe -> (heures par unité de rythme, suffixe d'unité)
_PACE_UNITS: dict[TimeFrame, Tuple[float, str]] = {
    TimeFrame.YEAR: (24 * 30, "/month"),
    TimeFrame.MONTH: (24 * 7, "/week"),
    TimeFrame.WEEK: (24, "/day"),
}

# ---------- Helpers ----------

def _to_pace_unit(hours: float, time_frame: TimeFrame) -> Optional[float]:
    """Convertir une durée en heures dans l'unité de rythme du timeframe.

    Args:
        hours (float): Durée en heures.
        time_frame (TimeFrame): YEAR → mois, MONTH → semaines, WEEK → jours.

    Returns:
        float | None: Durée convertie, None si timeframe inconnu.
    """
    unit = _PACE_UNITS.get(time_frame)
    if unit is None:
        return None
    return hours / unit[0]


def rate_unit(challenge_type: ChallengeType, time_frame: TimeFrame) -> str:
    """Libellé d'unité, ex. "books/month" ou "pages/day" ("" si timeframe inconnu)."""
    unit = _PACE_UNITS.get(time_frame)
    if unit is None:
        return ""
    prefix = "books" if challenge_type == ChallengeType.BOOKS else "pages"
    return prefix + unit[1]


def _in_window(entry: ReadingLogItem, challenge: ReadingChallenge) -> bool:
    return challenge.start_date <= ensure_utc(entry.date) <= challenge.end_date

# ---------- Public API ----------

def compute_required_rate(challenge: ReadingChallenge) -> Tuple[float, str]:
    """Rythme nécessaire pour atteindre l'objectif à temps.

    Description:
        Mesure la durée totale du challenge dans l'unité impliquée par le timeframe
        (mois pour YEAR, semaines pour MONTH, jours pour WEEK) puis divise l'objectif.
        Une durée nulle ou négative donne un rythme 0 (la création la refuse en amont).

    Args:
        challenge (ReadingChallenge): Challenge (target, dates, type, timeframe).

    Returns:
        tuple[float, str]: (rythme arrondi à 2 décimales, unité).
    """
    unit = rate_unit(challenge.type, challenge.time_frame)
    span = _to_pace_unit(hours_between(challenge.start_date, challenge.end_date), challenge.time_frame)
    if span is None or span <= 0:
        return 0.0, unit
    return round2(challenge.target / span), unit


def aggregate_progress(challenge: ReadingChallenge, reading_log: Iterable[ReadingLogItem]) -> int:
    """Agréger la progression depuis le journal de lecture.

    Description:
        Ne retient que les entrées datées dans [startDate, endDate] (bornes incluses) :
        - BOOKS → nombre d'entrées de type FINISHED
        - PAGES → somme de `pagesRead` (valeurs nulles ou négatives comprises)
        Type inconnu → 0 (avec un warning).

    Args:
        challenge (ReadingChallenge): Challenge concerné.
        reading_log (Iterable[ReadingLogItem]): Journal complet de l'utilisateur.

    Returns:
        int: Quantité atteinte.
    """
    entries = [e for e in reading_log if _in_window(e, challenge)]

    if challenge.type == ChallengeType.BOOKS:
        return sum(1 for e in entries if e.kind == ReadingLogKind.FINISHED)
    if challenge.type == ChallengeType.PAGES:
        return sum(e.pages_read for e in entries)

    logger.warning("Unknown challenge type %r for challenge %s", challenge.type, challenge.id)
    return 0


def calculate_current_pace(challenge: ReadingChallenge, now: dt.datetime) -> float:
    """Rythme moyen constaté depuis le début du challenge.

    Description:
        Utilise `progress.current` déjà calculé (l'agrégation doit précéder cet appel).
        Renvoie 0 si le challenge n'a pas commencé ou si le diviseur est nul.

    Args:
        challenge (ReadingChallenge): Challenge avec `progress.current` à jour.
        now (datetime): Instant de calcul.

    Returns:
        float: Rythme arrondi à 2 décimales, même unité que `compute_required_rate`.
    """
    elapsed = hours_between(challenge.start_date, now)
    if elapsed <= 0:
        return 0.0

    divisor = _to_pace_unit(elapsed, challenge.time_frame)
    if divisor is None or divisor <= 0:
        return 0.0

    return round2(challenge.progress.current / divisor)


def calculate_schedule_status(
    challenge: ReadingChallenge, now: dt.datetime
) -> Tuple[float, ScheduleStatus]:
    """Écart entre progression attendue et réelle, et statut associé.

    Description:
        - Challenge pas encore commencé → (0, ON_TRACK)
        - Durée totale nulle ou négative → (0, ON_TRACK)
        - attendu = target * écoulé / total ; écart = current - attendu
        - |écart| <= 0.15 → (0, ON_TRACK), sinon AHEAD / BEHIND avec l'écart absolu

    Args:
        challenge (ReadingChallenge): Challenge avec `progress.current` à jour.
        now (datetime): Instant de calcul.

    Returns:
        tuple[float, ScheduleStatus]: (écart >= 0 arrondi à 2 décimales, statut).
    """
    now = ensure_utc(now)
    if now < challenge.start_date:
        return 0.0, ScheduleStatus.ON_TRACK

    total = hours_between(challenge.start_date, challenge.end_date)
    if total <= 0:
        return 0.0, ScheduleStatus.ON_TRACK

    elapsed = hours_between(challenge.start_date, now)
    expected = challenge.target * (elapsed / total)
    diff = challenge.progress.current - expected

    if abs(diff) <= SCHEDULE_TOLERANCE:
        return 0.0, ScheduleStatus.ON_TRACK
    if diff > 0:
        return round2(diff), ScheduleStatus.AHEAD
    return round2(abs(diff)), ScheduleStatus.BEHIND


def recompute(
    challenge: ReadingChallenge,
    reading_log: Iterable[ReadingLogItem],
    now: dt.datetime,
) -> ReadingChallenge:
    """Recalculer entièrement la progression d'un challenge.

    Description:
        Ordre imposé (chaque étape consomme la précédente) :
        1. current ← agrégation du journal
        2. percentage ← current / target * 100 (inchangé si target == 0)
        3. currentPace
        4. scheduleDiff, status
        5. updatedAt ← now
        Le rythme requis et son unité sont aussi rafraîchis. Le challenge d'entrée n'est
        pas modifié ; la fonction est idempotente pour un même (challenge, journal, now).

    Args:
        challenge (ReadingChallenge): Challenge source.
        reading_log (Iterable[ReadingLogItem]): Journal de lecture.
        now (datetime): Instant de calcul.

    Returns:
        ReadingChallenge: Copie avec `progress` et `updated_at` remplacés.
    """
    updated = challenge.model_copy(deep=True)
    progress = updated.progress

    progress.current = aggregate_progress(updated, reading_log)
    if updated.target != 0:
        progress.percentage = round2(progress.current / updated.target * 100)

    progress.rate.required, progress.rate.unit = compute_required_rate(updated)
    progress.rate.current_pace = calculate_current_pace(updated, now)
    progress.rate.schedule_diff, progress.rate.status = calculate_schedule_status(updated, now)

    updated.updated_at = ensure_utc(now)
    return updated
