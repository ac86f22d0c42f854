# backend/bookit/core/utils.py
# Fonctions temporelles basiques (UTC aware) et helpers d'arrondi.

import datetime as dt


def utcnow() -> dt.datetime:
    """Date/heure UTC (timezone-aware).

    Description:
        Retourne `datetime.now(timezone.utc)` avec timezone UTC attachée. C'est l'horloge
        par défaut injectée dans les services (remplaçable en test par une horloge fixe).

    Returns:
        datetime.datetime: Timestamp UTC (aware).
    """
    return dt.datetime.now(dt.timezone.utc)


def ensure_utc(value: dt.datetime) -> dt.datetime:
    """Normaliser un datetime en UTC aware.

    Description:
        Un datetime naïf est interprété comme de l'UTC (pas de conversion d'heure locale).
        Un datetime aware est converti en UTC.

    Args:
        value (datetime.datetime): Date à normaliser.

    Returns:
        datetime.datetime: Date aware en UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc)


def hours_between(start: dt.datetime, end: dt.datetime) -> float:
    """Durée `end - start` exprimée en heures (peut être négative)."""
    return (ensure_utc(end) - ensure_utc(start)).total_seconds() / 3600


def round2(value: float) -> float:
    return round(value, 2)
