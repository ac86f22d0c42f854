import logging

from bookit.db.profile_store import ProfileStore

logger = logging.getLogger("bookit.errors.health")


async def check_profile_store(store: ProfileStore) -> str:
    """
    Vérifie l'accès au stockage des profils

    Returns:
        "ok" si joignable, message d'erreur sinon
    """
    try:
        await store.ping()
        return "ok"

    except Exception as e:
        logger.error(f"Profile store health check failed: {e}")
        return f"error: {str(e)}"
