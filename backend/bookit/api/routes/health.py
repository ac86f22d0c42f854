# backend/bookit/api/routes/health.py
# Health check de l'API et de son stockage.

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from bookit.core.health_checks import check_profile_store
from bookit.core.settings import Settings, get_settings
from bookit.db.profile_store import ProfileStore, get_profile_store
from bookit.models.base.health import HealthCheck

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthCheck,
    summary="Health check de l'API",
    description="Retourne le statut de l'API et de ses dépendances (stockage des profils).",
)
async def health(
    store: Annotated[ProfileStore, Depends(get_profile_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> JSONResponse:
    """
    Health check endpoint standard

    Vérifie :
    - Stockage des profils (MongoDB ou mémoire)

    Returns:
        200 si tout OK, 503 si un service est down
    """
    checks = {
        "profile_store": await check_profile_store(store),
    }

    has_errors = any(check != "ok" for check in checks.values())
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE if has_errors else status.HTTP_200_OK

    response = HealthCheck(
        status="error" if has_errors else "ok",
        version=settings.app_version,
        checks=checks,
    )

    return JSONResponse(status_code=status_code, content=response.model_dump(mode="json"))
