# backend/bookit/core/security.py
# Résolution de l'identité : validation du JWT émis par le fournisseur d'identité, dépendance FastAPI `get_current_user_id`.

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from bookit.core.settings import Settings, get_settings

bearer_scheme = HTTPBearer(auto_error=False)


def decode_user_id(token: str, settings: Settings) -> str:
    """Extraire l'identifiant utilisateur d'un JWT.

    Description:
        Vérifie la signature et l'expiration, puis l'audience / l'émetteur s'ils sont
        configurés. Le claim `sub` est l'identifiant stable de l'utilisateur.

    Args:
        token (str): Jeton Bearer.
        settings (Settings): Clé, algorithme, audience, émetteur.

    Returns:
        str: Identifiant utilisateur (`sub`).

    Raises:
        JWTError: Jeton invalide, expiré ou sans `sub` exploitable.
    """
    payload = jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[settings.jwt_algorithm],
        audience=settings.jwt_audience,
        issuer=settings.jwt_issuer,
        options={"verify_aud": settings.jwt_audience is not None},
    )
    user_id = payload.get("sub")
    if not user_id or not isinstance(user_id, str):
        raise JWTError("Token has no usable 'sub' claim")
    return user_id


def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> str:
    """Dépendance FastAPI: identifiant de l'utilisateur courant.

    Raises:
        HTTPException: 401 si le jeton est absent ou invalide.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception

    try:
        return decode_user_id(credentials.credentials, settings)
    except JWTError as e:
        raise credentials_exception from e


# Type alias pour faciliter l'usage
CurrentUserId = Annotated[str, Depends(get_current_user_id)]
