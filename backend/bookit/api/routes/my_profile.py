# backend/bookit/api/routes/my_profile.py
# Routes "mon profil" : lecture (avec challenges recalculés) et mise à jour des informations.

from typing import Annotated, Optional

from fastapi import APIRouter, Body, Depends, status

from bookit.api.deps import ProfileServiceDep
from bookit.core.bson_utils import CamelModel
from bookit.core.security import CurrentUserId, get_current_user_id
from bookit.models.profile import Profile

router = APIRouter(
    prefix="/my/profile", tags=["my_profile"], dependencies=[Depends(get_current_user_id)]
)


class ProfileInformationIn(CamelModel):
    username: Optional[str] = None
    email: Optional[str] = None


# --- ROUTES ---------------------------------------------------------------


@router.get(
    "",
    response_model=Profile,
    summary="Obtenir mon profil",
    description=(
        "Retourne le profil de l'utilisateur courant. Les challenges non terminés sont "
        "recalculés à chaque lecture."
    ),
)
async def get_my_profile(user_id: CurrentUserId, service: ProfileServiceDep):
    """Obtenir mon profil.

    Description:
        Un utilisateur sans profil enregistré reçoit un profil vide.

    Returns:
        Profile: Profil, journal et challenges à jour.
    """
    return await service.get_profile(user_id)


@router.put(
    "",
    response_model=Profile,
    status_code=status.HTTP_200_OK,
    summary="Mettre à jour mes informations",
    description="Met à jour `username` et/ou `email` (les champs absents sont conservés).",
)
async def put_my_profile(
    payload: Annotated[ProfileInformationIn, Body(...)],
    user_id: CurrentUserId,
    service: ProfileServiceDep,
):
    return await service.update_profile_information(
        user_id, username=payload.username, email=payload.email
    )
