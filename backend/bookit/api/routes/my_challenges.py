# backend/bookit/api/routes/my_challenges.py
# Routes "mes challenges" : liste, création, détail, modification, suppression et recalcul forcé.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Body, Depends, Path, Response, status

from bookit.api.deps import ChallengeServiceDep
from bookit.api.dto.challenge import ChallengeCreateIn, ChallengeUpdateIn
from bookit.core.security import CurrentUserId, get_current_user_id
from bookit.models.challenge import ReadingChallenge

router = APIRouter(
    prefix="/my/challenges",
    tags=["my-challenges"],
    dependencies=[Depends(get_current_user_id)],
)

ChallengeId = Annotated[str, Path(..., description="Identifiant du challenge.")]


@router.get(
    "",
    response_model=list[ReadingChallenge],
    summary="Lister mes challenges",
    description=(
        "Retourne les challenges de l'utilisateur avec une progression **recalculée** "
        "depuis le journal de lecture (les challenges terminés restent figés)."
    ),
)
async def list_challenges(user_id: CurrentUserId, service: ChallengeServiceDep):
    """Lister mes challenges.

    Returns:
        list[ReadingChallenge]: Challenges à jour.
    """
    return await service.list_challenges(user_id)


@router.post(
    "",
    response_model=ReadingChallenge,
    status_code=status.HTTP_201_CREATED,
    summary="Créer un challenge",
    description=(
        "Crée un challenge (`type` BOOKS|PAGES, `timeframe` WEEK|MONTH|YEAR).\n\n"
        "- `target` > 0 et `endDate` > `startDate`, sinon 422 `CHALLENGE_INVALID`\n"
        "- Un challenge déjà commencé est calculé immédiatement depuis le journal"
    ),
)
async def create_challenge(
    payload: Annotated[ChallengeCreateIn, Body(...)],
    user_id: CurrentUserId,
    service: ChallengeServiceDep,
):
    """Créer un challenge.

    Args:
        payload (ChallengeCreateIn): Paramètres du challenge.

    Returns:
        ReadingChallenge: Challenge créé.
    """
    return await service.create_challenge(user_id, payload)


@router.post(
    "/refresh",
    response_model=list[ReadingChallenge],
    summary="Recalculer mes challenges",
    description="Force le recalcul et l'enregistrement de tous les challenges non terminés.",
)
async def refresh_challenges(user_id: CurrentUserId, service: ChallengeServiceDep):
    return await service.refresh_challenges(user_id)


@router.get(
    "/{challenge_id}",
    response_model=ReadingChallenge,
    summary="Détail d'un challenge",
)
async def get_challenge(challenge_id: ChallengeId, user_id: CurrentUserId, service: ChallengeServiceDep):
    """Détail d'un challenge (404 si absent du profil)."""
    return await service.get_challenge(user_id, challenge_id)


@router.api_route(
    "/{challenge_id}",
    methods=["PUT", "PATCH"],
    response_model=ReadingChallenge,
    summary="Modifier un challenge",
    description=(
        "Champs modifiables : `name`, `target`, `endDate`, `type`, `timeframe`.\n\n"
        "La progression est toujours recalculée depuis le journal : une valeur "
        "`progress`/`current` envoyée par le client est ignorée."
    ),
)
async def update_challenge(
    challenge_id: ChallengeId,
    payload: Annotated[ChallengeUpdateIn, Body(...)],
    user_id: CurrentUserId,
    service: ChallengeServiceDep,
):
    """Modifier un challenge.

    Args:
        challenge_id (str): Identifiant du challenge.
        payload (ChallengeUpdateIn): Modifications.

    Returns:
        ReadingChallenge: Challenge recalculé.
    """
    return await service.update_challenge(user_id, challenge_id, payload)


@router.delete(
    "/{challenge_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Supprimer un challenge",
)
async def delete_challenge(challenge_id: ChallengeId, user_id: CurrentUserId, service: ChallengeServiceDep):
    await service.delete_challenge(user_id, challenge_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
