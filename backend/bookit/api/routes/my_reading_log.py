# backend/bookit/api/routes/my_reading_log.py
# Routes "mon journal de lecture" : liste, ajout, modification et suppression d'entrées.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Body, Depends, Path, Response, status

from bookit.api.deps import ReadingLogServiceDep
from bookit.api.dto.reading_log import ReadingLogIn, ReadingLogPatchIn
from bookit.core.security import CurrentUserId, get_current_user_id
from bookit.models.reading_log import ReadingLogItem

router = APIRouter(
    prefix="/my/reading-log",
    tags=["my-reading-log"],
    dependencies=[Depends(get_current_user_id)],
)

EntryId = Annotated[str, Path(..., description="Identifiant de l'entrée.")]


@router.get(
    "",
    response_model=list[ReadingLogItem],
    summary="Lister mon journal de lecture",
    description="Entrées du journal, les plus récentes d'abord.",
)
async def list_entries(user_id: CurrentUserId, service: ReadingLogServiceDep):
    return await service.list_entries(user_id)


@router.post(
    "",
    response_model=ReadingLogItem,
    status_code=status.HTTP_201_CREATED,
    summary="Ajouter une entrée",
    description=(
        "Ajoute une entrée (`kind` STARTED|PROGRESS|FINISHED|REMOVED).\n\n"
        "- Sans `kind`, une note `Book Finished` vaut FINISHED, sinon PROGRESS\n"
        "- Sans `date`, l'entrée est datée de maintenant\n"
        "- Les challenges en cours sont recalculés"
    ),
)
async def add_entry(
    payload: Annotated[ReadingLogIn, Body(...)],
    user_id: CurrentUserId,
    service: ReadingLogServiceDep,
):
    """Ajouter une entrée au journal.

    Args:
        payload (ReadingLogIn): Contenu de l'entrée.

    Returns:
        ReadingLogItem: Entrée enregistrée.
    """
    return await service.add_entry(user_id, payload)


@router.put(
    "/{entry_id}",
    response_model=ReadingLogItem,
    summary="Modifier une entrée",
)
async def update_entry(
    entry_id: EntryId,
    payload: Annotated[ReadingLogPatchIn, Body(...)],
    user_id: CurrentUserId,
    service: ReadingLogServiceDep,
):
    return await service.update_entry(user_id, entry_id, payload)


@router.delete(
    "/{entry_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Supprimer une entrée",
)
async def delete_entry(entry_id: EntryId, user_id: CurrentUserId, service: ReadingLogServiceDep):
    await service.delete_entry(user_id, entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
