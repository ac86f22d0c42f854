# backend/bookit/core/bson_utils.py
# Base models Pydantic v2 pour les documents Mongo (alias camelCase, `_id`) et génération d'identifiants.
from __future__ import annotations

from typing import Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def new_object_id() -> str:
    """Génère un identifiant opaque (ObjectId en hexadécimal, 24 caractères)."""
    return str(ObjectId())


class CamelModel(BaseModel):
    """BaseModel exposé en camelCase.

    Description:
        Les attributs Python restent en snake_case, la forme stockée et la forme JSON
        utilisent les alias camelCase (`startDate`, `pagesRead`...). Les deux formes sont
        acceptées en entrée.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class MongoBaseModel(CamelModel):
    """BaseModel Pydantic pour documents Mongo.

    Description:
        - Champ `_id` exposé via l'alias `id`
        - Alias camelCase pour les autres champs
    """
    id: Optional[str] = Field(default=None, alias="_id")


# Convenience helpers
def dump_mongo(model: BaseModel, *, exclude_none: bool = True) -> dict:
    """Dump d'un modèle pour Mongo (dict).

    Description:
        Sérialise en dict de types JSON natifs (dates ISO 8601, enums en valeur), en respectant
        les alias (`_id`, camelCase) et en excluant les champs `None` par défaut.

    Args:
        model (BaseModel): Modèle Pydantic à sérialiser.
        exclude_none (bool): Exclure les champs None.

    Returns:
        dict: Document sérialisé prêt à insérer/remplacer.
    """
    return model.model_dump(mode="json", by_alias=True, exclude_none=exclude_none)

