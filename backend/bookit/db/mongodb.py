# backend/bookit/db/mongodb.py
# Initialise le client MongoDB à partir des settings et expose des helpers simples d'accès aux collections.

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase

from bookit.core.settings import get_settings

settings = get_settings()

client: AsyncIOMotorClient = AsyncIOMotorClient(settings.mongodb_uri, tz_aware=True)
db: AsyncIOMotorDatabase = client[settings.mongodb_db]


def get_collection(name: str) -> AsyncIOMotorCollection:
    """Retourne une collection MongoDB par son nom.

    Description:
        Accède à `db[name]` et renvoie l'objet collection. Si la collection n'existe pas
        encore côté serveur, MongoDB la créera à la première insertion.

    Args:
        name (str): Nom de la collection (ex. "profiles").

    Returns:
        AsyncIOMotorCollection: Instance de collection MongoDB asynchrone.
    """
    return db[name]
