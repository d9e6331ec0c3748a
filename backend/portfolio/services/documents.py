"""
Modulo de servicio para la base de documentos (MongoDB).

Este modulo encapsula TODA la comunicacion con MongoDB. Las rutas nunca
llaman a pymongo directamente: todo pasa por `DocumentStore`. Igual que
con S3, esto permite inyectar un cliente falso en los tests (mongomock).

Colecciones de la base "portfolio":
    projects, experiences, education, skills, interests -> contenido
    admins                                                -> usuarios del panel

Identificadores:
----------------
MongoDB identifica cada documento con un ObjectId (12 bytes, se muestra
como 24 caracteres hexadecimales, ej: "65f0c0ffee0123456789abcd").
Hacia afuera lo exponemos como string en el campo "_id". Un id con otro
formato se rechaza con InvalidDocumentId antes de consultar la base.

Timestamps:
-----------
`insert` agrega createdAt/updatedAt; `update` refresca updatedAt. Los
datetimes se serializan a ISO 8601 al convertir a JSON.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING, MongoClient

from portfolio.config import settings


class InvalidDocumentId(ValueError):
    """El id recibido no tiene formato de ObjectId."""


def to_object_id(document_id: str) -> ObjectId:
    # ObjectId(None) generaria un id NUEVO en vez de fallar.
    if not isinstance(document_id, str):
        raise InvalidDocumentId(document_id)
    try:
        return ObjectId(document_id)
    except InvalidId as exc:
        raise InvalidDocumentId(document_id) from exc


def serialize(document: dict) -> dict:
    """Convierte ObjectId y datetime a tipos JSON."""
    result = {}
    for key, value in document.items():
        if isinstance(value, ObjectId):
            result[key] = str(value)
        elif isinstance(value, datetime):
            result[key] = value.isoformat()
        else:
            result[key] = value
    return result


class DocumentStore:
    """
    Operaciones CRUD sobre las colecciones del portafolio.

    Parametros:
        client: MongoClient opcional. Si no se pasa, se crea uno con
            MONGODB_URI. pymongo conecta de forma perezosa, asi que crear
            el cliente no abre ninguna conexion todavia.
        database (str | None): Nombre de la base; por defecto MONGODB_DB.
    """

    def __init__(self, client=None, database: Optional[str] = None):
        self.client = client if client is not None else MongoClient(settings.MONGODB_URI)
        self.db = self.client[database or settings.MONGODB_DB]

    def find_all(
        self,
        collection: str,
        query: Optional[dict] = None,
        sort_field: str = "createdAt",
        descending: bool = True,
        limit: int = 0,
    ) -> list[dict]:
        # limit=0 en pymongo significa "sin limite".
        cursor = (
            self.db[collection]
            .find(query or {})
            .sort(sort_field, DESCENDING if descending else ASCENDING)
        )
        if limit:
            cursor = cursor.limit(limit)
        return [serialize(document) for document in cursor]

    def insert(self, collection: str, data: dict[str, Any]) -> dict:
        now = datetime.now(timezone.utc)
        document = {**data, "createdAt": now, "updatedAt": now}
        result = self.db[collection].insert_one(document)
        document["_id"] = result.inserted_id
        return serialize(document)

    def update(self, collection: str, document_id: str, data: dict[str, Any]) -> Optional[dict]:
        """Actualiza los campos dados. Retorna None si el documento no existe."""
        oid = to_object_id(document_id)
        changes = {**data, "updatedAt": datetime.now(timezone.utc)}
        result = self.db[collection].update_one({"_id": oid}, {"$set": changes})
        if result.matched_count == 0:
            return None
        return serialize({"_id": oid, **changes})

    def delete(self, collection: str, document_id: str) -> bool:
        result = self.db[collection].delete_one({"_id": to_object_id(document_id)})
        return result.deleted_count > 0

    def find_admin(self, username: str) -> Optional[dict]:
        return self.db["admins"].find_one({"username": username})

    def upsert_admin(self, username: str, email: str, password_hash: str) -> None:
        self.db["admins"].update_one(
            {"username": username},
            {"$set": {"username": username, "email": email, "password": password_hash}},
            upsert=True,
        )

    def replace_all(self, collection: str, documents: list[dict]) -> int:
        """Vacia la coleccion e inserta `documents` con timestamps."""
        self.db[collection].delete_many({})
        now = datetime.now(timezone.utc)
        stamped = [{**document, "createdAt": now, "updatedAt": now} for document in documents]
        if stamped:
            self.db[collection].insert_many(stamped)
        return len(stamped)


document_store = DocumentStore()
