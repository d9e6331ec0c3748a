"""
Modulo de rutas CRUD para el contenido del portafolio.

Las cinco colecciones (projects, experiences, education, skills e
interests) comparten exactamente la misma forma de API:

    GET    /api/<recurso>          -> publico, lista documentos
    POST   /api/<recurso>          -> admin, crea (201)
    PUT    /api/<recurso>          -> admin, actualiza (el body trae "_id")
    DELETE /api/<recurso>?id=<id>  -> admin, borra

En vez de copiar cinco archivos casi identicos, cada recurso se describe
con un `Resource` (coleccion, modelos de validacion, orden y textos de
error) y `build_router` genera sus cuatro endpoints.

Guardias:
    GET -> public_guard("public_read")   (200 req/min por cliente)
    resto -> admin_guard("api")          (token + 100 req/min)

Manejo de errores:
    - HTTPException se relanza tal cual (400, 404...).
    - Un id con formato invalido -> 400 "Invalid ID format".
    - Cualquier otra excepcion -> se loguea y se responde 500 con un
      mensaje propio del recurso ("Failed to create project").
"""

from dataclasses import dataclass
from typing import Optional, Type

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from portfolio.guard import admin_guard, public_guard
from portfolio.logging_config import get_logger
from portfolio.models.schemas import (
    EducationIn,
    EducationUpdate,
    ExperienceIn,
    ExperienceUpdate,
    InterestIn,
    InterestUpdate,
    PortfolioModel,
    ProjectIn,
    ProjectUpdate,
    SkillCategoryIn,
    SkillCategoryUpdate,
)
from portfolio.services.documents import InvalidDocumentId, document_store

logger = get_logger("portfolio.routes.content")


@dataclass(frozen=True)
class Resource:
    """
    Descripcion de una coleccion expuesta por la API.

    Atributos:
        collection (str): Nombre de la coleccion y del path (/api/<collection>).
        noun (str): Nombre singular para mensajes ("project").
        create_model, update_model: Esquemas Pydantic de POST y PUT.
        sort_field (str): Campo de orden del listado.
        descending (bool): True para "mas nuevo primero".
        id_label (str): Prefijo del mensaje "<X> ID is required".
        filterable (bool): Acepta ?limit= y ?featured=true en el GET.
    """

    collection: str
    noun: str
    create_model: Type[PortfolioModel]
    update_model: Type[PortfolioModel]
    sort_field: str = "createdAt"
    descending: bool = True
    id_label: str = ""
    filterable: bool = False

    @property
    def title(self) -> str:
        return self.noun[0].upper() + self.noun[1:]

    @property
    def id_message(self) -> str:
        return f"{self.id_label or self.title} ID is required"


RESOURCES = [
    Resource("projects", "project", ProjectIn, ProjectUpdate, filterable=True),
    Resource("experiences", "experience", ExperienceIn, ExperienceUpdate),
    Resource("education", "education record", EducationIn, EducationUpdate, id_label="Education"),
    Resource(
        "skills",
        "skill category",
        SkillCategoryIn,
        SkillCategoryUpdate,
        sort_field="order",
        descending=False,
    ),
    Resource("interests", "interest", InterestIn, InterestUpdate, sort_field="order", descending=False),
]


def parse_limit(raw: Optional[str]) -> int:
    """
    "?limit=3" -> 3. Un valor vacio, no numerico o menor a 1 se ignora
    (0 significa "sin limite" en DocumentStore.find_all).
    """
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return 0
    return max(value, 0)


def validate_body(model: Type[PortfolioModel], payload: dict) -> PortfolioModel:
    """
    Valida `payload` contra `model` y reporta los errores igual que
    FastAPI, para que salgan como 400 "Invalid input" con su campo.
    """
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise RequestValidationError(
            [{**error, "loc": ("body", *error["loc"])} for error in exc.errors()]
        )


def build_router(resource: Resource) -> APIRouter:
    """Genera los endpoints GET/POST/PUT/DELETE de un recurso."""
    router = APIRouter()
    path = f"/api/{resource.collection}"
    create_model = resource.create_model
    update_model = resource.update_model

    # Handlers sincronos: pymongo bloquea, FastAPI los corre en su thread pool.

    @router.get(path, dependencies=[Depends(public_guard("public_read"))])
    def list_documents(limit: Optional[str] = None, featured: Optional[str] = None):
        # Solo los proyectos filtran; el resto ignora los query params.
        query = {}
        max_documents = 0
        if resource.filterable:
            if featured == "true":
                query["featured"] = True
            max_documents = parse_limit(limit)
        try:
            documents = document_store.find_all(
                resource.collection,
                query=query,
                sort_field=resource.sort_field,
                descending=resource.descending,
                limit=max_documents,
            )
        except Exception:
            logger.exception("List failed", collection=resource.collection)
            raise HTTPException(status_code=500, detail=f"Failed to fetch {resource.collection}")
        return {"success": True, "data": documents}

    @router.post(path, status_code=201, dependencies=[Depends(admin_guard("api"))])
    def create_document(body: create_model):
        try:
            document = document_store.insert(resource.collection, body.model_dump())
        except Exception:
            logger.exception("Create failed", collection=resource.collection)
            raise HTTPException(status_code=500, detail=f"Failed to create {resource.noun}")
        logger.info("Document created", collection=resource.collection, id=document["_id"])
        return {"success": True, "data": document}

    @router.put(path, dependencies=[Depends(admin_guard("api"))])
    def update_document(payload: dict = Body(...)):
        # El "_id" se exige antes de validar el resto de los campos.
        if not payload.get("_id"):
            raise HTTPException(status_code=400, detail=resource.id_message)
        body = validate_body(update_model, payload)
        try:
            document = document_store.update(
                resource.collection, body.id, body.model_dump(exclude={"id"})
            )
            if document is None:
                raise HTTPException(status_code=404, detail=f"{resource.title} not found")
        except HTTPException:
            raise
        except InvalidDocumentId:
            raise HTTPException(status_code=400, detail="Invalid ID format")
        except Exception:
            logger.exception("Update failed", collection=resource.collection, id=body.id)
            raise HTTPException(status_code=500, detail=f"Failed to update {resource.noun}")
        logger.info("Document updated", collection=resource.collection, id=body.id)
        return {"success": True, "data": document}

    @router.delete(path, dependencies=[Depends(admin_guard("api"))])
    def delete_document(id: Optional[str] = None):
        if not id:
            raise HTTPException(status_code=400, detail=resource.id_message)
        try:
            deleted = document_store.delete(resource.collection, id)
            if not deleted:
                raise HTTPException(status_code=404, detail=f"{resource.title} not found")
        except HTTPException:
            raise
        except InvalidDocumentId:
            raise HTTPException(status_code=400, detail="Invalid ID format")
        except Exception:
            logger.exception("Delete failed", collection=resource.collection, id=id)
            raise HTTPException(status_code=500, detail=f"Failed to delete {resource.noun}")
        logger.info("Document deleted", collection=resource.collection, id=id)
        return {"success": True}

    return router


router = APIRouter()
for _resource in RESOURCES:
    router.include_router(build_router(_resource))
