"""
Modulo de ruta para subida y borrado de imagenes del portafolio.

Endpoints:
    POST   /api/upload   -> Sube una imagen al host de medios (S3)
    DELETE /api/upload   -> Borra una imagen por su public id

Ambos son exclusivos del administrador: primero se verifica el token,
despues el rate limit ("upload" para subir, "api" para borrar).

Responsabilidades de la subida:
1. Recibir el archivo del cliente (multipart/form-data)
2. Validar tamano ANTES de cargar todo en memoria (defensa temprana)
3. Validar que sea una imagen real (magic bytes + Pillow)
4. Sanitizar la carpeta de destino
5. Subir a S3 y retornar URL, public id y dimensiones

Seguridad implementada:
-----------------------
- Lectura parcial: lee MAX_IMAGE_SIZE + 1 bytes para detectar archivos
  gigantes sin cargarlos completos en memoria.
- Validacion por magic bytes: no confia en el Content-Type HTTP.
- Carpeta con lista blanca de caracteres: "../../etc" se rechaza.
- Nombres UUID v4: el nombre original del archivo nunca llega a S3.
"""

import re
from typing import Optional

from botocore.exceptions import ConnectTimeoutError, ReadTimeoutError
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from portfolio.config import settings
from portfolio.guard import admin_guard
from portfolio.logging_config import get_logger
from portfolio.models.schemas import DeleteImageRequest
from portfolio.services.s3 import s3_service
from portfolio.services.validator import validate_image

router = APIRouter()

logger = get_logger("portfolio.routes.upload")

# Segmentos de carpeta: letras, numeros, "_" y "-", separados por "/".
# Ejemplos validos: "portfolio", "portfolio/projects"
# Ejemplos invalidos: "../secrets", "/absolute", "a//b"
FOLDER_PATTERN = re.compile(r"^[A-Za-z0-9_-]+(/[A-Za-z0-9_-]+)*$")


@router.post("/api/upload", dependencies=[Depends(admin_guard("upload"))])
async def upload_image(
    file: Optional[UploadFile] = File(None),
    folder: str = Form(settings.DEFAULT_UPLOAD_FOLDER),
):
    """
    Sube una imagen al bucket de medios.

    Parametros:
        file (UploadFile): La imagen (jpeg, png, webp o gif, maximo 5 MB).
        folder (str): Carpeta logica de destino (por defecto "portfolio").

    Retorna:
        dict: {"success", "url", "publicId", "width", "height"}

    Raises:
        HTTPException(400): Sin archivo, tipo invalido, muy grande o
            carpeta invalida.
        HTTPException(408): El host de medios no respondio a tiempo.
        HTTPException(500): Cualquier otro fallo al subir.
    """
    if file is None:
        raise HTTPException(status_code=400, detail="No file provided")

    folder = folder.strip().strip("/") or settings.DEFAULT_UPLOAD_FOLDER
    if not FOLDER_PATTERN.match(folder):
        raise HTTPException(status_code=400, detail="Invalid folder name")

    # --- Lectura segura: nunca mas de MAX_IMAGE_SIZE + 1 bytes ---
    data = await file.read(settings.MAX_IMAGE_SIZE + 1)

    result = validate_image(data)
    if not result.is_valid:
        raise HTTPException(status_code=400, detail=result.error)

    try:
        public_id = s3_service.upload_image(data, folder, result.extension, result.mime_type)
    except (ConnectTimeoutError, ReadTimeoutError) as exc:
        logger.error("Image upload timed out", folder=folder, error=str(exc))
        raise HTTPException(
            status_code=408,
            detail="Upload timeout. Please try again with a smaller file or check your internet connection.",
        )
    except Exception as exc:
        logger.error("Image upload failed", folder=folder, error=str(exc))
        raise HTTPException(status_code=500, detail="Failed to upload image")

    logger.info("Image uploaded", public_id=public_id, size=len(data))
    return {
        "success": True,
        "url": s3_service.public_url(public_id),
        "publicId": public_id,
        "width": result.width,
        "height": result.height,
    }


@router.delete("/api/upload", dependencies=[Depends(admin_guard("api"))])
async def delete_image(body: DeleteImageRequest):
    """
    Borra una imagen del bucket por su public id.

    Raises:
        HTTPException(400): No se envio publicId.
        HTTPException(500): La imagen no existe o S3 fallo.
    """
    if not body.publicId:
        raise HTTPException(status_code=400, detail="No public ID provided")

    try:
        deleted = s3_service.delete(body.publicId)
    except Exception as exc:
        logger.error("Image delete failed", public_id=body.publicId, error=str(exc))
        raise HTTPException(status_code=500, detail="Failed to delete image")

    if not deleted:
        raise HTTPException(status_code=500, detail="Failed to delete image")

    logger.info("Image deleted", public_id=body.publicId)
    return {"success": True}
