"""
Modulo de validacion de imagenes subidas.

Este servicio es la PRIMERA linea de defensa contra archivos maliciosos
en la subida de imagenes del panel. Verifica, en orden de costo:

1. Que el archivo no este vacio ni exceda el tamano maximo (5 MB)
2. Que su tipo MIME real (detectado por magic bytes) sea una imagen permitida
3. Que Pillow pueda leer sus dimensiones (un PNG truncado no pasa)

Por que no confiamos en el Content-Type del request HTTP?
---------------------------------------------------------
Porque el cliente puede enviarlo como quiera. Un atacante podria enviar
un script con Content-Type: image/png. Por eso usamos python-magic, que
lee los primeros bytes del archivo (la "firma") para determinar el tipo
real:
    - PNG:  89 50 4E 47
    - JPEG: FF D8 FF
    - GIF:  47 49 46 38 ("GIF8")
    - WEBP: "RIFF" .... "WEBP"

Patron de diseno: Resultado como dataclass
------------------------------------------
En vez de lanzar excepciones, retornamos un ImageValidationResult con
is_valid, el tipo detectado, las dimensiones y el mensaje de error.
"""

import io
from dataclasses import dataclass

import magic
from PIL import Image, UnidentifiedImageError

from portfolio.config import settings


@dataclass
class ImageValidationResult:
    """
    Resultado de la validacion de una imagen.

    Atributos:
        is_valid (bool): True si la imagen paso todas las validaciones.
        mime_type (str): Tipo MIME real detectado por magic bytes.
        extension (str): Extension con la que se guardara (ej: ".png").
        width (int), height (int): Dimensiones en pixeles.
        error (str): Descripcion del error si is_valid es False.
    """

    is_valid: bool
    mime_type: str = ""
    extension: str = ""
    width: int = 0
    height: int = 0
    error: str = ""


def validate_image(data: bytes) -> ImageValidationResult:
    """
    Valida una imagen por tamano, firma y legibilidad.

    Ejemplos:
        >>> validate_image(b"\\x89PNG...")
        ImageValidationResult(is_valid=True, mime_type="image/png", ...)

        >>> validate_image(b"#!/bin/bash...")
        ImageValidationResult(is_valid=False, mime_type="text/x-shellscript",
                              error="Invalid file type. Only images are allowed.")
    """
    if not data:
        return ImageValidationResult(is_valid=False, error="No file provided")

    if len(data) > settings.MAX_IMAGE_SIZE:
        return ImageValidationResult(
            is_valid=False,
            error=f"File too large. Maximum size is {settings.MAX_IMAGE_SIZE // (1024 * 1024)}MB.",
        )

    mime_type = magic.from_buffer(data, mime=True)
    if mime_type not in settings.ALLOWED_IMAGE_TYPES:
        return ImageValidationResult(
            is_valid=False,
            mime_type=mime_type,
            error="Invalid file type. Only images are allowed.",
        )

    # Pillow solo lee el encabezado para conocer el tamano; no decodifica
    # todos los pixeles.
    try:
        with Image.open(io.BytesIO(data)) as image:
            width, height = image.size
    except (UnidentifiedImageError, OSError):
        return ImageValidationResult(
            is_valid=False,
            mime_type=mime_type,
            error="Image file is corrupted or unreadable.",
        )

    return ImageValidationResult(
        is_valid=True,
        mime_type=mime_type,
        extension=settings.ALLOWED_IMAGE_TYPES[mime_type],
        width=width,
        height=height,
    )
