"""
Modulo de servicio para Amazon S3, usado como host de imagenes.

Este modulo encapsula TODA la comunicacion con AWS S3. Ningun otro archivo
del proyecto deberia llamar directamente a boto3; todo pasa por este
servicio. Esto facilita testear el codigo (solo necesitas mockear este
servicio o pasarle un cliente de moto).

Estructura de keys:
-------------------
    {folder}/{uuid}{ext}

Ejemplos:
    portfolio/0b6f...-4c1e.png
    portfolio/projects/9d2a...-77aa.webp

El key completo es el "public id" que ve el panel de administracion:
con el se construye la URL publica y con el se borra la imagen.

Que es un "public id"?
----------------------
Es el identificador estable de la imagen en el host de medios. El panel
lo guarda junto a la URL para poder borrar la imagen cuando se reemplaza
la foto de un proyecto.

Patron de diseno: Servicio + Singleton implicito + Inyeccion de dependencias
-----------------------------------------------------------------------------
- La clase S3Service encapsula las operaciones (upload, delete, url).
- La instancia `s3_service` se crea una vez al importar el modulo.
- El constructor acepta un `client` opcional para los tests.
"""

import uuid

import boto3

from portfolio.config import settings


class S3Service:
    """
    Servicio que encapsula las operaciones con el bucket de imagenes.

    Atributos:
        client: Cliente de boto3 para S3.
        bucket (str): Nombre del bucket donde almacenamos las imagenes.
        base_url (str): Prefijo publico de las URLs.
    """

    def __init__(self, client=None):
        self.client = client or boto3.client("s3", region_name=settings.AWS_REGION)
        self.bucket = settings.S3_BUCKET
        self.base_url = settings.MEDIA_BASE_URL

    def upload_image(self, data: bytes, folder: str, extension: str, content_type: str) -> str:
        """
        Sube una imagen y retorna su public id (el key en S3).

        Parametros:
            data (bytes): Contenido de la imagen.
            folder (str): Carpeta logica (ya sanitizada por el caller).
            extension (str): Extension con punto, ej: ".png".
            content_type (str): Tipo MIME detectado por magic bytes. Se
                guarda como Content-Type del objeto para que el navegador
                muestre la imagen en vez de descargarla.

        Retorna:
            str: El key del objeto, ej: "portfolio/0b6f...png".
        """
        # UUID v4: nombres impredecibles y sin colisiones, aunque dos
        # subidas se llamen "foto.png".
        key = f"{folder}/{uuid.uuid4()}{extension}"
        self.client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ContentType=content_type,
        )
        return key

    def public_url(self, key: str) -> str:
        return f"{self.base_url}/{key}"

    def exists(self, key: str) -> bool:
        """Verifica con un HEAD si el objeto existe (sin descargarlo)."""
        try:
            self.client.head_object(Bucket=self.bucket, Key=key)
        except self.client.exceptions.ClientError:
            return False
        return True

    def delete(self, key: str) -> bool:
        """
        Elimina una imagen. Retorna False si no existia.

        delete_object de S3 NO falla si el objeto no existe (es
        idempotente), asi que primero verificamos con exists() para poder
        avisarle al panel que el public id no era valido.
        """
        if not self.exists(key):
            return False
        self.client.delete_object(Bucket=self.bucket, Key=key)
        return True


s3_service = S3Service()
