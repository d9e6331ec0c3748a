"""
Modulo de configuracion centralizada de la aplicacion.

Este archivo define TODAS las constantes y configuraciones que el backend
del portafolio necesita para funcionar: el secreto de firma de tokens,
la conexion a MongoDB, el bucket de S3 donde viven las imagenes, las
credenciales del proveedor de email y los limites de subida.

Configuracion por entorno:
--------------------------
Usamos variables de entorno (os.getenv) para que la misma aplicacion
pueda correr en desarrollo, staging y produccion con diferentes valores
SIN cambiar el codigo fuente.

El secreto JWT es obligatorio:
------------------------------
La mayoria de las variables tienen un valor por defecto razonable para
desarrollo local. JWT_SECRET es la excepcion: si no esta definido, la
aplicacion se niega a arrancar (ver `Settings.require_jwt_secret`).
Un secreto "por defecto" conocido permitiria a cualquiera firmar tokens
de administrador validos.

Patron de diseno utilizado: **Singleton implicito**
La instancia `settings` se crea UNA sola vez al importar este modulo.
"""

import os


class Settings:
    """
    Clase que encapsula toda la configuracion de la aplicacion.

    Los valores se leen del entorno al importar el modulo. En tests se
    definen las variables en conftest.py ANTES de importar la app.
    """

    # ---------- Autenticacion ----------

    # Secreto compartido para firmar los tokens (HMAC-SHA256).
    # Vacio significa "no configurado": ver require_jwt_secret().
    JWT_SECRET: str = os.getenv("JWT_SECRET", "")

    # Vida util de un token emitido en el login. Pasado este tiempo el
    # administrador debe volver a autenticarse.
    TOKEN_LIFETIME_HOURS: int = int(os.getenv("TOKEN_LIFETIME_HOURS", "24"))

    # ---------- Base de datos de documentos (MongoDB) ----------

    MONGODB_URI: str = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    MONGODB_DB: str = os.getenv("MONGODB_DB", "portfolio")

    # ---------- Almacenamiento de imagenes (AWS S3) ----------

    S3_BUCKET: str = os.getenv("S3_BUCKET", "portfolio-media")
    AWS_REGION: str = os.getenv("AWS_REGION", "us-east-1")

    # Prefijo publico de las URLs de imagenes. Por defecto es la URL
    # virtual-hosted del bucket; detras de un CDN se sobreescribe.
    MEDIA_BASE_URL: str = os.getenv(
        "MEDIA_BASE_URL", f"https://{S3_BUCKET}.s3.{AWS_REGION}.amazonaws.com"
    ).rstrip("/")

    # Carpeta por defecto cuando el formulario de subida no indica una.
    DEFAULT_UPLOAD_FOLDER: str = "portfolio"

    # Tamano maximo de imagen: 5 MB (5 * 1024 * 1024 bytes).
    MAX_IMAGE_SIZE: int = 5 * 1024 * 1024

    # Lista blanca de tipos MIME de imagen -> extension con la que se
    # guarda el objeto en S3. El tipo se detecta por magic bytes, nunca
    # por el Content-Type que manda el cliente.
    ALLOWED_IMAGE_TYPES: dict[str, str] = {
        "image/jpeg": ".jpg",
        "image/png": ".png",
        "image/webp": ".webp",
        "image/gif": ".gif",
    }

    # ---------- Email (Resend) ----------

    RESEND_API_URL: str = os.getenv("RESEND_API_URL", "https://api.resend.com/emails")
    RESEND_API_KEY: str = os.getenv("RESEND_API_KEY", "")
    RESEND_FROM_EMAIL: str = os.getenv("RESEND_FROM_EMAIL", "onboarding@resend.dev")
    RESEND_TO_EMAIL: str = os.getenv("RESEND_TO_EMAIL", "owner@example.com")

    # ---------- HTTP ----------

    # Origenes permitidos por CORS, separados por coma.
    CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")

    # ---------- Observabilidad y mantenimiento ----------

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "info")

    # Cada cuanto el rate limiter barre las ventanas vencidas (segundos).
    RATE_LIMIT_SWEEP_SECONDS: int = int(os.getenv("RATE_LIMIT_SWEEP_SECONDS", "300"))

    def require_jwt_secret(self) -> str:
        """
        Retorna el secreto de firma o aborta el arranque si falta.

        Raises:
            RuntimeError: Si JWT_SECRET no esta definido o esta vacio.
        """
        if not self.JWT_SECRET:
            raise RuntimeError("JWT_SECRET is required in environment")
        return self.JWT_SECRET


settings = Settings()
