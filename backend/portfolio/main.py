"""
Punto de entrada principal de la aplicacion FastAPI.

Este es el archivo "raiz" del backend del portafolio. Aqui se:
1. Configura el logging estructurado (structlog).
2. Crea el TokenService y el RateLimiter compartidos (app.state).
3. Arranca y detiene el barrido del rate limiter (lifespan).
4. Registra los manejadores de error, CORS y todas las rutas.
5. Define el endpoint de health check.

Arquitectura de la aplicacion:
------------------------------
    main.py (punto de entrada)
        |
        +-- routes/         (Controladores: reciben HTTP requests)
        |    +-- auth.py        POST /api/auth/login
        |    +-- contact.py     POST /api/contact
        |    +-- upload.py      POST/DELETE /api/upload
        |    +-- content.py     CRUD de projects, experiences, education,
        |                       skills e interests
        |
        +-- services/       (Logica de negocio)
        |    +-- tokens.py      JWT HS256
        |    +-- passwords.py   bcrypt
        |    +-- documents.py   MongoDB
        |    +-- s3.py          imagenes
        |    +-- validator.py   validacion de imagenes
        |    +-- email.py       Resend
        |
        +-- models/schemas.py   (Validacion de entrada)
        +-- guard.py            (Autenticacion + rate limit por ruta)
        +-- limiter.py          (Rate limiting de ventana fija)
        +-- errors.py           (Excepciones y respuestas de error)
        +-- config.py           (Configuracion centralizada)
        +-- logging_config.py   (structlog)

El flujo de una peticion HTTP es:
    Cliente -> CORS middleware -> Router -> Guardia (token, rate limit)
            -> Validacion del body -> Endpoint -> Respuesta
"""

from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portfolio.config import settings
from portfolio.errors import register_exception_handlers
from portfolio.limiter import RateLimiter
from portfolio.logging_config import configure_logging, get_logger
from portfolio.routes.auth import router as auth_router
from portfolio.routes.contact import router as contact_router
from portfolio.routes.content import router as content_router
from portfolio.routes.upload import router as upload_router
from portfolio.services.tokens import TokenService

logger = get_logger("portfolio.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Ciclo de vida de la app: el barrido de entradas vencidas del rate
    limiter corre mientras el servidor esta arriba y se cancela al apagar.
    """
    app.state.rate_limiter.start_sweeper()
    logger.info("Portfolio API started", sweep_seconds=app.state.rate_limiter.sweep_interval)
    try:
        yield
    finally:
        await app.state.rate_limiter.stop_sweeper()
        logger.info("Portfolio API stopped")


def create_app() -> FastAPI:
    """
    Construye la aplicacion.

    Raises:
        RuntimeError: Si JWT_SECRET no esta configurado. Es preferible no
            arrancar a arrancar firmando tokens con un secreto vacio.
    """
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title="Portfolio API", lifespan=lifespan)

    # ---------- Estado compartido ----------
    # Una sola instancia de cada uno para toda la vida del proceso; las
    # rutas los leen de request.app.state (ver guard.py).
    app.state.token_service = TokenService(
        settings.require_jwt_secret(),
        lifetime=timedelta(hours=settings.TOKEN_LIFETIME_HOURS),
    )
    app.state.rate_limiter = RateLimiter(sweep_interval=settings.RATE_LIMIT_SWEEP_SECONDS)

    register_exception_handlers(app)

    # ---------- CORS ----------
    # SEGURIDAD: NUNCA uses allow_origins=["*"] en produccion; el panel de
    # administracion envia el token en el header Authorization.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------- Health Check ----------
    @app.get("/api/health")
    async def health_check():
        """
        Endpoint de verificacion de salud del servidor.

        Retorna:
            dict: {"status": "ok"} si el servidor esta funcionando.
        """
        return {"status": "ok"}

    # ---------- Registro de rutas ----------
    app.include_router(auth_router)
    app.include_router(contact_router)
    app.include_router(upload_router)
    app.include_router(content_router)

    return app


app = create_app()
