"""
Modulo de ruta para el login del panel de administracion.

Endpoint: POST /api/auth/login

Flujo:
    1. Rate limiting de la clase "login" (5 intentos cada 5 minutos por
       cliente). Al exceder: 429 con headers X-RateLimit-*.
    2. Validacion del body (username + password).
    3. Busqueda del admin en la coleccion "admins".
    4. Comparacion de la contrasena contra el hash bcrypt.
    5. Emision de un token firmado valido por 24 horas.

Seguridad:
----------
- "Invalid credentials" es el MISMO mensaje para usuario inexistente y
  para contrasena incorrecta: no revelamos que usernames existen.
- El rate limit se aplica ANTES de tocar la base, asi un ataque de
  fuerza bruta no genera carga en MongoDB.
"""

from fastapi import APIRouter, Depends, HTTPException
from starlette.requests import Request

from portfolio.guard import get_token_service, public_guard
from portfolio.logging_config import get_logger
from portfolio.models.schemas import LoginRequest
from portfolio.services.documents import document_store
from portfolio.services.passwords import verify_password
from portfolio.services.tokens import IdentityClaim

router = APIRouter()

logger = get_logger("portfolio.routes.auth")


@router.post("/api/auth/login", dependencies=[Depends(public_guard("login"))])
def login(request: Request, credentials: LoginRequest):
    """
    Autentica a un administrador y retorna un token JWT.

    Retorna:
        dict: {"success": true, "token": "...", "user": {"username", "email"}}

    Raises:
        HTTPException(401): Credenciales invalidas.
        HTTPException(500): Fallo inesperado (base caida, error al firmar).
    """
    try:
        admin = document_store.find_admin(credentials.username)
        if not admin or not verify_password(credentials.password, admin.get("password", "")):
            logger.info("Login rejected", username=credentials.username)
            raise HTTPException(status_code=401, detail="Invalid credentials")

        claim = IdentityClaim(
            user_id=str(admin["_id"]),
            username=admin["username"],
            email=admin.get("email", ""),
        )
        token = get_token_service(request).issue(claim)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Login failed", username=credentials.username)
        raise HTTPException(status_code=500, detail="Login failed")

    logger.info("Login succeeded", username=claim.username)
    return {
        "success": True,
        "token": token,
        "user": {"username": claim.username, "email": claim.email},
    }
