"""
Modulo de errores de la API y sus manejadores HTTP.

Taxonomia:
----------
- AuthenticationFailure -> HTTP 401. Token ausente, malformado, vencido
  o con firma invalida. El cliente SIEMPRE recibe el mismo mensaje
  generico: no le decimos si el token vencio o si fue falsificado.
- RateLimitExceeded -> HTTP 429. Incluye el mensaje configurado para la
  clase de endpoint y, en login/contacto, los headers X-RateLimit-*.
- Cualquier otra excepcion inesperada (por ejemplo un fallo al firmar un
  token) se propaga y FastAPI la convierte en un 500.

Formato de respuesta uniforme:
------------------------------
Todas las respuestas de error usan el mismo "sobre" JSON que las
respuestas exitosas:

    {"success": false, "error": "<mensaje>", "details": [...]}

`details` solo aparece en errores de validacion.
"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from portfolio.limiter import RateLimitConfig, RateLimitDecision
from portfolio.services.tokens import UNAUTHORIZED_MESSAGE


class PortfolioError(Exception):
    """Excepcion base: lleva el codigo HTTP y el mensaje para el cliente."""

    status_code: int = 500

    def __init__(self, message: str, headers: Optional[dict[str, str]] = None):
        self.message = message
        self.headers = headers or {}
        super().__init__(message)


class AuthenticationFailure(PortfolioError):
    """El request no trae un token de administrador valido."""

    status_code = 401

    def __init__(self, message: str = UNAUTHORIZED_MESSAGE):
        super().__init__(message)


class RateLimitExceeded(PortfolioError):
    """El cliente supero el limite de su clase de endpoint."""

    status_code = 429

    def __init__(self, config: RateLimitConfig, decision: RateLimitDecision):
        self.config = config
        self.decision = decision
        headers = {}
        if config.expose_headers:
            headers = {
                "X-RateLimit-Limit": str(config.max_requests),
                "X-RateLimit-Remaining": str(decision.remaining),
                # Epoch en milisegundos, igual que Date.now() en el navegador.
                "X-RateLimit-Reset": str(int(decision.reset_at * 1000)),
            }
        super().__init__(decision.error or config.message, headers=headers)


def error_body(message: str, **extra) -> dict:
    """Construye el cuerpo JSON estandar de error."""
    return {"success": False, "error": message, **extra}


async def portfolio_error_handler(request: Request, exc: PortfolioError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message),
        headers=exc.headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Los HTTPException que lanzan las rutas (400, 404, 408, 500...)
    # se renderizan con el mismo sobre que el resto de errores.
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Convierte los errores de Pydantic en HTTP 400 con detalle por campo.

    FastAPI responde 422 por defecto; el frontend del portafolio espera
    400 con una lista de {field, message}.

    loc viene como ("body", "title") o ("query", "limit"); descartamos
    el primer elemento (de donde vino el dato) y unimos el resto con
    puntos: ("body", "skills", 0, "name") -> "skills.0.name".
    """
    details = [
        {
            "field": ".".join(str(part) for part in error["loc"][1:]),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=error_body("Invalid input", details=details),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Registra todos los manejadores de error en la app."""
    app.add_exception_handler(PortfolioError, portfolio_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
