"""
Guardias de request: autenticacion + rate limiting delante de cada ruta.

Cada ruta declara su guardia como dependencia de FastAPI:

    @router.post("/api/projects", dependencies=[Depends(admin_guard("api"))])

FastAPI resuelve las dependencias ANTES de validar el body, asi que un
request sin token recibe 401 aunque su JSON sea invalido.

Orden de los filtros:
    admin_guard(kind):  1. token valido?   2. dentro del limite?
    public_guard(kind): 1. dentro del limite?

El TokenService y el RateLimiter se crean una sola vez en main.py y
viven en `app.state`; aqui solo se leen del request.
"""

from typing import Callable

from starlette.requests import Request

from portfolio.errors import AuthenticationFailure, RateLimitExceeded
from portfolio.limiter import RATE_LIMITS, RateLimitConfig, RateLimiter, get_client_key
from portfolio.services.tokens import IdentityClaim, TokenService


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


def enforce_rate_limit(request: Request, config: RateLimitConfig) -> None:
    """Lanza RateLimitExceeded si el cliente supero el limite de `config`."""
    decision = get_rate_limiter(request).check(get_client_key(request), config)
    if not decision.allowed:
        raise RateLimitExceeded(config, decision)


def require_admin(request: Request) -> IdentityClaim:
    """Lanza AuthenticationFailure si el request no trae un token valido."""
    result = get_token_service(request).guard(request)
    if not result.authorized:
        raise AuthenticationFailure(result.error)
    request.state.admin = result.claim
    return result.claim


def public_guard(kind: str) -> Callable[[Request], None]:
    """Dependencia para rutas publicas: solo rate limiting."""
    # KeyError al importar la ruta si la clase no existe.
    config = RATE_LIMITS[kind]

    def dependency(request: Request) -> None:
        enforce_rate_limit(request, config)

    return dependency


def admin_guard(kind: str) -> Callable[[Request], IdentityClaim]:
    """Dependencia para rutas de administracion: token y luego rate limiting."""
    config = RATE_LIMITS[kind]

    def dependency(request: Request) -> IdentityClaim:
        claim = require_admin(request)
        enforce_rate_limit(request, config)
        return claim

    return dependency
