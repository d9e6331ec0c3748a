"""
Servicio de tokens de identidad (JWT) para el panel de administracion.

Este modulo emite y verifica los tokens que prueban que un administrador
hizo login correctamente. NO hay sesiones del lado del servidor: toda la
informacion necesaria viaja dentro del token, firmada con HMAC-SHA256
(HS256) usando un secreto compartido que solo conoce el backend.

Estructura del payload:
-----------------------
    {
        "userId": "65f0c0ffee...",    # _id del admin en MongoDB
        "username": "admin",
        "email": "admin@example.com",
        "iat": 1700000000,            # emitido (epoch en segundos)
        "exp": 1700086400             # vence: iat + 24 horas
    }

Por que la verificacion no dice POR QUE fallo?
----------------------------------------------
`verify()` retorna None tanto si el token esta malformado, como si la
firma no coincide o si ya vencio. Si distinguieramos los casos, un
atacante podria usar la API como "oraculo" para saber si un token
falsificado tiene la forma correcta. El costo es que no hay revocacion:
un token filtrado vale hasta que vence (maximo 24 horas).

Reloj inyectable:
-----------------
`issue()` y `verify()` aceptan un `now` opcional (epoch en segundos).
En produccion se usa time.time(); en tests se pasa un valor fijo para
probar exactamente el limite de las 24 horas.
"""

import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from jose import JWTError, jwt
from starlette.requests import Request

from portfolio.logging_config import get_logger

ALGORITHM = "HS256"

BEARER_PREFIX = "Bearer "

UNAUTHORIZED_MESSAGE = "Unauthorized - Invalid or missing token"

logger = get_logger("portfolio.tokens")


@dataclass(frozen=True)
class IdentityClaim:
    """
    Hechos de identidad embebidos en un token firmado.

    Inmutable (frozen=True): una vez emitido, un claim no cambia.
    """

    user_id: str
    username: str
    email: str
    issued_at: int = 0
    expires_at: int = 0


@dataclass
class AuthResult:
    """Resultado de `TokenService.guard`."""

    authorized: bool
    claim: Optional[IdentityClaim] = None
    error: str = ""


class TokenService:
    """
    Emite y verifica tokens HS256 con vida util acotada.

    Atributos:
        secret (str): Secreto compartido para firmar.
        lifetime (timedelta): Vida util de cada token.
    """

    def __init__(self, secret: str, lifetime: timedelta = timedelta(hours=24)):
        if not secret:
            raise ValueError("A signing secret is required")
        self.secret = secret
        self.lifetime = lifetime

    def issue(self, claim: IdentityClaim, now: Optional[float] = None) -> str:
        """
        Firma un token nuevo para el claim dado.

        Los timestamps del claim de entrada se ignoran: iat es `now` y exp
        es `now + lifetime`. Un fallo del backend criptografico se propaga
        tal cual (es un error inesperado, no una decision de negocio).
        """
        issued_at = int(time.time() if now is None else now)
        payload = {
            "userId": claim.user_id,
            "username": claim.username,
            "email": claim.email,
            "iat": issued_at,
            "exp": issued_at + int(self.lifetime.total_seconds()),
        }
        return jwt.encode(payload, self.secret, algorithm=ALGORITHM)

    def verify(self, token: str, now: Optional[float] = None) -> Optional[IdentityClaim]:
        """
        Verifica firma y vencimiento. Retorna el claim o None.

        La expiracion se comprueba aqui (y no dentro de jose) para poder
        usar el reloj inyectado; jose solo valida la firma y la forma.
        """
        current = time.time() if now is None else now
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[ALGORITHM],
                options={"verify_exp": False, "verify_iat": False},
            )
            claim = IdentityClaim(
                user_id=str(payload["userId"]),
                username=str(payload["username"]),
                email=str(payload["email"]),
                issued_at=int(payload["iat"]),
                expires_at=int(payload["exp"]),
            )
        except (JWTError, KeyError, TypeError, ValueError) as exc:
            logger.debug("Token rejected", reason=type(exc).__name__)
            return None

        if current > claim.expires_at:
            logger.debug("Token rejected", reason="expired")
            return None
        return claim

    def extract_from_request(self, request: Request) -> Optional[IdentityClaim]:
        """
        Lee el header Authorization y verifica el token que contiene.

        El prefijo debe ser exactamente "Bearer " (con B mayuscula y un
        solo espacio). Sin header o con otro prefijo no se intenta
        verificar nada.
        """
        header = request.headers.get("authorization")
        if not header or not header.startswith(BEARER_PREFIX):
            return None
        return self.verify(header[len(BEARER_PREFIX):])

    def guard(self, request: Request) -> AuthResult:
        """Primer filtro de toda ruta que modifica datos."""
        claim = self.extract_from_request(request)
        if claim is None:
            return AuthResult(authorized=False, error=UNAUTHORIZED_MESSAGE)
        return AuthResult(authorized=True, claim=claim)
