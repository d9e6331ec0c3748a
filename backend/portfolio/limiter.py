"""
Modulo de limitacion de tasa de peticiones (Rate Limiting).

Este modulo restringe cuantas peticiones puede hacer un mismo cliente en
una ventana de tiempo, separadamente para cada clase de endpoint:

    login        5 peticiones / 5 minutos   -> frena fuerza bruta
    contact      3 peticiones / 1 hora      -> frena spam
    upload      10 peticiones / 1 hora      -> frena abuso de almacenamiento
    api        100 peticiones / 1 minuto    -> mutaciones autenticadas
    public_read 200 peticiones / 1 minuto   -> lecturas publicas

Algoritmo: ventana fija (fixed window)
--------------------------------------
Cada (clase, cliente) tiene un contador y un instante de reinicio
(`reset_at`). La ventana empieza con la PRIMERA peticion del cliente:

    t=0    peticion 1 -> count=1, reset_at=t+300   (permitida, quedan 4)
    t=5    peticion 2 -> count=2                   (permitida, quedan 3)
    ...
    t=10   peticion 6 -> count=6 > 5               (rechazada, quedan 0)
    t=301  peticion 7 -> ventana vencida, count=1  (permitida, quedan 4)

Es un algoritmo simple y barato (O(1) por peticion). No es exacto en los
bordes de ventana (un cliente puede hacer 2N peticiones en poco tiempo
si las reparte justo antes y justo despues del reinicio), pero el
objetivo es frenar abuso grosero, no medir una cuota exacta.

Identificacion del cliente:
---------------------------
1. Primera IP del header X-Forwarded-For
2. Header X-Real-IP
3. Header User-Agent
4. El literal "unknown"

Esto asume que un reverse proxy (Nginx, un load balancer) escribe los
headers de reenvio con la verdad. Si el servicio se expone directamente,
un cliente puede falsificarlos.

Estado y ciclo de vida:
-----------------------
Los contadores viven en memoria, dentro de UNA instancia de RateLimiter
que se crea al construir la app (main.py) y se guarda en `app.state`.
Las rutas la reciben por inyeccion de dependencias (ver guard.py).
Un barrido periodico (cada 5 minutos) elimina las entradas vencidas para
que la memoria no crezca con clientes abandonados; es solo limpieza, ya
que una entrada vencida se reinicia sola en su siguiente acceso.

Limitacion conocida: con varias replicas del proceso cada una tiene sus
propios contadores. Un despliegue horizontal necesitaria un almacen
compartido (Redis); eso queda fuera del alcance de este backend.
"""

import asyncio
import threading
import time
from dataclasses import dataclass
from typing import Optional

from starlette.requests import Request

from portfolio.logging_config import get_logger

DEFAULT_MESSAGE = "Too many requests. Please try again later."

logger = get_logger("portfolio.limiter")


@dataclass(frozen=True)
class RateLimitConfig:
    """
    Configuracion de una clase de endpoint.

    Atributos:
        name (str): Nombre de la clase; tambien es el espacio de nombres
            de sus contadores (login y contact nunca comparten contador).
        max_requests (int): Peticiones permitidas por ventana.
        window_seconds (int): Duracion de la ventana.
        message (str): Mensaje de error al superar el limite.
        expose_headers (bool): Si la respuesta 429 lleva X-RateLimit-*.
    """

    name: str
    max_requests: int
    window_seconds: int
    message: str = ""
    expose_headers: bool = False


RATE_LIMITS: dict[str, RateLimitConfig] = {
    "login": RateLimitConfig(
        name="login",
        max_requests=5,
        window_seconds=300,
        message="Too many login attempts. Please try again in 5 minutes.",
        expose_headers=True,
    ),
    "contact": RateLimitConfig(
        name="contact",
        max_requests=3,
        window_seconds=3600,
        message="Too many contact form submissions. Please try again later.",
        expose_headers=True,
    ),
    "upload": RateLimitConfig(
        name="upload",
        max_requests=10,
        window_seconds=3600,
        message="Too many upload requests. Please try again later.",
    ),
    "api": RateLimitConfig(
        name="api",
        max_requests=100,
        window_seconds=60,
        message="Too many requests. Please slow down.",
    ),
    "public_read": RateLimitConfig(
        name="public_read",
        max_requests=200,
        window_seconds=60,
        message="Too many requests. Please slow down.",
    ),
}


@dataclass
class RateWindow:
    """Contador de una ventana: cuantas peticiones y cuando se reinicia."""

    count: int
    reset_at: float


@dataclass
class RateLimitDecision:
    """
    Resultado de `RateLimiter.check`. Nunca se lanza una excepcion por
    exceder el limite: el caller decide como responder.
    """

    allowed: bool
    remaining: int
    reset_at: float
    error: Optional[str] = None


def get_client_key(request: Request) -> str:
    """Deriva la clave del cliente a partir de los headers del request."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    return request.headers.get("user-agent") or "unknown"


class RateLimiter:
    """
    Almacen en memoria de ventanas fijas, con barrido periodico.

    El lock serializa la secuencia leer-comparar-incrementar: aunque las
    rutas corran en un thread pool, nunca se admiten mas de N peticiones
    por ventana.
    """

    def __init__(self, sweep_interval: float = 300):
        self.sweep_interval = sweep_interval
        self._windows: dict[str, RateWindow] = {}
        self._lock = threading.Lock()
        self._sweeper: Optional[asyncio.Task] = None

    def __len__(self) -> int:
        return len(self._windows)

    def check(self, client_key: str, config: RateLimitConfig, now: Optional[float] = None) -> RateLimitDecision:
        """
        Registra una peticion de `client_key` y decide si se permite.

        Parametros:
            client_key (str): Identificador del cliente (ver get_client_key).
            config (RateLimitConfig): Clase de endpoint.
            now (float | None): Epoch en segundos; por defecto time.time().
        """
        current = time.time() if now is None else now
        key = f"{config.name}:{client_key}"

        with self._lock:
            window = self._windows.get(key)

            # Paso 1: primera peticion o ventana vencida -> ventana nueva.
            if window is None or window.reset_at < current:
                window = RateWindow(count=1, reset_at=current + config.window_seconds)
                self._windows[key] = window
                return RateLimitDecision(
                    allowed=True,
                    remaining=config.max_requests - 1,
                    reset_at=window.reset_at,
                )

            # Paso 2: ventana vigente -> incrementamos.
            window.count += 1
            remaining = max(0, config.max_requests - window.count)
            allowed = window.count <= config.max_requests

        if not allowed:
            logger.warning(
                "Rate limit exceeded",
                limiter=config.name,
                client_key=client_key,
                count=window.count,
                limit=config.max_requests,
            )
            return RateLimitDecision(
                allowed=False,
                remaining=0,
                reset_at=window.reset_at,
                error=config.message or DEFAULT_MESSAGE,
            )

        return RateLimitDecision(allowed=True, remaining=remaining, reset_at=window.reset_at)

    def sweep(self, now: Optional[float] = None) -> int:
        """Elimina las ventanas vencidas. Retorna cuantas se borraron."""
        current = time.time() if now is None else now
        with self._lock:
            expired = [key for key, window in self._windows.items() if window.reset_at < current]
            for key in expired:
                del self._windows[key]
        if expired:
            logger.debug("Rate limit sweep", removed=len(expired), remaining=len(self._windows))
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._windows.clear()

    # ---------- Barrido en segundo plano ----------

    @property
    def sweeper_running(self) -> bool:
        return self._sweeper is not None and not self._sweeper.done()

    def start_sweeper(self) -> None:
        """Lanza la tarea de barrido en el event loop actual."""
        if self.sweeper_running:
            return
        self._sweeper = asyncio.create_task(self._sweep_forever())

    async def stop_sweeper(self) -> None:
        """Cancela la tarea de barrido y espera a que termine."""
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval)
            self.sweep()
