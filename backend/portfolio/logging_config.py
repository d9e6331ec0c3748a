"""
Modulo de configuracion de logging estructurado.

Usamos structlog para emitir cada evento como una linea JSON con campos
clave-valor en vez de texto libre. Ejemplo de una linea:

    {"event": "Rate limit exceeded", "limiter": "login",
     "client_key": "1.2.3.4", "level": "warning",
     "logger": "portfolio.limiter", "timestamp": "2025-01-01T12:00:00Z"}

Ventaja: los agregadores de logs (CloudWatch, Datadog, Loki) pueden
filtrar por campo ("todos los rechazos del limiter de login") sin
parsear mensajes con expresiones regulares.

Uso:
    from portfolio.logging_config import get_logger

    logger = get_logger("portfolio.routes.contact")
    logger.info("Contact message sent", subject=subject)
"""

import logging
import sys

import structlog


def configure_logging(log_level: str = "info") -> None:
    """
    Configura structlog y el logging de la biblioteca estandar.

    Se llama una vez al construir la app (ver main.py). Llamarla de
    nuevo simplemente reemplaza la configuracion.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Retorna un logger estructurado con el nombre dado."""
    return structlog.get_logger(name)
