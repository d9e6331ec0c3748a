"""
Modulo de ruta para el formulario de contacto publico.

Endpoint: POST /api/contact

Flujo:
    1. Rate limiting de la clase "contact" (3 envios por hora por
       cliente). Al exceder: 429 con headers X-RateLimit-*.
    2. Validacion del body (name, email, subject, message).
    3. Envio del email al dueno del portafolio via Resend.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from portfolio.errors import error_body
from portfolio.guard import public_guard
from portfolio.logging_config import get_logger
from portfolio.models.schemas import ContactRequest
from portfolio.services.email import EmailDeliveryError, email_service

router = APIRouter()

logger = get_logger("portfolio.routes.contact")


@router.post("/api/contact", dependencies=[Depends(public_guard("contact"))])
def send_contact_message(form: ContactRequest):
    """
    Reenvia un mensaje del formulario de contacto por email.

    Retorna:
        200 {"success": true, "data": {"id": "..."}} si el proveedor
            acepto el mensaje.
        500 {"success": false, "error": "Failed to send message",
             "details": "..."} si el proveedor fallo.
    """
    try:
        data = email_service.send_contact_message(
            name=form.name,
            email=form.email,
            subject=form.subject,
            message=form.message,
        )
    except EmailDeliveryError as exc:
        return JSONResponse(
            status_code=500,
            content=error_body("Failed to send message", details=str(exc)),
        )

    logger.info("Contact message sent", subject=form.subject)
    return {"success": True, "data": data}
