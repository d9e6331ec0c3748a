"""
Modulo de servicio de email (Resend) para el formulario de contacto.

Resend expone una API HTTP simple: un POST a /emails con un JSON que
describe el mensaje, autenticado con "Authorization: Bearer <api key>".
La respuesta exitosa trae el id del email enviado:

    {"id": "49a3999c-0ce1-4ea6-ab68-afcd6dc2e794"}

Usamos httpx como cliente HTTP. El constructor acepta un `client`
opcional para inyectar en los tests un httpx.Client con MockTransport,
sin hacer llamadas reales.
"""

import html
from typing import Optional

import httpx

from portfolio.config import settings
from portfolio.logging_config import get_logger

logger = get_logger("portfolio.email")


class EmailDeliveryError(Exception):
    """El proveedor de email rechazo el mensaje o no respondio."""


def render_contact_html(name: str, email: str, subject: str, message: str) -> str:
    """
    Arma el cuerpo HTML del aviso de contacto.

    Todo lo que escribio el visitante se escapa con html.escape: un
    mensaje con "<script>" llega como texto, no como codigo.
    """
    body = html.escape(message).replace("\n", "<br>")
    return (
        "<h2>New Contact Form Submission</h2>"
        f"<p><strong>From:</strong> {html.escape(name)}</p>"
        f"<p><strong>Email:</strong> {html.escape(email)}</p>"
        f"<p><strong>Subject:</strong> {html.escape(subject)}</p>"
        "<hr />"
        "<p><strong>Message:</strong></p>"
        f"<p>{body}</p>"
    )


class EmailService:
    """
    Cliente minimo de la API de Resend.

    Atributos:
        client (httpx.Client): Cliente HTTP (con timeout de 10 segundos).
        api_url (str): Endpoint de envio.
    """

    def __init__(self, client: Optional[httpx.Client] = None):
        self.client = client or httpx.Client(timeout=10.0)
        self.api_url = settings.RESEND_API_URL

    def send_contact_message(self, name: str, email: str, subject: str, message: str) -> dict:
        """
        Envia el mensaje del formulario al dueno del portafolio.

        El "reply_to" es el email del visitante, asi responder desde el
        cliente de correo le llega directo a el.

        Raises:
            EmailDeliveryError: Si la API responde con error o no se
                puede contactar.
        """
        payload = {
            "from": settings.RESEND_FROM_EMAIL,
            "to": [settings.RESEND_TO_EMAIL],
            "reply_to": email,
            "subject": f"Portfolio Contact: {subject}",
            "html": render_contact_html(name, email, subject, message),
        }
        try:
            response = self.client.post(
                self.api_url,
                json=payload,
                headers={"Authorization": f"Bearer {settings.RESEND_API_KEY}"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Email provider rejected message",
                status_code=exc.response.status_code,
                body=exc.response.text,
            )
            raise EmailDeliveryError(f"Email provider returned {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            logger.error("Email provider unreachable", error=str(exc))
            raise EmailDeliveryError(str(exc)) from exc

        try:
            return response.json()
        except ValueError as exc:
            logger.error("Email provider returned invalid JSON", body=response.text[:200])
            raise EmailDeliveryError("Email provider returned an invalid response") from exc


email_service = EmailService()
