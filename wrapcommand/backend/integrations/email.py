"""
Email Delivery.

Quote confirmation emails sent through the Resend HTTP API.

Every send goes through the resilience stack, configured in
config/settings/integrations.yaml under ``email``:
    circuit breaker → retry → semaphore("external_api") → timeout → POST

Transport errors, 429 and 5xx responses are retried. Other 4xx responses,
an open breaker and exhausted retries surface as ExternalServiceError.
"""

import asyncio
from dataclasses import dataclass
from html import escape

import aiobreaker
import httpx

from wrapcommand.backend.core.concurrency import get_semaphore
from wrapcommand.backend.core.config import get_app_config, get_settings
from wrapcommand.backend.core.exceptions import ExternalServiceError
from wrapcommand.backend.core.logging import get_logger
from wrapcommand.backend.core.resilience import create_circuit_breaker, create_retrying

logger = get_logger(__name__)

_breaker: aiobreaker.CircuitBreaker | None = None


class TransientEmailError(Exception):
    """Retryable failure reported by the email provider."""


_RETRYABLE = (TransientEmailError, httpx.TransportError, TimeoutError)


@dataclass(frozen=True)
class EmailMessage:
    to: str
    subject: str
    html: str


def get_email_breaker() -> aiobreaker.CircuitBreaker:
    """Shared circuit breaker for the email provider, created on first use."""
    global _breaker
    if _breaker is None:
        _breaker = create_circuit_breaker("email", get_app_config().integrations.email.circuit_breaker)
    return _breaker


def reset_email_breaker() -> None:
    global _breaker
    _breaker = None


class EmailClient:
    """
    Resend API client.

    Args:
        api_key: Overrides RESEND_API_KEY from config/.env
        transport: Optional httpx transport (tests pass httpx.MockTransport)
    """

    def __init__(
        self,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = get_app_config().integrations.email
        self._api_key = api_key if api_key is not None else get_settings().resend_api_key
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    async def send(self, message: EmailMessage) -> str | None:
        """
        Send an email and return the provider's message ID.

        Raises:
            ExternalServiceError: If delivery is not configured or fails
        """
        if not self.configured:
            raise ExternalServiceError("Email delivery is not configured")

        try:
            message_id = await get_email_breaker().call_async(self._send_with_retry, message)
        except aiobreaker.CircuitBreakerError as e:
            raise ExternalServiceError("Email provider unavailable (circuit open)") from e
        except _RETRYABLE as e:
            raise ExternalServiceError(f"Email delivery failed: {e}") from e

        logger.info("Email sent", extra={"to": message.to, "message_id": message_id})
        return message_id

    async def _send_with_retry(self, message: EmailMessage) -> str | None:
        async for attempt in create_retrying(self._config.retry, _RETRYABLE):
            with attempt:
                return await self._post(message)
        return None

    async def _post(self, message: EmailMessage) -> str | None:
        payload = {
            "from": self._config.from_address,
            "to": [message.to],
            "subject": message.subject,
            "html": message.html,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}

        async with get_semaphore("external_api"):
            async with asyncio.timeout(self._config.timeout_seconds):
                async with httpx.AsyncClient(transport=self._transport) as client:
                    response = await client.post(
                        self._config.api_url,
                        json=payload,
                        headers=headers,
                    )

        if response.status_code == 429 or response.status_code >= 500:
            raise TransientEmailError(f"Provider returned {response.status_code}")
        if response.status_code >= 400:
            logger.warning(
                "Email rejected by provider",
                extra={"status_code": response.status_code, "body": response.text[:500]},
            )
            raise ExternalServiceError(f"Email rejected by provider ({response.status_code})")
        try:
            return response.json().get("id")
        except ValueError:
            logger.warning(
                "Email accepted without a JSON body",
                extra={"status_code": response.status_code, "body": response.text[:500]},
            )
            return None


def render_quote_confirmation(
    *,
    customer_name: str,
    customer_email: str,
    quote_number: str,
    vehicle: str,
    material: str,
    sqft: float,
    total_price: float,
) -> EmailMessage:
    """Build the customer-facing quote confirmation email."""
    reply_phone = get_app_config().integrations.email.reply_phone
    html = (
        f"<h2>Your wrap quote {escape(quote_number)}</h2>"
        f"<p>Hi {escape(customer_name)},</p>"
        f"<p>Thanks for your request. Here is your estimate:</p>"
        f"<table>"
        f"<tr><td>Vehicle</td><td>{escape(vehicle) or 'Custom'}</td></tr>"
        f"<tr><td>Material</td><td>{escape(material)}</td></tr>"
        f"<tr><td>Coverage</td><td>{sqft:,.1f} sq ft</td></tr>"
        f"<tr><td><strong>Estimated total</strong></td><td><strong>${total_price:,.2f}</strong></td></tr>"
        f"</table>"
        f"<p>Questions? Reply to this email or call {escape(reply_phone)}.</p>"
    )
    return EmailMessage(
        to=customer_email,
        subject=f"Your wrap quote {quote_number}",
        html=html,
    )
