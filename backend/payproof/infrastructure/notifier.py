"""Notifier: delivery of the admin email for a new payment.

Invariants:
    - send() raises NotifyFailureError on any delivery failure (HTTP, network, API error)
    - Message content comes from core/notification_content.py; notifiers only transport it
    - API keys never appear in logs

Design Decisions:
    - ResendNotifier calls the Resend REST API directly through httpx
    - LogNotifier is selected when no Resend API key or admin address is configured
"""

import logging
from typing import Protocol

import httpx

from payproof.core.domain_types import NotifyLocale, PaymentRecord
from payproof.core.errors import ErrorContext, NotifyFailureError
from payproof.core.notification_content import render_payment_notification

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Notification contract used by the orchestrator."""

    async def send(self, record: PaymentRecord) -> None: ...


class ResendNotifier:
    """Sends the notification email through Resend."""

    def __init__(
        self,
        api_key: str,
        sender: str,
        recipient: str,
        *,
        api_url: str = "https://api.resend.com/emails",
        locale: NotifyLocale | str = NotifyLocale.ID,
        timezone: str = "Asia/Jakarta",
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_url = api_url
        self.sender = sender
        self.recipient = recipient
        self.locale = NotifyLocale(locale)
        self.timezone = timezone
        self._api_key = api_key
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)

    async def send(self, record: PaymentRecord) -> None:
        message = render_payment_notification(
            record, locale=self.locale, timezone=self.timezone,
        )
        ctx = ErrorContext(payment_id=record.id)
        try:
            response = await self._client.post(
                self.api_url,
                headers={"Authorization": f"Bearer {self._api_key}"},
                json={
                    "from": self.sender,
                    "to": [self.recipient],
                    "subject": message.subject,
                    "html": message.html,
                    "text": message.text,
                },
            )
        except httpx.HTTPError as e:
            raise NotifyFailureError(f"{type(e).__name__}: {e}", ctx) from e

        if response.is_error:
            raise NotifyFailureError(
                f"Resend responded {response.status_code}: {response.text[:200]}", ctx,
            )
        logger.info(
            f"Notification email sent to {self.recipient}",
            extra={"payment_id": record.id},
        )

    async def close(self) -> None:
        await self._client.aclose()


class LogNotifier:
    """Writes the notification subject to the log instead of sending email."""

    def __init__(
        self,
        locale: NotifyLocale | str = NotifyLocale.ID,
        timezone: str = "Asia/Jakarta",
    ):
        self.locale = NotifyLocale(locale)
        self.timezone = timezone

    async def send(self, record: PaymentRecord) -> None:
        message = render_payment_notification(
            record, locale=self.locale, timezone=self.timezone,
        )
        logger.info(
            f"Notification (not emailed): {message.subject}",
            extra={"payment_id": record.id},
        )

    async def close(self) -> None:
        return None
