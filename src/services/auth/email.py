"""Transactional email senders for verification and password reset links."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from html import escape
from typing import Any

import resend

from src.config import settings

logger = logging.getLogger(__name__)


class EmailSender(ABC):
    """Abstract transactional email delivery."""

    @abstractmethod
    async def send(self, to: str, subject: str, html: str) -> None:
        """Deliver one message. Raises on failure."""

    async def aclose(self) -> None:
        return None

    async def send_verification_email(self, to: str, token: str, name: str) -> None:
        link = f"{settings.APP_BASE_URL}/auth/verify?token={token}"
        hours = settings.VERIFICATION_TOKEN_TTL_HOURS
        await self.send(
            to,
            f"Verify Your Email - {settings.PLATFORM_NAME}",
            (
                f"<p>Hi {escape(name)},</p>"
                f"<p>Thank you for registering as a supplier with "
                f"{settings.PLATFORM_NAME}.</p>"
                f'<p><a href="{link}">Verify your email address</a></p>'
                f"<p>This link will expire in {hours} hours.</p>"
            ),
        )

    async def send_password_reset_email(self, to: str, token: str, name: str) -> None:
        link = f"{settings.APP_BASE_URL}/auth/reset-password?token={token}"
        await self.send(
            to,
            f"Reset Your Password - {settings.PLATFORM_NAME}",
            (
                f"<p>Hi {escape(name)},</p>"
                "<p>We received a request to reset your password.</p>"
                f'<p><a href="{link}">Choose a new password</a></p>'
                "<p>This link will expire in 1 hour. If you did not ask for a "
                "reset you can ignore this email.</p>"
            ),
        )


class LoggingEmailSender(EmailSender):
    """Development sender that only logs the message."""

    async def send(self, to: str, subject: str, html: str) -> None:
        logger.info("Email to %s: %s", to, subject)
        logger.debug("Email body: %s", html)


class ResendEmailSender(EmailSender):
    """Sender backed by the Resend SDK; sends run in a worker thread."""

    def __init__(self, *, api_key: str, sender: str) -> None:
        if not api_key:
            raise ValueError("Resend API key is required to send email")
        self._api_key = api_key
        self._sender = sender

    def _send_sync(self, params: dict[str, Any]) -> dict[str, Any]:
        resend.api_key = self._api_key
        return resend.Emails.send(params)

    async def send(self, to: str, subject: str, html: str) -> None:
        params = {"from": self._sender, "to": [to], "subject": subject, "html": html}
        response = await asyncio.to_thread(self._send_sync, params)
        if not isinstance(response, dict) or not response.get("id"):
            raise RuntimeError(f"Resend did not accept email to {to}: {response}")
        logger.info("Email sent to %s: %s", to, subject)


def create_email_sender() -> EmailSender:
    if not settings.email_enabled:
        logger.info("RESEND_API_KEY not set, emails will only be logged")
        return LoggingEmailSender()
    return ResendEmailSender(api_key=settings.RESEND_API_KEY, sender=settings.EMAIL_FROM)
