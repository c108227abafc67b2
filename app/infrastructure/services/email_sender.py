"""Email transports: log-only (no SMTP configured) and SMTP."""

from __future__ import annotations

import asyncio
import logging
import smtplib
import ssl
from email.message import EmailMessage

from app.core.config import Settings
from app.domain.value_objects import mask_email_address
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class LogOnlyEmailSender:
    """IEmailSender implementation that logs instead of sending email.

    Use when SMTP_HOST is not configured (local development).
    """

    async def send(
        self,
        to_emails: list[str],
        subject: str,
        body: str,
    ) -> None:
        """Log the email; nothing is sent."""
        recipients = list(to_emails or [])
        if not recipients:
            logger.info("Email: no recipients, skipping send (subject=%r)", subject[:80])
            return
        logger.info(
            "Email: would send to %s (subject=%r)",
            ", ".join(mask_email_address(r) for r in recipients),
            subject[:80],
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Email body (first 500 chars): %s", (body or "")[:500])


class SmtpEmailSender:
    """IEmailSender over SMTP with STARTTLS; the blocking client runs in a worker thread."""

    def __init__(self, settings: Settings) -> None:
        self._host = settings.smtp_host
        self._port = settings.smtp_port
        self._username = settings.smtp_username
        self._password = (
            settings.smtp_password.get_secret_value() if settings.smtp_password else None
        )
        self._use_tls = settings.smtp_use_tls
        self._timeout = settings.smtp_timeout_seconds
        self._from = f"{settings.mail_from_name} <{settings.mail_from_address}>"

    def _build_message(self, to_emails: list[str], subject: str, body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self._from
        msg["To"] = ", ".join(to_emails)
        msg.set_content(body)
        return msg

    def _send_sync(self, msg: EmailMessage) -> None:
        with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as smtp:
            if self._use_tls:
                smtp.starttls(context=ssl.create_default_context())
            if self._username and self._password:
                smtp.login(self._username, self._password)
            smtp.send_message(msg)

    async def send(
        self,
        to_emails: list[str],
        subject: str,
        body: str,
    ) -> None:
        """Send one plain-text email. Raises smtplib/OSError errors on failure."""
        if not to_emails:
            return
        await asyncio.to_thread(self._send_sync, self._build_message(to_emails, subject, body))
        logger.info(
            "Email sent to %s (subject=%r)",
            ", ".join(mask_email_address(r) for r in to_emails),
            subject[:80],
        )


def build_email_sender(settings: Settings) -> LogOnlyEmailSender | SmtpEmailSender:
    """SMTP sender when SMTP_HOST is set, log-only otherwise."""
    if settings.smtp_host:
        return SmtpEmailSender(settings)
    return LogOnlyEmailSender()
