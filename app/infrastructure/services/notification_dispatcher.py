"""Notification dispatcher: renders consent protocol emails and hands them to an IEmailSender.

Links point at the web client (FRONTEND_URL); raw tokens appear only in
those links, never in log lines.
"""

from __future__ import annotations

from datetime import datetime
from urllib.parse import quote, urlencode

from app.application.interfaces.services import IEmailSender
from app.domain.enums import PartnerRole
from app.infrastructure.services.notification_templates import NotificationTemplateRenderer
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def _format_expiry(expires_at: datetime) -> str:
    return expires_at.strftime("%Y-%m-%d %H:%M UTC")


class EmailNotificationDispatcher:
    """INotificationDispatcher implementation. Each send raises whatever the sender raises."""

    def __init__(
        self,
        sender: IEmailSender,
        frontend_url: str,
        renderer: NotificationTemplateRenderer | None = None,
    ) -> None:
        self._sender = sender
        self._frontend_url = frontend_url.rstrip("/")
        self._renderer = renderer or NotificationTemplateRenderer()

    def _link(self, path: str, **params: str) -> str:
        url = f"{self._frontend_url}{path}"
        return f"{url}?{urlencode(params)}" if params else url

    async def _deliver(self, email: str, template_key: str, **context: object) -> None:
        subject, body = self._renderer.render(template_key, **context)
        await self._sender.send([email], subject, body)
        logger.debug("Dispatched %s email", template_key)

    async def send_code(
        self,
        email: str,
        *,
        code: str,
        expires_at: datetime,
        initiator_name: str,
        initiator_email: str | None = None,
        partner_display_name: str | None = None,
    ) -> None:
        await self._deliver(
            email,
            "password_reset_code",
            code=code,
            expires_at=_format_expiry(expires_at),
            initiator_name=initiator_name,
            initiator_email=initiator_email,
            partner_display_name=partner_display_name,
        )

    async def send_finalize_link(
        self,
        email: str,
        *,
        token: str,
        expires_at: datetime,
        requester_name: str | None = None,
        approving_partner_name: str | None = None,
    ) -> None:
        await self._deliver(
            email,
            "password_reset_link",
            link=self._link("/reset-password", token=token),
            expires_at=_format_expiry(expires_at),
            requester_name=requester_name,
            approving_partner_name=approving_partner_name,
        )

    async def send_secret_handoff_link(
        self,
        email: str,
        *,
        token: str,
        expires_at: datetime,
        partner_name: str | None = None,
        initiator_name: str | None = None,
    ) -> None:
        await self._deliver(
            email,
            "password_share",
            link=self._link(f"/password-share/{quote(token, safe='')}"),
            expires_at=_format_expiry(expires_at),
            partner_name=partner_name,
            initiator_name=initiator_name,
        )

    async def send_deletion_code(
        self,
        email: str,
        *,
        code: str,
        expires_at: datetime,
        recipient_name: str | None,
        initiator_name: str | None,
        initiator_email: str | None,
        requires_partner_share: bool,
    ) -> None:
        await self._deliver(
            email,
            "account_deletion_code",
            code=code,
            expires_at=_format_expiry(expires_at),
            recipient_name=recipient_name,
            initiator_name=initiator_name,
            initiator_email=initiator_email,
            requires_partner_share=requires_partner_share,
        )

    async def send_deletion_notice(self, email: str, *, account_name: str | None) -> None:
        await self._deliver(email, "account_deletion_notice", account_name=account_name)

    async def send_email_verification_link(
        self,
        email: str,
        *,
        token: str,
        role: PartnerRole,
        username: str | None,
    ) -> None:
        path = (
            "/verify-partner-email-link" if role is PartnerRole.PARTNER else "/verify-email-link"
        )
        await self._deliver(
            email,
            "email_verification",
            link=self._link(path, token=token),
            role=role.value,
            username=username,
        )
