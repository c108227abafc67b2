"""Infrastructure implementations of application service interfaces."""

from app.infrastructure.services.email_sender import (
    LogOnlyEmailSender,
    SmtpEmailSender,
    build_email_sender,
)
from app.infrastructure.services.notification_dispatcher import EmailNotificationDispatcher
from app.infrastructure.services.notification_templates import NotificationTemplateRenderer

__all__ = [
    "EmailNotificationDispatcher",
    "LogOnlyEmailSender",
    "NotificationTemplateRenderer",
    "SmtpEmailSender",
    "build_email_sender",
]
