"""Application use cases: one entry point per consent workflow."""

from app.application.use_cases.account_deletion import AccountDeletionService
from app.application.use_cases.email_verification import EmailVerificationService
from app.application.use_cases.password_reset import PasswordResetService

__all__ = [
    "AccountDeletionService",
    "EmailVerificationService",
    "PasswordResetService",
]
