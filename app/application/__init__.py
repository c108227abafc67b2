"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories, mail, crypto).
"""

from app.application.interfaces import (
    IAccountRepository,
    IDeletionRequestRepository,
    IEmailSender,
    INotificationDispatcher,
    IPasswordHasher,
    IPasswordResetRequestRepository,
    ISecretCipher,
    ISecretHandoffRepository,
    ITokenSigner,
    IUnitOfWork,
)
from app.application.services.one_time_code import OneTimeCodeService
from app.application.services.ownership_token_service import OwnershipTokenService
from app.application.services.secret_handoff_service import SecretHandoffService
from app.application.use_cases.account_deletion import AccountDeletionService
from app.application.use_cases.email_verification import EmailVerificationService
from app.application.use_cases.password_reset import PasswordResetService

__all__ = [
    "AccountDeletionService",
    "EmailVerificationService",
    "IAccountRepository",
    "IDeletionRequestRepository",
    "IEmailSender",
    "INotificationDispatcher",
    "IPasswordHasher",
    "IPasswordResetRequestRepository",
    "ISecretCipher",
    "ISecretHandoffRepository",
    "ITokenSigner",
    "IUnitOfWork",
    "OneTimeCodeService",
    "OwnershipTokenService",
    "PasswordResetService",
    "SecretHandoffService",
]
