"""Application interfaces (ports): repository and service protocols.

No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.repositories import (
    IAccountRepository,
    IDeletionRequestRepository,
    IPasswordResetRequestRepository,
    ISecretHandoffRepository,
    IUnitOfWork,
)
from app.application.interfaces.services import (
    IEmailSender,
    INotificationDispatcher,
    IPasswordHasher,
    ISecretCipher,
    ITokenSigner,
)

__all__ = [
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
]
