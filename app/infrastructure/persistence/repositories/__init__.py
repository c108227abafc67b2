"""Persistence repositories: SQLAlchemy implementations of the application ports."""

from app.infrastructure.persistence.repositories.account_repo import AccountRepository
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.deletion_request_repo import (
    DeletionRequestRepository,
)
from app.infrastructure.persistence.repositories.password_reset_repo import (
    PasswordResetRequestRepository,
)
from app.infrastructure.persistence.repositories.secret_handoff_repo import (
    SecretHandoffRepository,
)

__all__ = [
    "AccountRepository",
    "BaseRepository",
    "DeletionRequestRepository",
    "PasswordResetRequestRepository",
    "SecretHandoffRepository",
]
