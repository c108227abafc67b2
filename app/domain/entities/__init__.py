"""Domain entities.

Pure domain records; no ORM or persistence concerns. Repositories build them
from ORM rows at the persistence boundary.
"""

from app.domain.entities.account import AccountEntity
from app.domain.entities.deletion_request import DeletionRequestEntity
from app.domain.entities.password_reset_request import PasswordResetRequestEntity
from app.domain.entities.secret_handoff import SecretHandoffEntity

__all__ = [
    "AccountEntity",
    "DeletionRequestEntity",
    "PasswordResetRequestEntity",
    "SecretHandoffEntity",
]
