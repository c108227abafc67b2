"""Persistence models: ORM entities and mixins.

Importing this package registers every table on Base.metadata (Alembic and
test schema creation rely on it).
"""

from app.infrastructure.persistence.models.account import Account
from app.infrastructure.persistence.models.account_deletion_request import (
    AccountDeletionRequest,
)
from app.infrastructure.persistence.models.direct_message import DirectMessage
from app.infrastructure.persistence.models.favorite import Favorite
from app.infrastructure.persistence.models.mixins import (
    AccountOwnedMixin,
    CreatedAtMixin,
    CuidMixin,
    TimestampMixin,
)
from app.infrastructure.persistence.models.notification import Notification
from app.infrastructure.persistence.models.password_reset_request import PasswordResetRequest
from app.infrastructure.persistence.models.photo import Photo, PhotoComment, SharedPhoto
from app.infrastructure.persistence.models.secret_handoff import SecretHandoff

__all__ = [
    "Account",
    "AccountDeletionRequest",
    "AccountOwnedMixin",
    "CreatedAtMixin",
    "CuidMixin",
    "DirectMessage",
    "Favorite",
    "Notification",
    "PasswordResetRequest",
    "Photo",
    "PhotoComment",
    "SecretHandoff",
    "SharedPhoto",
    "TimestampMixin",
]
