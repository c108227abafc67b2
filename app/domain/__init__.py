"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.entities import (
    AccountEntity,
    DeletionRequestEntity,
    PasswordResetRequestEntity,
    SecretHandoffEntity,
)
from app.domain.enums import AccountKind, ConsentStatus, PartnerRole
from app.domain.exceptions import (
    AlreadyUsedException,
    AuthenticationException,
    AuthorizationException,
    DuetException,
    ExpiredException,
    InvalidCodeException,
    NotificationDeliveryException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.value_objects import EmailAddress, OneTimeCode

__all__ = [
    # Entities
    "AccountEntity",
    "DeletionRequestEntity",
    "PasswordResetRequestEntity",
    "SecretHandoffEntity",
    # Enums
    "AccountKind",
    "ConsentStatus",
    "PartnerRole",
    # Exceptions
    "AlreadyUsedException",
    "AuthenticationException",
    "AuthorizationException",
    "DuetException",
    "ExpiredException",
    "InvalidCodeException",
    "NotificationDeliveryException",
    "ResourceNotFoundException",
    "ValidationException",
    # Value objects
    "EmailAddress",
    "OneTimeCode",
]
