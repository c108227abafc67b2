"""Domain value objects and shared value types."""

from app.domain.value_objects.core import (
    EmailAddress,
    OneTimeCode,
    mask_email_address,
    normalize_email,
)

__all__ = [
    "EmailAddress",
    "OneTimeCode",
    "mask_email_address",
    "normalize_email",
]
