"""Domain value objects for the Duet application.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from dataclasses import dataclass

# Loose shape check only; deliverability is proven by the emailed code/link.
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+$")


def normalize_email(value: str | None) -> str | None:
    """Trim and lowercase an email address; return None when empty."""
    if not isinstance(value, str):
        return None
    trimmed = value.strip().lower()
    return trimmed or None


def mask_email_address(email: str) -> str:
    """Return a hint like 'ab***@example.com' that does not reveal the full address."""
    local, sep, domain = email.partition("@")
    if not sep or not domain:
        return email
    if len(local) <= 2:
        return f"{local[:1] or '*'}***@{domain}"
    return f"{local[:2]}***@{domain}"


@dataclass(frozen=True)
class EmailAddress:
    """Value object for a normalized email address (trimmed, lowercase)."""

    value: str

    def __post_init__(self) -> None:
        if not self.value or not _EMAIL_RE.match(self.value):
            raise ValueError("Please enter a valid email address.")
        if self.value != self.value.strip().lower():
            raise ValueError("EmailAddress must be normalized; use EmailAddress.parse")

    @classmethod
    def parse(cls, raw: str | None) -> "EmailAddress":
        """Normalize then validate raw input. Raises ValueError if empty or malformed."""
        normalized = normalize_email(raw)
        if normalized is None:
            raise ValueError("Email address is required.")
        return cls(normalized)

    @property
    def masked(self) -> str:
        return mask_email_address(self.value)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class OneTimeCode:
    """Value object for a user-entered numeric code.

    Non-digit characters (spaces, dashes from copy/paste) are stripped; the
    remaining digits must be exactly `length` long.
    """

    value: str
    length: int = 6

    def __post_init__(self) -> None:
        if len(self.value) != self.length or not self.value.isdigit():
            raise ValueError("Enter the full verification code.")

    @classmethod
    def parse(cls, raw: str | None, length: int = 6) -> "OneTimeCode":
        digits = re.sub(r"\D", "", raw or "")
        return cls(digits, length)

    def __str__(self) -> str:
        return self.value
