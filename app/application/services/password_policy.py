"""Password strength policy for new account passwords."""

import re

from app.domain.exceptions import ValidationException

PASSWORD_MIN_LENGTH = 8
PASSWORD_REQUIREMENTS_MESSAGE = (
    "Password must include at least 8 characters, one uppercase letter, and two numbers."
)

_UPPERCASE_RE = re.compile(r"[A-Z]")
_DIGIT_RE = re.compile(r"\d")


def is_password_strong(password: str) -> bool:
    """Return True if password meets length, uppercase, and two-digit requirements."""
    if not isinstance(password, str) or len(password) < PASSWORD_MIN_LENGTH:
        return False
    if not _UPPERCASE_RE.search(password):
        return False
    return len(_DIGIT_RE.findall(password)) >= 2


def ensure_password_strong(password: str, field: str = "new_password") -> None:
    """Raise ValidationException with the policy message if password is weak."""
    if not is_password_strong(password):
        raise ValidationException(PASSWORD_REQUIREMENTS_MESSAGE, field=field)
