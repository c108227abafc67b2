"""Tests for the new-password strength policy."""

import pytest

from app.application.services.password_policy import (
    PASSWORD_REQUIREMENTS_MESSAGE,
    ensure_password_strong,
    is_password_strong,
)
from app.domain.exceptions import ValidationException


@pytest.mark.parametrize("password", ["NewPass123!", "Abcdefg12", "ZZ99zzzz"])
def test_strong_passwords(password: str) -> None:
    assert is_password_strong(password)


@pytest.mark.parametrize(
    "password",
    [
        "Short12",  # too short
        "newpass123",  # no uppercase
        "NewPassword1",  # one digit
        "",
    ],
)
def test_weak_passwords(password: str) -> None:
    assert not is_password_strong(password)


def test_ensure_password_strong_raises_with_policy_message() -> None:
    with pytest.raises(ValidationException) as exc_info:
        ensure_password_strong("weak")
    assert exc_info.value.message == PASSWORD_REQUIREMENTS_MESSAGE
    assert exc_info.value.details == {"field": "new_password"}
