"""Tests for domain exception to HTTP status mapping."""

import pytest

from app.core.exception_handlers import status_for
from app.domain.exceptions import (
    AlreadyUsedException,
    AuthenticationException,
    AuthorizationException,
    CredentialException,
    DuetException,
    ExpiredException,
    InvalidCodeException,
    NotificationDeliveryException,
    ResourceNotFoundException,
    SqlNotConfiguredException,
    ValidationException,
)


@pytest.mark.parametrize(
    ("exc", "status"),
    [
        (ResourceNotFoundException("account"), 404),
        (AlreadyUsedException("password_share"), 410),
        (ExpiredException("password_share"), 410),
        (InvalidCodeException(), 400),
        (ValidationException("bad", field="email"), 400),
        (AuthenticationException(), 401),
        (AuthorizationException(reason="role_mismatch"), 403),
        (NotificationDeliveryException("password_reset_code"), 502),
        (SqlNotConfiguredException(), 503),
        (CredentialException(), 500),
        (DuetException("other"), 400),
    ],
)
def test_status_for(exc: DuetException, status: int) -> None:
    assert status_for(exc) == status
