"""Application services: one-time codes, secret handoff, ownership tokens, login."""

from app.application.services.authentication_service import AuthenticationService, LoginResult
from app.application.services.consent_checks import (
    Challenge,
    ChallengeFailure,
    enforce,
    evaluate,
)
from app.application.services.one_time_code import OneTimeCodeService
from app.application.services.ownership_token_service import OwnershipTokenService
from app.application.services.password_policy import (
    ensure_password_strong,
    is_password_strong,
)
from app.application.services.secret_handoff_service import SecretHandoffService

__all__ = [
    "AuthenticationService",
    "Challenge",
    "ChallengeFailure",
    "LoginResult",
    "OneTimeCodeService",
    "OwnershipTokenService",
    "SecretHandoffService",
    "enforce",
    "ensure_password_strong",
    "evaluate",
    "is_password_strong",
]
