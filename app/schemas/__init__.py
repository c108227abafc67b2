"""Pydantic request/response schemas for the API."""

from app.schemas.auth import LoginRequest, TokenResponse
from app.schemas.deletion import (
    DeletionInitiateRequest,
    DeletionInitiateResponse,
    DeletionVerifyRequest,
    DeletionVerifyResponse,
)
from app.schemas.health import HealthResponse
from app.schemas.password_reset import (
    PasswordResetFinalizeRequest,
    PasswordResetFinalizeResponse,
    PasswordResetInitiateRequest,
    PasswordResetInitiateResponse,
    PasswordResetVerifyRequest,
    PasswordResetVerifyResponse,
    PasswordShareResponse,
)
from app.schemas.verification import (
    EmailVerificationRequest,
    EmailVerificationResponse,
    ResendVerificationRequest,
    ResendVerificationResponse,
)

__all__ = [
    "DeletionInitiateRequest",
    "DeletionInitiateResponse",
    "DeletionVerifyRequest",
    "DeletionVerifyResponse",
    "EmailVerificationRequest",
    "EmailVerificationResponse",
    "HealthResponse",
    "LoginRequest",
    "PasswordResetFinalizeRequest",
    "PasswordResetFinalizeResponse",
    "PasswordResetInitiateRequest",
    "PasswordResetInitiateResponse",
    "PasswordResetVerifyRequest",
    "PasswordResetVerifyResponse",
    "PasswordShareResponse",
    "ResendVerificationRequest",
    "ResendVerificationResponse",
    "TokenResponse",
]
