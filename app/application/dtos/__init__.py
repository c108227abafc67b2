"""Application DTOs: use-case inputs and outputs (no dependency on ORM)."""

from app.application.dtos.consent import (
    DeletionCompleted,
    DeletionInitiated,
    EmailVerificationOutcome,
    HandoffIssued,
    PasswordResetFinalized,
    PasswordResetInitiated,
    PasswordResetVerified,
    VerificationLinksSent,
)

__all__ = [
    "DeletionCompleted",
    "DeletionInitiated",
    "EmailVerificationOutcome",
    "HandoffIssued",
    "PasswordResetFinalized",
    "PasswordResetInitiated",
    "PasswordResetVerified",
    "VerificationLinksSent",
]
