"""Password reset API schemas (initiate, verify, finalize) and the password share reveal."""

from datetime import datetime

from pydantic import BaseModel, Field


class PasswordResetInitiateRequest(BaseModel):
    """Request body for POST /auth/password-reset/initiate."""

    email: str = Field(
        ...,
        max_length=254,
        description="Email of the partner who forgot the password",
    )


class PasswordResetInitiateResponse(BaseModel):
    """The code went to the counterpart; only a masked hint of their address is returned."""

    request_id: str
    message: str = "We emailed your partner a one-time verification code."
    code_expires_at: datetime
    partner_email_hint: str


class PasswordResetVerifyRequest(BaseModel):
    """Request body for POST /auth/password-reset/verify."""

    request_id: str = Field(..., max_length=128)
    code: str = Field(..., max_length=32, description="Code the partner received")


class PasswordResetVerifyResponse(BaseModel):
    """The reset link is emailed to the initiator; it is never part of this response."""

    message: str
    reset_token_expires_at: datetime
    link_sent: bool


class PasswordResetFinalizeRequest(BaseModel):
    """Request body for POST /auth/password-reset/finalize."""

    token: str = Field(..., max_length=128, description="Token from the emailed reset link")
    new_password: str = Field(..., max_length=256)


class PasswordResetFinalizeResponse(BaseModel):
    """Response for a completed reset."""

    message: str
    partner_share_sent: bool


class PasswordShareResponse(BaseModel):
    """Response for GET /password-shares/{token}. Served once per share."""

    password: str
