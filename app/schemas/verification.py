"""Email ownership verification API schemas."""

from pydantic import BaseModel, EmailStr, Field

from app.domain.enums import PartnerRole, PartnerVerificationStatus


class EmailVerificationRequest(BaseModel):
    """Request body for POST /auth/verify-email and /auth/verify-partner-email."""

    token: str = Field(..., min_length=1, max_length=2048, description="Token from the emailed link")


class EmailVerificationResponse(BaseModel):
    """Outcome of confirming one role's email."""

    role: PartnerRole
    partner_status: PartnerVerificationStatus
    fully_verified: bool
    message: str


class ResendVerificationRequest(BaseModel):
    """Request body for POST /auth/resend-verification. Both emails must match the same couple."""

    primary_email: EmailStr
    partner_email: EmailStr


class ResendVerificationResponse(BaseModel):
    """Roles whose link was re-sent, with masked recipients."""

    message: str
    sent_to: list[str] = Field(default_factory=list)
