"""Auth API schemas: login and bearer token."""

from pydantic import BaseModel, Field

from app.domain.enums import PartnerRole


class LoginRequest(BaseModel):
    """Request body for login. Either partner's email (or the username) plus the shared password."""

    identifier: str = Field(
        ...,
        min_length=1,
        max_length=254,
        description="Primary email, partner email, or username",
    )
    password: str = Field(..., min_length=1, max_length=256)


class TokenResponse(BaseModel):
    """JWT token response."""

    access_token: str
    token_type: str = "bearer"
    account_id: str
    role: PartnerRole
