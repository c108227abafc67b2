"""Account deletion API schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.domain.enums import PartnerRole


class DeletionInitiateRequest(BaseModel):
    """Request body for POST /accounts/{account_id}/deletion.

    initiator_email names which partner is asking; the code goes to the other one.
    """

    initiator_email: str | None = Field(default=None, max_length=254)


class DeletionInitiateResponse(BaseModel):
    """Response for deletion initiate."""

    message: str
    expires_at: datetime
    recipient_email_hint: str
    requires_partner_share: bool


class DeletionVerifyRequest(BaseModel):
    """Request body for POST /accounts/{account_id}/deletion/verify."""

    code: str = Field(..., max_length=32)


class DeletionVerifyResponse(BaseModel):
    """Response once the account and everything it owns is gone."""

    message: str = "Your account has been deleted."
    account_id: str
    approver_role: PartnerRole
    partner_notified: bool
