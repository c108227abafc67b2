"""Account deletion API: initiate (code to the other partner) and verify (delete).

Requires Authorization: Bearer <token>; the token's account must be the
account in the path.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import CurrentAccount, get_account_deletion_service
from app.application.use_cases.account_deletion import AccountDeletionService
from app.core.limiter import limit_codes, limit_reset
from app.domain.value_objects import mask_email_address
from app.schemas.deletion import (
    DeletionInitiateRequest,
    DeletionInitiateResponse,
    DeletionVerifyRequest,
    DeletionVerifyResponse,
)

router = APIRouter()

DeletionService = Annotated[AccountDeletionService, Depends(get_account_deletion_service)]


@router.post("/{account_id}/deletion", response_model=DeletionInitiateResponse)
@limit_reset
async def initiate_account_deletion(
    request: Request,
    account_id: str,
    current_account: CurrentAccount,
    service: DeletionService,
    body: DeletionInitiateRequest | None = None,
):
    """Email a deletion code to the partner (or to the account email when there is no partner)."""
    started = await service.initiate(
        account_id,
        body.initiator_email if body else None,
        acting_account_id=current_account.id,
    )
    message = (
        "A verification code has been emailed to your partner."
        if started.requires_partner_share
        else "A verification code has been emailed to your account email address."
    )
    return DeletionInitiateResponse(
        message=message,
        expires_at=started.expires_at,
        recipient_email_hint=mask_email_address(started.recipient_email),
        requires_partner_share=started.requires_partner_share,
    )


@router.post("/{account_id}/deletion/verify", response_model=DeletionVerifyResponse)
@limit_codes
async def verify_account_deletion(
    request: Request,
    account_id: str,
    body: DeletionVerifyRequest,
    current_account: CurrentAccount,
    service: DeletionService,
):
    """Check the code and delete the account with everything it owns."""
    completed = await service.verify(
        account_id, body.code, acting_account_id=current_account.id
    )
    return DeletionVerifyResponse(
        account_id=completed.account_id,
        approver_role=completed.approver_role,
        partner_notified=completed.partner_notified,
    )
