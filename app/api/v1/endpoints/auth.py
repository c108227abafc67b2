"""Auth API: login, two-party password reset, and paired email verification.

Uses only injected dependencies; no manual repo or service construction.
Domain exceptions raised by the use cases are mapped to HTTP responses by
app.core.exception_handlers.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    get_authentication_service,
    get_email_verification_service,
    get_password_reset_service,
)
from app.application.dtos.consent import EmailVerificationOutcome
from app.application.services.authentication_service import AuthenticationService
from app.application.use_cases.email_verification import EmailVerificationService
from app.application.use_cases.password_reset import PasswordResetService
from app.core.limiter import (
    check_reset_rate_per_email,
    limit_auth,
    limit_codes,
    limit_links,
    limit_reset,
)
from app.domain.enums import PartnerRole
from app.schemas.auth import LoginRequest, TokenResponse
from app.schemas.password_reset import (
    PasswordResetFinalizeRequest,
    PasswordResetFinalizeResponse,
    PasswordResetInitiateRequest,
    PasswordResetInitiateResponse,
    PasswordResetVerifyRequest,
    PasswordResetVerifyResponse,
)
from app.schemas.verification import (
    EmailVerificationRequest,
    EmailVerificationResponse,
    ResendVerificationRequest,
    ResendVerificationResponse,
)

router = APIRouter()

ResetService = Annotated[PasswordResetService, Depends(get_password_reset_service)]
VerificationService = Annotated[EmailVerificationService, Depends(get_email_verification_service)]


@router.post("/login", response_model=TokenResponse)
@limit_auth
async def login(
    request: Request,
    body: LoginRequest,
    auth: Annotated[AuthenticationService, Depends(get_authentication_service)],
):
    """Authenticate with either partner's email (or the username) and the shared password."""
    result = await auth.login(body.identifier, body.password)
    return TokenResponse(
        access_token=result.access_token,
        account_id=result.account_id,
        role=result.role,
    )


@router.post("/password-reset/initiate", response_model=PasswordResetInitiateResponse)
@limit_reset
async def initiate_password_reset(
    request: Request,
    body: PasswordResetInitiateRequest,
    service: ResetService,
):
    """Start a reset; the approval code is emailed to the other partner."""
    check_reset_rate_per_email(body.email)
    started = await service.initiate(body.email)
    return PasswordResetInitiateResponse(
        request_id=started.request_id,
        code_expires_at=started.code_expires_at,
        partner_email_hint=started.partner_email_hint,
    )


@router.post("/password-reset/verify", response_model=PasswordResetVerifyResponse)
@limit_codes
async def verify_password_reset_code(
    request: Request,
    body: PasswordResetVerifyRequest,
    service: ResetService,
):
    """Accept the partner's code; the reset link is emailed to the initiator, never returned."""
    verified = await service.verify(body.request_id.strip(), body.code)
    message = (
        "Code accepted. Check your inbox for the secure reset link."
        if verified.link_sent
        else "The code was accepted, but we could not email the reset link. "
        "Please start the reset again."
    )
    return PasswordResetVerifyResponse(
        message=message,
        reset_token_expires_at=verified.reset_token_expires_at,
        link_sent=verified.link_sent,
    )


@router.post("/password-reset/finalize", response_model=PasswordResetFinalizeResponse)
@limit_codes
async def finalize_password_reset(
    request: Request,
    body: PasswordResetFinalizeRequest,
    service: ResetService,
):
    """Set the new password from the reset link; the partner gets a one-time share link."""
    finalized = await service.finalize(body.token.strip(), body.new_password)
    message = (
        "Password updated. Your partner will receive a one-time link with the new password."
        if finalized.partner_share_sent
        else "Password updated."
    )
    return PasswordResetFinalizeResponse(
        message=message, partner_share_sent=finalized.partner_share_sent
    )


def _verification_response(outcome: EmailVerificationOutcome) -> EmailVerificationResponse:
    return EmailVerificationResponse(
        role=outcome.role,
        partner_status=outcome.partner_status,
        fully_verified=outcome.fully_verified,
        message=outcome.message,
    )


@router.post("/verify-email", response_model=EmailVerificationResponse)
@limit_links
async def verify_primary_email(
    request: Request,
    body: EmailVerificationRequest,
    service: VerificationService,
):
    """Confirm the primary partner's email from their link. Safe to repeat."""
    return _verification_response(await service.consume(body.token, PartnerRole.PRIMARY))


@router.post("/verify-partner-email", response_model=EmailVerificationResponse)
@limit_links
async def verify_partner_email(
    request: Request,
    body: EmailVerificationRequest,
    service: VerificationService,
):
    """Confirm the partner's email from their link. Safe to repeat."""
    return _verification_response(await service.consume(body.token, PartnerRole.PARTNER))


@router.post("/resend-verification", response_model=ResendVerificationResponse)
@limit_reset
async def resend_verification(
    request: Request,
    body: ResendVerificationRequest,
    service: VerificationService,
):
    """Re-send links for whichever partner has not confirmed yet."""
    sent = await service.resend(str(body.primary_email), str(body.partner_email))
    return ResendVerificationResponse(message=sent.message, sent_to=sent.sent_to)
