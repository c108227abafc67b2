"""Two-party password reset: initiate, verify (counterpart's code), finalize (initiator's link).

The party who did not type the code is the one who receives the reset link,
and the new password is handed to the counterpart through a one-time link
after the change commits.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta

from app.application.dtos.consent import (
    PasswordResetFinalized,
    PasswordResetInitiated,
    PasswordResetVerified,
)
from app.application.interfaces.repositories import (
    IAccountRepository,
    IPasswordResetRequestRepository,
    IUnitOfWork,
)
from app.application.interfaces.services import IPasswordHasher, INotificationDispatcher
from app.application.services.consent_checks import Challenge, ChallengeFailure, enforce
from app.application.services.one_time_code import OneTimeCodeService
from app.application.services.opaque_tokens import (
    digest_token,
    is_well_formed_token,
    new_opaque_token,
)
from app.application.services.password_policy import ensure_password_strong
from app.application.services.secret_handoff_service import SecretHandoffService
from app.domain.entities import AccountEntity, PasswordResetRequestEntity
from app.domain.enums import ConsentStatus
from app.domain.exceptions import (
    AlreadyUsedException,
    NotificationDeliveryException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.value_objects import EmailAddress, OneTimeCode, mask_email_address
from app.shared.telemetry.logging import get_logger
from app.shared.utils.datetime import utc_now

logger = get_logger(__name__)

REQUEST_RESOURCE = "password_reset_request"
LINK_RESOURCE = "password_reset_link"

_VERIFY_MESSAGES = {
    ChallengeFailure.NOT_FOUND: "We could not find that reset request. Please start again.",
    ChallengeFailure.ALREADY_USED: "This reset request has already been completed.",
    ChallengeFailure.EXPIRED: "That verification code expired. Start a new reset request.",
    ChallengeFailure.INVALID_CODE: "That code is incorrect. Please double-check and try again.",
}

_FINALIZE_MESSAGES = {
    ChallengeFailure.NOT_FOUND: "This reset link is invalid or has already been used.",
    ChallengeFailure.ALREADY_USED: "This reset link has already been used.",
    ChallengeFailure.NOT_APPROVED: (
        "This reset link has not been approved yet. Ask your partner to share a code."
    ),
    ChallengeFailure.EXPIRED: "This reset link has expired. Start the password reset process again.",
}


class PasswordResetService:
    """Consent request manager for password resets on couple accounts."""

    def __init__(
        self,
        account_repo: IAccountRepository,
        request_repo: IPasswordResetRequestRepository,
        uow: IUnitOfWork,
        codes: OneTimeCodeService,
        password_hasher: IPasswordHasher,
        notifier: INotificationDispatcher,
        handoff: SecretHandoffService,
        *,
        code_ttl_minutes: int = 10,
        link_ttl_minutes: int = 60,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._accounts = account_repo
        self._requests = request_repo
        self._uow = uow
        self._codes = codes
        self._hasher = password_hasher
        self._notifier = notifier
        self._handoff = handoff
        self._code_ttl = timedelta(minutes=code_ttl_minutes)
        self._link_ttl = timedelta(minutes=link_ttl_minutes)
        self._clock = clock

    async def initiate(self, email: str) -> PasswordResetInitiated:
        """Start a reset for the account owning email; the code goes to the counterpart.

        Any earlier unfinished request of the account is superseded.

        Raises:
            ValidationException: Empty email, single account, email not on the
                account, or no counterpart email on file.
            ResourceNotFoundException: No account for email.
            NotificationDeliveryException: The code could not be emailed.
        """
        try:
            normalized = EmailAddress.parse(email).value
        except ValueError as e:
            raise ValidationException(str(e), field="email") from e

        account = await self._accounts.find_by_email_or_username(normalized)
        if account is None:
            raise ResourceNotFoundException(
                "account", message="We could not find an account for that email."
            )
        if not account.kind.supports_two_party_consent():
            raise ValidationException(
                "Single member accounts cannot use the partner reset flow. "
                "Please contact support if you need assistance.",
                field="email",
            )
        initiating_role = account.role_for_email(normalized)
        if initiating_role is None:
            raise ValidationException(
                "Please enter the exact email associated with your shared account.",
                field="email",
            )
        counterpart_email = account.email_for(initiating_role.other)
        if not counterpart_email:
            raise ValidationException(
                "A partner email is required for this reset flow. Contact support for help.",
                field="email",
            )

        code = self._codes.generate()
        code_expires_at = self._clock() + self._code_ttl
        request = PasswordResetRequestEntity(
            id=new_opaque_token(),
            account_id=account.id,
            initiating_email=normalized,
            partner_email=counterpart_email,
            initiating_role=initiating_role,
            initiating_name=account.display_name_for(initiating_role),
            partner_display_name=account.display_name_for(initiating_role.other),
            code_hash=await self._codes.hash(code),
            code_expires_at=code_expires_at,
            status=ConsentStatus.CODE_SENT,
        )
        async with self._uow.transaction():
            superseded = await self._requests.delete_open_for_account(account.id)
            await self._requests.add(request)
        if superseded:
            logger.info("Superseded %d open reset request(s) for account %s", superseded, account.id)

        try:
            await self._notifier.send_code(
                counterpart_email,
                code=code,
                expires_at=code_expires_at,
                initiator_name=request.initiating_name or normalized,
                initiator_email=normalized,
                partner_display_name=request.partner_display_name,
            )
        except Exception as exc:
            logger.exception("Failed to email reset code for account %s", account.id)
            async with self._uow.transaction():
                await self._requests.delete(request.id)
            raise NotificationDeliveryException(
                "password_reset_code",
                "Unable to email the verification code. Please try again shortly.",
            ) from exc

        logger.info("Password reset initiated for account %s by %s", account.id, initiating_role.value)
        return PasswordResetInitiated(
            request_id=request.id,
            code_expires_at=code_expires_at,
            partner_email_hint=mask_email_address(counterpart_email),
        )

    async def verify(self, request_id: str, code: str) -> PasswordResetVerified:
        """Accept the counterpart's code and email a reset link to the initiator.

        Raises, in this order: ResourceNotFoundException, AlreadyUsedException,
        ExpiredException, InvalidCodeException.
        """
        request = None
        if is_well_formed_token(request_id):
            request = await self._requests.get_by_id(request_id)
        now = self._clock()

        async def code_matches() -> bool:
            try:
                entered = OneTimeCode.parse(code, self._codes.length)
            except ValueError:
                return False
            return await self._codes.matches(entered.value, request.code_hash)

        await enforce(
            Challenge(
                found=request is not None,
                consumed=request is not None and request.status.is_consumed,
                expired=request is not None and request.is_code_expired(now),
            ),
            REQUEST_RESOURCE,
            code_matches=code_matches,
            messages=_VERIFY_MESSAGES,
        )
        assert request is not None

        reset_token = new_opaque_token()
        reset_token_expires_at = now + self._link_ttl
        async with self._uow.transaction():
            claimed = await self._requests.mark_verified(
                request.id,
                reset_token_hash=digest_token(reset_token),
                reset_token_expires_at=reset_token_expires_at,
                now=now,
            )
        if not claimed:
            raise AlreadyUsedException(REQUEST_RESOURCE, _VERIFY_MESSAGES[ChallengeFailure.ALREADY_USED])
        logger.info("Reset code accepted for account %s", request.account_id)

        link_sent = True
        try:
            await self._notifier.send_finalize_link(
                request.initiating_email,
                token=reset_token,
                expires_at=reset_token_expires_at,
                requester_name=request.initiating_name,
                approving_partner_name=request.partner_display_name,
            )
        except Exception:
            link_sent = False
            logger.warning(
                "Reset link email failed for account %s", request.account_id, exc_info=True
            )
        return PasswordResetVerified(
            reset_token_expires_at=reset_token_expires_at, link_sent=link_sent
        )

    async def finalize(self, reset_token: str, new_password: str) -> PasswordResetFinalized:
        """Set the new password, then hand it to the counterpart through a one-time link.

        Raises, in this order: ResourceNotFoundException, AlreadyUsedException,
        AuthorizationException (code never verified), ExpiredException,
        ValidationException (weak password).
        """
        request = None
        if is_well_formed_token(reset_token):
            request = await self._requests.get_by_reset_token_hash(digest_token(reset_token))
        now = self._clock()
        await enforce(
            Challenge(
                found=request is not None,
                consumed=request is not None and request.is_used,
                approved=request is not None and request.mfa_verified_at is not None,
                expired=request is not None and request.is_reset_token_expired(now),
            ),
            LINK_RESOURCE,
            messages=_FINALIZE_MESSAGES,
        )
        assert request is not None
        ensure_password_strong(new_password)

        hashed = await self._hasher.hash_password(new_password)
        async with self._uow.transaction():
            if not await self._requests.mark_completed(request.id, now=now):
                raise AlreadyUsedException(
                    LINK_RESOURCE, _FINALIZE_MESSAGES[ChallengeFailure.ALREADY_USED]
                )
            if not await self._accounts.update_password_hash(request.account_id, hashed):
                raise ResourceNotFoundException(
                    "account", message="This account no longer exists."
                )
        logger.info("Password reset completed for account %s", request.account_id)

        account = await self._accounts.get_by_id(request.account_id)
        shared = await self._share_new_password(request, account, new_password)
        return PasswordResetFinalized(account_id=request.account_id, partner_share_sent=shared)

    async def _share_new_password(
        self,
        request: PasswordResetRequestEntity,
        account: AccountEntity | None,
        new_password: str,
    ) -> bool:
        """Best-effort handoff of the committed password to the counterpart."""
        recipient = request.partner_email
        if account is not None:
            recipient = account.email_for(request.initiating_role.other) or recipient
        if not recipient:
            return False
        try:
            issued = await self._handoff.issue(request.account_id, recipient, new_password)
            await self._notifier.send_secret_handoff_link(
                recipient,
                token=issued.token,
                expires_at=issued.expires_at,
                partner_name=request.partner_display_name,
                initiator_name=request.initiating_name,
            )
        except Exception:
            logger.warning(
                "Password share to %s failed for account %s",
                mask_email_address(recipient),
                request.account_id,
                exc_info=True,
            )
            return False
        return True
