"""Account deletion with counterpart consent.

Single-phase: the code emailed to the counterpart authorizes the deletion
directly. The request row has no foreign key to the account, so it remains
as the audit record once the account is gone.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import datetime, timedelta

from app.application.dtos.consent import DeletionCompleted, DeletionInitiated
from app.application.interfaces.repositories import (
    IAccountRepository,
    IDeletionRequestRepository,
    IUnitOfWork,
)
from app.application.interfaces.services import INotificationDispatcher
from app.application.services.consent_checks import Challenge, ChallengeFailure, enforce
from app.application.services.one_time_code import OneTimeCodeService
from app.domain.entities import AccountEntity, DeletionRequestEntity
from app.domain.enums import ConsentStatus, PartnerRole
from app.domain.exceptions import (
    AlreadyUsedException,
    AuthorizationException,
    NotificationDeliveryException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.value_objects import OneTimeCode, mask_email_address, normalize_email
from app.shared.telemetry.logging import get_logger
from app.shared.utils.datetime import utc_now

logger = get_logger(__name__)

RESOURCE_TYPE = "account_deletion_request"

_VERIFY_MESSAGES = {
    ChallengeFailure.NOT_FOUND: "No active deletion request found for this account.",
    ChallengeFailure.ALREADY_USED: "This deletion request has already been completed.",
    ChallengeFailure.EXPIRED: (
        "The verification code has expired. Please start the deletion process again."
    ),
    ChallengeFailure.INVALID_CODE: (
        "The verification code is invalid. Please check your email and try again."
    ),
}


def resolve_initiator_role(account: AccountEntity, hint: str | None) -> PartnerRole:
    """Role of whoever asked for deletion: the hint's owner, else primary (partner if only that email exists)."""
    role = account.role_for_email(hint)
    if role is not None:
        return role
    if account.primary_email is None and account.partner_email is not None:
        return PartnerRole.PARTNER
    return PartnerRole.PRIMARY


class AccountDeletionService:
    """Deletion consent flow: initiate (code to counterpart) and verify (delete)."""

    def __init__(
        self,
        account_repo: IAccountRepository,
        request_repo: IDeletionRequestRepository,
        uow: IUnitOfWork,
        codes: OneTimeCodeService,
        notifier: INotificationDispatcher,
        *,
        code_ttl_minutes: int = 30,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._accounts = account_repo
        self._requests = request_repo
        self._uow = uow
        self._codes = codes
        self._notifier = notifier
        self._code_ttl = timedelta(minutes=code_ttl_minutes)
        self._clock = clock

    async def _load_account(self, account_id: str, acting_account_id: str | None) -> AccountEntity:
        if acting_account_id is not None and acting_account_id != account_id:
            raise AuthorizationException(
                "You can only delete your own account.", reason="account_mismatch"
            )
        account = await self._accounts.get_by_id(account_id)
        if account is None:
            raise ResourceNotFoundException("account", account_id, message="User not found.")
        return account

    async def initiate(
        self,
        account_id: str,
        initiator_email_hint: str | None = None,
        *,
        acting_account_id: str | None = None,
    ) -> DeletionInitiated:
        """Email a deletion code to the initiator's counterpart (or the initiator when alone).

        Raises:
            AuthorizationException: acting_account_id is not account_id.
            ResourceNotFoundException: Unknown account.
            ValidationException: No email on file to receive the code.
            NotificationDeliveryException: The code could not be emailed; the request is withdrawn.
        """
        account = await self._load_account(account_id, acting_account_id)
        initiator_role = resolve_initiator_role(account, normalize_email(initiator_email_hint))
        approver_role = initiator_role.other
        recipient_email = account.email_for(approver_role)
        if not recipient_email:
            approver_role = initiator_role
            recipient_email = account.email_for(approver_role)
        if not recipient_email:
            raise ValidationException(
                "No valid email is configured to receive the verification code.",
                field="initiator_email",
            )

        code = self._codes.generate()
        expires_at = self._clock() + self._code_ttl
        request = DeletionRequestEntity(
            id=str(uuid.uuid4()),
            account_id=account.id,
            code_hash=await self._codes.hash(code),
            expires_at=expires_at,
            status=ConsentStatus.CODE_SENT,
            initiator_role=initiator_role,
            approver_role=approver_role,
            primary_email=account.primary_email,
            partner_email=account.partner_email,
        )
        async with self._uow.transaction():
            await self._requests.delete_open_for_account(account.id)
            await self._requests.add(request)

        try:
            await self._notifier.send_deletion_code(
                recipient_email,
                code=code,
                expires_at=expires_at,
                recipient_name=account.display_name_for(approver_role),
                initiator_name=account.display_name_for(initiator_role),
                initiator_email=account.email_for(initiator_role),
                requires_partner_share=request.requires_partner_share,
            )
        except Exception as exc:
            logger.exception("Failed to email deletion code for account %s", account.id)
            async with self._uow.transaction():
                await self._requests.delete_open_for_account(account.id)
            raise NotificationDeliveryException("account_deletion_code") from exc

        logger.info(
            "Account deletion initiated for %s by %s; code sent to %s",
            account.id,
            initiator_role.value,
            mask_email_address(recipient_email),
        )
        return DeletionInitiated(
            expires_at=expires_at,
            recipient_email=recipient_email,
            requires_partner_share=request.requires_partner_share,
        )

    async def verify(
        self,
        account_id: str,
        code: str,
        *,
        acting_account_id: str | None = None,
    ) -> DeletionCompleted:
        """Check the code against the latest request and delete the account with everything it owns.

        The code_sent -> verified claim commits on its own; the cascade and the
        completed mark share one transaction, so a failed cascade leaves the
        account untouched.

        Raises, in this order: ResourceNotFoundException, AlreadyUsedException,
        ExpiredException, InvalidCodeException.
        """
        account = await self._load_account(account_id, acting_account_id)
        request = await self._requests.get_latest_for_account(account.id)
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
                expired=request is not None and request.is_expired(now),
            ),
            RESOURCE_TYPE,
            code_matches=code_matches,
            messages=_VERIFY_MESSAGES,
        )
        assert request is not None

        async with self._uow.transaction():
            claimed = await self._requests.mark_verified(request.id, now=now)
        if not claimed:
            raise AlreadyUsedException(RESOURCE_TYPE, _VERIFY_MESSAGES[ChallengeFailure.ALREADY_USED])
        logger.info(
            "Deletion code for account %s verified by %s", account.id, request.approver_role.value
        )

        partner_notified = False
        if request.requires_partner_share:
            notice_email = account.email_for(request.approver_role)
            if notice_email:
                try:
                    await self._notifier.send_deletion_notice(
                        notice_email, account_name=account.username
                    )
                    partner_notified = True
                except Exception:
                    logger.warning(
                        "Deletion notice failed for account %s", account.id, exc_info=True
                    )

        async with self._uow.transaction():
            if not await self._accounts.delete_account_cascade(account.id):
                raise ResourceNotFoundException("account", account.id, message="User not found.")
            if not await self._requests.mark_completed(request.id, now=self._clock()):
                raise AlreadyUsedException(
                    RESOURCE_TYPE, _VERIFY_MESSAGES[ChallengeFailure.ALREADY_USED]
                )
        logger.info("Account %s deleted", account.id)
        return DeletionCompleted(
            account_id=account.id,
            approver_role=request.approver_role,
            partner_notified=partner_notified,
        )
