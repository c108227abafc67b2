"""Signed ownership tokens for paired email verification.

A token embeds {sub: account_id, role, purpose} and an expiry. Opening the
emailed link proves control of that role's inbox.
"""

from __future__ import annotations

from datetime import timedelta

from app.application.dtos.consent import EmailVerificationOutcome
from app.application.interfaces.repositories import IAccountRepository, IUnitOfWork
from app.application.interfaces.services import ITokenSigner
from app.domain.entities import AccountEntity
from app.domain.enums import PartnerRole, PartnerVerificationStatus
from app.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

EMAIL_VERIFICATION_PURPOSE = "email_verification"
DEFAULT_OWNERSHIP_TTL_HOURS = 24

_SUCCESS_MESSAGES: dict[PartnerRole, dict[PartnerVerificationStatus, str]] = {
    PartnerRole.PRIMARY: {
        PartnerVerificationStatus.AWAITING: (
            "Your email is verified. We've notified your partner. "
            "Once they confirm their link, your account unlocks."
        ),
        PartnerVerificationStatus.COMPLETE: (
            "Both of you are now verified. Welcome in; you can sign in together right away."
        ),
    },
    PartnerRole.PARTNER: {
        PartnerVerificationStatus.AWAITING: (
            "Your email is confirmed. The primary partner still needs to complete "
            "their link before the account unlocks."
        ),
        PartnerVerificationStatus.COMPLETE: (
            "Both of you are verified. Welcome inside and sign in together."
        ),
    },
}


def counterpart_status(account: AccountEntity, role: PartnerRole) -> PartnerVerificationStatus:
    """Return whether the other role still has to confirm. No email on file counts as complete."""
    other = role.other
    if account.email_for(other) is None or account.is_email_verified(other):
        return PartnerVerificationStatus.COMPLETE
    return PartnerVerificationStatus.AWAITING


class OwnershipTokenService:
    """Issue and consume email ownership tokens."""

    def __init__(
        self,
        signer: ITokenSigner,
        account_repo: IAccountRepository,
        uow: IUnitOfWork,
        *,
        ttl_hours: int = DEFAULT_OWNERSHIP_TTL_HOURS,
    ) -> None:
        self._signer = signer
        self._accounts = account_repo
        self._uow = uow
        self._ttl = timedelta(hours=ttl_hours)

    def issue(self, account_id: str, role: PartnerRole) -> str:
        """Return a signed token proving ownership of role's email once opened."""
        return self._signer.encode(
            {"sub": account_id, "role": role.value, "purpose": EMAIL_VERIFICATION_PURPOSE},
            self._ttl,
        )

    async def consume(self, token: str, expected_role: PartnerRole) -> EmailVerificationOutcome:
        """Mark expected_role verified and report the counterpart's state.

        Idempotent: a role that is already verified is not written again and
        the call still succeeds.

        Raises:
            ExpiredException: Token past its expiry.
            ValidationException: Bad signature, wrong purpose, or malformed claims.
            AuthorizationException: Token was issued for the other role.
            ResourceNotFoundException: Account no longer exists.
        """
        claims = self._signer.decode(token)
        if claims.get("purpose") != EMAIL_VERIFICATION_PURPOSE:
            raise ValidationException("This verification link is invalid.", field="token")
        account_id = claims.get("sub")
        if not isinstance(account_id, str) or not account_id:
            raise ValidationException("This verification link is invalid.", field="token")
        if claims.get("role") != expected_role.value:
            raise AuthorizationException(
                "This verification link does not match this account.", reason="role_mismatch"
            )

        account = await self._accounts.get_by_id(account_id)
        if account is None:
            raise ResourceNotFoundException("account", message="This account no longer exists.")

        if not account.is_email_verified(expected_role):
            async with self._uow.transaction():
                updated = await self._accounts.set_email_verified(account_id, expected_role)
            if not updated:
                raise ResourceNotFoundException("account", message="This account no longer exists.")
            logger.info("Email verified for account %s (%s)", account_id, expected_role.value)
            account = await self._accounts.get_by_id(account_id) or account

        status = counterpart_status(account, expected_role)
        return EmailVerificationOutcome(
            role=expected_role,
            partner_status=status,
            message=_SUCCESS_MESSAGES[expected_role][status],
        )
