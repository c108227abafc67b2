"""Paired email ownership verification: one signed link per role."""

from __future__ import annotations

from app.application.dtos.consent import EmailVerificationOutcome, VerificationLinksSent
from app.application.interfaces.repositories import IAccountRepository
from app.application.interfaces.services import INotificationDispatcher
from app.application.services.ownership_token_service import OwnershipTokenService
from app.domain.entities import AccountEntity
from app.domain.enums import PartnerRole
from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.domain.value_objects import mask_email_address, normalize_email
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def _resend_message(roles: list[PartnerRole]) -> str:
    if not roles:
        return "Both email addresses are already verified."
    if len(roles) > 1:
        return "We re-sent your verification links."
    if roles[0] is PartnerRole.PRIMARY:
        return "We just re-sent the verification email to your address."
    return "We just re-sent the verification email to your partner."


class EmailVerificationService:
    """Send and consume email ownership links for both parties of an account."""

    def __init__(
        self,
        account_repo: IAccountRepository,
        tokens: OwnershipTokenService,
        notifier: INotificationDispatcher,
    ) -> None:
        self._accounts = account_repo
        self._tokens = tokens
        self._notifier = notifier

    async def _dispatch(self, account: AccountEntity, roles: list[PartnerRole]) -> list[PartnerRole]:
        sent: list[PartnerRole] = []
        for role in roles:
            email = account.email_for(role)
            if not email:
                continue
            await self._notifier.send_email_verification_link(
                email,
                token=self._tokens.issue(account.id, role),
                role=role,
                username=account.username,
            )
            sent.append(role)
        return sent

    async def send_verification_links(self, account: AccountEntity) -> VerificationLinksSent:
        """Issue one link per role with an email on file.

        Registration hook: whatever creates the account (signup, import, admin
        tooling) calls this once the row is stored. There is no signup route here;
        resend() is the HTTP entry point for later links.
        """
        roles = await self._dispatch(account, list(PartnerRole))
        logger.info(
            "Verification links sent for account %s: %s",
            account.id,
            ", ".join(role.value for role in roles),
        )
        return VerificationLinksSent(
            account_id=account.id,
            roles=roles,
            sent_to=[mask_email_address(account.email_for(role) or "") for role in roles],
            message="Please check your and your partner's email inboxes to verify your account.",
        )

    async def consume(self, token: str, expected_role: PartnerRole) -> EmailVerificationOutcome:
        """Confirm expected_role's email from an opened link. Idempotent."""
        return await self._tokens.consume(token, expected_role)

    async def resend(self, primary_email: str, partner_email: str) -> VerificationLinksSent:
        """Resend links for the still-unverified roles of the couple holding both emails.

        Raises:
            ValidationException: Either email missing.
            ResourceNotFoundException: No couple account holds exactly these emails.
        """
        primary = normalize_email(primary_email)
        partner = normalize_email(partner_email)
        if primary is None or partner is None:
            raise ValidationException("Both email addresses are required.", field="partner_email")
        account = await self._accounts.find_by_emails(primary, partner)
        if account is None:
            raise ResourceNotFoundException(
                "account",
                message="We could not find a couple account with those email addresses.",
            )
        pending = [role for role in PartnerRole if not account.is_email_verified(role)]
        roles = await self._dispatch(account, pending)
        return VerificationLinksSent(
            account_id=account.id,
            roles=roles,
            sent_to=[mask_email_address(account.email_for(role) or "") for role in roles],
            message=_resend_message(roles),
        )
