"""DTOs returned by the consent protocol use cases (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import datetime

from app.domain.enums import PartnerRole, PartnerVerificationStatus


@dataclass(frozen=True)
class PasswordResetInitiated:
    """Result of initiate: the raw code is never part of it."""

    request_id: str
    code_expires_at: datetime
    partner_email_hint: str


@dataclass(frozen=True)
class PasswordResetVerified:
    """Result of verify: the reset link went to the initiator, not the caller."""

    reset_token_expires_at: datetime
    link_sent: bool


@dataclass(frozen=True)
class PasswordResetFinalized:
    """Result of finalize. partner_share_sent is False when there was no partner or delivery failed."""

    account_id: str
    partner_share_sent: bool


@dataclass(frozen=True)
class HandoffIssued:
    """Raw handoff token (for the emailed link only) and its expiry."""

    token: str
    expires_at: datetime


@dataclass(frozen=True)
class DeletionInitiated:
    """Result of deletion initiate."""

    expires_at: datetime
    recipient_email: str
    requires_partner_share: bool


@dataclass(frozen=True)
class DeletionCompleted:
    """Result of deletion verify."""

    account_id: str
    approver_role: PartnerRole
    partner_notified: bool


@dataclass(frozen=True)
class EmailVerificationOutcome:
    """Result of consuming an ownership link."""

    role: PartnerRole
    partner_status: PartnerVerificationStatus
    message: str

    @property
    def fully_verified(self) -> bool:
        return self.partner_status is PartnerVerificationStatus.COMPLETE


@dataclass(frozen=True)
class VerificationLinksSent:
    """Roles for which a verification link was dispatched, with masked recipients."""

    account_id: str
    roles: list[PartnerRole] = field(default_factory=list)
    sent_to: list[str] = field(default_factory=list)
    message: str = ""
