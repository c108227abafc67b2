"""Account deletion consent request entity."""

from dataclasses import dataclass
from datetime import datetime

from app.domain.enums import ConsentStatus, PartnerRole


@dataclass(frozen=True)
class DeletionRequestEntity:
    """Single-phase deletion request. Survives the account it deleted (audit row).

    initiator_role is who asked for deletion; approver_role is whose inbox
    received the code (the initiator themself when no partner email exists).
    """

    id: str
    account_id: str
    code_hash: str
    expires_at: datetime
    status: ConsentStatus
    initiator_role: PartnerRole
    approver_role: PartnerRole
    primary_email: str | None = None
    partner_email: str | None = None
    verified_at: datetime | None = None
    completed_at: datetime | None = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

    @property
    def requires_partner_share(self) -> bool:
        return self.approver_role is not self.initiator_role
