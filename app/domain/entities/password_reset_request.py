"""Password reset consent request entity.

Tracks the two-stage reset: the counterpart's code unlocks a reset token that
only the initiator receives.
"""

from dataclasses import dataclass
from datetime import datetime

from app.domain.enums import ConsentStatus, PartnerRole
from app.domain.exceptions import ValidationException


@dataclass(frozen=True)
class PasswordResetRequestEntity:
    """Persisted state of one password reset flow.

    Invariant: a reset token (hash) exists only when mfa_verified_at is set,
    and used_at is set only on completed requests.
    """

    id: str
    account_id: str
    initiating_email: str
    partner_email: str
    initiating_role: PartnerRole
    initiating_name: str | None
    partner_display_name: str | None
    code_hash: str
    code_expires_at: datetime
    status: ConsentStatus
    mfa_verified_at: datetime | None = None
    reset_token_hash: str | None = None
    reset_token_expires_at: datetime | None = None
    used_at: datetime | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Raise ValidationException when a stored row breaks the lifecycle invariants."""
        if self.reset_token_hash is not None and self.mfa_verified_at is None:
            raise ValidationException(
                "Reset token present without code verification", field="reset_token_hash"
            )
        if self.used_at is not None and self.status is not ConsentStatus.COMPLETED:
            raise ValidationException("used_at set on a request that is not completed", field="used_at")
        if self.status is ConsentStatus.VERIFIED and self.mfa_verified_at is None:
            raise ValidationException("Verified request without mfa_verified_at", field="status")

    def is_code_expired(self, now: datetime) -> bool:
        return self.code_expires_at <= now

    def is_reset_token_expired(self, now: datetime) -> bool:
        return self.reset_token_expires_at is None or self.reset_token_expires_at <= now

    @property
    def is_used(self) -> bool:
        return self.used_at is not None or self.status is ConsentStatus.COMPLETED
