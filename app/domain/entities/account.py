"""Account domain entity.

Read-model of a shared account as seen by the consent protocol. Owned by the
identity directory; the protocol only reads it and asks the directory to
update specific fields.
"""

from dataclasses import dataclass

from app.domain.enums import AccountKind, PartnerRole
from app.domain.exceptions import ValidationException
from app.domain.value_objects.core import normalize_email


@dataclass(frozen=True)
class AccountEntity:
    """Couple (two emails, one login) or single-party account.

    Emails are stored normalized (trimmed, lowercase). Validation runs on
    construction.
    """

    id: str
    username: str
    kind: AccountKind
    primary_email: str | None
    partner_email: str | None
    primary_display_name: str | None
    partner_display_name: str | None
    hashed_password: str
    is_primary_email_verified: bool
    is_partner_email_verified: bool

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate account invariants. Raises ValidationException if invalid."""
        if not self.id:
            raise ValidationException("Account ID is required", field="id")
        if not self.primary_email and not self.partner_email:
            raise ValidationException("Account has no email on file", field="primary_email")
        for field in ("primary_email", "partner_email"):
            value = getattr(self, field)
            if value is not None and value != normalize_email(value):
                raise ValidationException(f"{field} must be normalized", field=field)

    def email_for(self, role: PartnerRole) -> str | None:
        """Return the email on file for role, or None."""
        return self.partner_email if role is PartnerRole.PARTNER else self.primary_email

    def role_for_email(self, email: str | None) -> PartnerRole | None:
        """Return the role whose stored email equals email (case-insensitive), or None."""
        normalized = normalize_email(email)
        if normalized is None:
            return None
        if self.primary_email and normalized == self.primary_email:
            return PartnerRole.PRIMARY
        if self.partner_email and normalized == self.partner_email:
            return PartnerRole.PARTNER
        return None

    def display_name_for(self, role: PartnerRole) -> str | None:
        """Best display name for role: nickname, then username (primary), then email local part."""
        if role is PartnerRole.PARTNER:
            nickname = (self.partner_display_name or "").strip()
            fallbacks: tuple[str | None, ...] = (nickname,)
        else:
            nickname = (self.primary_display_name or "").strip()
            fallbacks = (nickname, (self.username or "").strip())
        for candidate in fallbacks:
            if candidate:
                return candidate
        email = self.email_for(role)
        if email:
            local = email.split("@", 1)[0].strip()
            return local or None
        return None

    def is_email_verified(self, role: PartnerRole) -> bool:
        if role is PartnerRole.PARTNER:
            return self.is_partner_email_verified
        return self.is_primary_email_verified

    @property
    def is_fully_verified(self) -> bool:
        """True when every role with an email on file has confirmed ownership.

        Single-party accounts only need their one role verified.
        """
        if self.kind is AccountKind.SINGLE:
            return self.is_primary_email_verified
        return all(
            self.is_email_verified(role)
            for role in PartnerRole
            if self.email_for(role)
        )
