"""Domain enumerations for the Duet application.

Enums represent fixed sets of domain values: the two parties of an account,
the account kind, and the consent request lifecycle.
"""

from enum import Enum


class PartnerRole(str, Enum):
    """Which party of a shared account an email address belongs to."""

    PRIMARY = "primary"
    PARTNER = "partner"

    @property
    def other(self) -> "PartnerRole":
        """Return the counterpart role."""
        return PartnerRole.PARTNER if self is PartnerRole.PRIMARY else PartnerRole.PRIMARY

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid role values as strings."""
        return [role.value for role in cls]


class AccountKind(str, Enum):
    """Account kind. Only couple accounts take part in two-party consent."""

    COUPLE = "couple"
    SINGLE = "single"

    def supports_two_party_consent(self) -> bool:
        return self is AccountKind.COUPLE


class ConsentStatus(str, Enum):
    """Lifecycle of a consent request (password reset or account deletion).

    code_sent -> verified -> completed. completed is terminal.
    """

    CODE_SENT = "code_sent"
    VERIFIED = "verified"
    COMPLETED = "completed"

    def can_transition_to(self, target: "ConsentStatus") -> bool:
        """Return whether moving from this status to target is a legal transition."""
        return target in _CONSENT_TRANSITIONS[self]

    @property
    def is_terminal(self) -> bool:
        return not _CONSENT_TRANSITIONS[self]

    @property
    def is_consumed(self) -> bool:
        """True once the one-time code has been accepted (verified or completed)."""
        return self is not ConsentStatus.CODE_SENT

    @classmethod
    def sources_of(cls, target: "ConsentStatus") -> frozenset["ConsentStatus"]:
        """Statuses from which target may be reached; the guard for conditional writes."""
        return frozenset(status for status in cls if status.can_transition_to(target))

    @classmethod
    def open_statuses(cls) -> frozenset["ConsentStatus"]:
        """Non-terminal statuses (a live request that a new one supersedes)."""
        return frozenset(status for status in cls if not status.is_terminal)

    @classmethod
    def values(cls) -> list[str]:
        return [status.value for status in cls]


# Exhaustive: every ConsentStatus member must have an entry (checked in tests).
_CONSENT_TRANSITIONS: dict[ConsentStatus, frozenset[ConsentStatus]] = {
    ConsentStatus.CODE_SENT: frozenset({ConsentStatus.VERIFIED}),
    ConsentStatus.VERIFIED: frozenset({ConsentStatus.COMPLETED}),
    ConsentStatus.COMPLETED: frozenset(),
}


class PartnerVerificationStatus(str, Enum):
    """Whether the other party still has to confirm their email link."""

    AWAITING = "awaiting"
    COMPLETE = "complete"
