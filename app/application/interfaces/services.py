"""Service interfaces (ports) for the application layer.

Protocols define contracts for infrastructure services (DIP): email
delivery, secret encryption, token signing, and password hashing.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Protocol

from app.domain.enums import PartnerRole


# Raw email transport
class IEmailSender(Protocol):
    """Protocol for delivering a rendered email."""

    async def send(
        self,
        to_emails: list[str],
        subject: str,
        body: str,
    ) -> None:
        """Send email to recipients. Raises on delivery failure."""


# Notification dispatcher (identity-protocol emails)
class INotificationDispatcher(Protocol):
    """Protocol for the emails of the consent protocol. Each method raises on delivery failure."""

    async def send_code(
        self,
        email: str,
        *,
        code: str,
        expires_at: datetime,
        initiator_name: str,
        initiator_email: str | None = None,
        partner_display_name: str | None = None,
    ) -> None:
        """Send a password reset approval code to the counterpart."""

    async def send_finalize_link(
        self,
        email: str,
        *,
        token: str,
        expires_at: datetime,
        requester_name: str | None = None,
        approving_partner_name: str | None = None,
    ) -> None:
        """Send the reset link to the party who initiated the reset."""

    async def send_secret_handoff_link(
        self,
        email: str,
        *,
        token: str,
        expires_at: datetime,
        partner_name: str | None = None,
        initiator_name: str | None = None,
    ) -> None:
        """Send the one-time link revealing the new password to the counterpart."""

    async def send_deletion_code(
        self,
        email: str,
        *,
        code: str,
        expires_at: datetime,
        recipient_name: str | None,
        initiator_name: str | None,
        initiator_email: str | None,
        requires_partner_share: bool,
    ) -> None:
        """Send the account deletion approval code."""

    async def send_deletion_notice(self, email: str, *, account_name: str | None) -> None:
        """Tell the counterpart that the shared account is being deleted."""

    async def send_email_verification_link(
        self,
        email: str,
        *,
        token: str,
        role: PartnerRole,
        username: str | None,
    ) -> None:
        """Send an email-ownership confirmation link for one role."""


# Secret encryption
class ISecretCipher(Protocol):
    """Protocol for symmetric encryption of short secrets under a server-held key."""

    def encrypt(self, plaintext: str) -> str:
        """Return an opaque ciphertext string safe for storage."""

    def decrypt(self, ciphertext: str) -> str:
        """Return plaintext. Raises CredentialException if the payload is invalid."""


# Token signing
class ITokenSigner(Protocol):
    """Protocol for signed, time-boxed tokens."""

    def encode(self, claims: dict[str, Any], expires_delta: timedelta) -> str:
        """Return a signed token carrying claims and an expiry."""

    def decode(self, token: str) -> dict[str, Any]:
        """Return claims. Raises ExpiredException or ValidationException."""


# Password hashing
class IPasswordHasher(Protocol):
    """Protocol for account password hashing (slow hash, run off the event loop)."""

    async def hash_password(self, password: str) -> str:
        """Return the storable hash of password."""

    async def verify_password(self, password: str, hashed_password: str) -> bool:
        """Return True if password matches hashed_password."""
