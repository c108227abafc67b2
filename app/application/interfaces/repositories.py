"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference domain entities only; no infrastructure imports.

State-transition methods (mark_*) are conditional writes: they apply only
when the row is still in the expected prior state and return whether a row
was affected. Callers treat False as "another request won the transition".
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from datetime import datetime
from typing import TYPE_CHECKING, Protocol

from app.domain.enums import PartnerRole

if TYPE_CHECKING:
    from app.domain.entities import (
        AccountEntity,
        DeletionRequestEntity,
        PasswordResetRequestEntity,
        SecretHandoffEntity,
    )


# Unit of work
class IUnitOfWork(Protocol):
    """Transaction boundary shared by the repositories of one request."""

    def transaction(self) -> AbstractAsyncContextManager[None]:
        """Commit on normal exit, roll back everything on exception."""


# Identity directory
class IAccountRepository(Protocol):
    """Protocol for account lookup and the few mutations the consent protocol needs."""

    async def get_by_id(self, account_id: str) -> AccountEntity | None:
        """Return account by ID."""

    async def find_by_email_or_username(self, text: str) -> AccountEntity | None:
        """Return the account whose primary email, partner email, or username matches (case-insensitive)."""

    async def find_by_emails(
        self, primary_email: str, partner_email: str
    ) -> AccountEntity | None:
        """Return the couple account holding exactly this pair of emails."""

    async def update_password_hash(self, account_id: str, hashed_password: str) -> bool:
        """Replace the password hash. Returns False when the account no longer exists."""

    async def set_email_verified(self, account_id: str, role: PartnerRole) -> bool:
        """Mark role's email verified (idempotent). Returns False when the account does not exist."""

    async def delete_account_cascade(self, account_id: str) -> bool:
        """Delete the account and every row it owns. Returns False when the account did not exist."""


# Password reset requests
class IPasswordResetRequestRepository(Protocol):
    """Protocol for password reset consent requests."""

    async def add(self, request: PasswordResetRequestEntity) -> PasswordResetRequestEntity:
        """Persist a new code_sent request."""

    async def get_by_id(self, request_id: str) -> PasswordResetRequestEntity | None:
        """Return request by its opaque ID."""

    async def get_by_reset_token_hash(
        self, reset_token_hash: str
    ) -> PasswordResetRequestEntity | None:
        """Return the request that issued this reset token."""

    async def delete_open_for_account(self, account_id: str) -> int:
        """Delete every non-completed request of the account (supersede). Returns rows deleted."""

    async def delete(self, request_id: str) -> None:
        """Delete one request (used to withdraw a request whose code could not be sent)."""

    async def mark_verified(
        self,
        request_id: str,
        *,
        reset_token_hash: str,
        reset_token_expires_at: datetime,
        now: datetime,
    ) -> bool:
        """code_sent -> verified, only while code is unexpired and request unused."""

    async def mark_completed(self, request_id: str, *, now: datetime) -> bool:
        """verified -> completed (sets used_at), only while the reset token is unexpired and unused."""


# Account deletion requests
class IDeletionRequestRepository(Protocol):
    """Protocol for account deletion consent requests."""

    async def add(self, request: DeletionRequestEntity) -> DeletionRequestEntity:
        """Persist a new code_sent request."""

    async def get_latest_for_account(self, account_id: str) -> DeletionRequestEntity | None:
        """Return the most recently created request of the account."""

    async def delete_open_for_account(self, account_id: str) -> int:
        """Delete every non-completed request of the account (supersede)."""

    async def mark_verified(self, request_id: str, *, now: datetime) -> bool:
        """code_sent -> verified, only while the code is unexpired."""

    async def mark_completed(self, request_id: str, *, now: datetime) -> bool:
        """verified -> completed."""


# Secret handoffs
class ISecretHandoffRepository(Protocol):
    """Protocol for one-time encrypted secret handoffs."""

    async def add(self, handoff: SecretHandoffEntity) -> SecretHandoffEntity:
        """Persist a new handoff."""

    async def get_by_token_hash(self, token_hash: str) -> SecretHandoffEntity | None:
        """Return handoff by token digest."""

    async def mark_used(self, handoff_id: str, *, now: datetime) -> bool:
        """Set used_at only if it is still null."""
