"""Account repository: the identity directory the consent flows read and update."""

from typing import Any

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.entities import AccountEntity
from app.domain.enums import AccountKind, PartnerRole
from app.domain.value_objects import normalize_email
from app.infrastructure.persistence.models.account import Account
from app.infrastructure.persistence.models.direct_message import DirectMessage
from app.infrastructure.persistence.models.favorite import Favorite
from app.infrastructure.persistence.models.notification import Notification
from app.infrastructure.persistence.models.password_reset_request import PasswordResetRequest
from app.infrastructure.persistence.models.photo import Photo, PhotoComment, SharedPhoto
from app.infrastructure.persistence.models.secret_handoff import SecretHandoff
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def _to_entity(row: Account) -> AccountEntity:
    """Build the domain record, normalizing emails written by older code paths."""
    return AccountEntity(
        id=row.id,
        username=row.username,
        kind=AccountKind(row.kind),
        primary_email=normalize_email(row.primary_email),
        partner_email=normalize_email(row.partner_email),
        primary_display_name=row.primary_display_name,
        partner_display_name=row.partner_display_name,
        hashed_password=row.hashed_password,
        is_primary_email_verified=bool(row.is_primary_email_verified),
        is_partner_email_verified=bool(row.is_partner_email_verified),
    )


_VERIFIED_COLUMN = {
    PartnerRole.PRIMARY: "is_primary_email_verified",
    PartnerRole.PARTNER: "is_partner_email_verified",
}


class AccountRepository(BaseRepository[Account]):
    """Account lookups and the mutations the consent protocol performs."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Account)

    async def get_by_id(self, account_id: str) -> AccountEntity | None:
        row = await self._get_row(account_id)
        return _to_entity(row) if row else None

    async def find_by_email_or_username(self, text: str) -> AccountEntity | None:
        """Case-insensitive match on primary email, partner email, or username."""
        needle = (text or "").strip().lower()
        if not needle:
            return None
        row = await self._first_where(
            or_(
                func.lower(Account.primary_email) == needle,
                func.lower(Account.partner_email) == needle,
                func.lower(Account.username) == needle,
            )
        )
        return _to_entity(row) if row else None

    async def find_by_emails(self, primary_email: str, partner_email: str) -> AccountEntity | None:
        """Return the couple account holding exactly this pair of emails."""
        row = await self._first_where(
            Account.kind == AccountKind.COUPLE.value,
            func.lower(Account.primary_email) == primary_email.strip().lower(),
            func.lower(Account.partner_email) == partner_email.strip().lower(),
        )
        return _to_entity(row) if row else None

    async def create(self, account: AccountEntity) -> AccountEntity:
        """Insert an account; the registration side pairs this with send_verification_links."""
        row = await self._insert(
            Account(
                id=account.id,
                username=account.username,
                kind=account.kind.value,
                primary_email=account.primary_email,
                partner_email=account.partner_email,
                primary_display_name=account.primary_display_name,
                partner_display_name=account.partner_display_name,
                hashed_password=account.hashed_password,
                is_primary_email_verified=account.is_primary_email_verified,
                is_partner_email_verified=account.is_partner_email_verified,
            )
        )
        return _to_entity(row)

    async def update_password_hash(self, account_id: str, hashed_password: str) -> bool:
        count = await self._update_where(
            Account.id == account_id, values={"hashed_password": hashed_password}
        )
        return count == 1

    async def set_email_verified(self, account_id: str, role: PartnerRole) -> bool:
        """Set role's verified flag. True when the account exists (already verified included)."""
        await self._update_where(
            Account.id == account_id, values={_VERIFIED_COLUMN[role]: True}
        )
        return await self._get_row(account_id) is not None

    async def delete_account_cascade(self, account_id: str) -> bool:
        """Delete every row the account owns, then the account.

        Children go before parents so foreign keys hold at every statement.
        Deletion requests are left alone (they carry no foreign key).
        """
        if await self._get_row(account_id) is None:
            return False
        own_photos = select(Photo.id).where(Photo.account_id == account_id)
        steps = (
            (
                PhotoComment,
                or_(PhotoComment.account_id == account_id, PhotoComment.photo_id.in_(own_photos)),
            ),
            (
                SharedPhoto,
                or_(
                    SharedPhoto.sender_account_id == account_id,
                    SharedPhoto.recipient_account_id == account_id,
                    SharedPhoto.photo_id.in_(own_photos),
                ),
            ),
            (
                DirectMessage,
                or_(
                    DirectMessage.sender_account_id == account_id,
                    DirectMessage.recipient_account_id == account_id,
                ),
            ),
            (
                Notification,
                or_(
                    Notification.account_id == account_id,
                    Notification.actor_account_id == account_id,
                ),
            ),
            (
                Favorite,
                or_(Favorite.account_id == account_id, Favorite.favorite_account_id == account_id),
            ),
            (Photo, Photo.account_id == account_id),
            (PasswordResetRequest, PasswordResetRequest.account_id == account_id),
            (SecretHandoff, SecretHandoff.account_id == account_id),
        )
        for model, criterion in steps:
            result: Any = await self.db.execute(
                delete(model).where(criterion).execution_options(synchronize_session=False)
            )
            logger.debug(
                "Cascade removed %d %s row(s) for account %s",
                result.rowcount or 0,
                model.__tablename__,
                account_id,
            )
        return await self._delete_where(Account.id == account_id) == 1
