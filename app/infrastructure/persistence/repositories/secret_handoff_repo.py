"""Secret handoff store (one-time encrypted password shares), keyed by token digest."""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.entities import SecretHandoffEntity
from app.infrastructure.persistence.models.secret_handoff import SecretHandoff
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc, require_utc


def _to_entity(row: SecretHandoff) -> SecretHandoffEntity:
    return SecretHandoffEntity(
        id=row.id,
        token_hash=row.token_hash,
        account_id=row.account_id,
        recipient_email=row.recipient_email,
        encrypted_payload=row.encrypted_payload,
        expires_at=require_utc(row.expires_at),
        used_at=ensure_utc(row.used_at),
    )


class SecretHandoffRepository(BaseRepository[SecretHandoff]):
    """Create and redeem handoffs; redemption is a conditional update on used_at."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, SecretHandoff)

    async def add(self, handoff: SecretHandoffEntity) -> SecretHandoffEntity:
        row = await self._insert(
            SecretHandoff(
                id=handoff.id,
                token_hash=handoff.token_hash,
                account_id=handoff.account_id,
                recipient_email=handoff.recipient_email,
                encrypted_payload=handoff.encrypted_payload,
                expires_at=handoff.expires_at,
            )
        )
        return _to_entity(row)

    async def get_by_token_hash(self, token_hash: str) -> SecretHandoffEntity | None:
        result = await self.db.execute(
            select(SecretHandoff).where(SecretHandoff.token_hash == token_hash)
        )
        row = result.scalar_one_or_none()
        return _to_entity(row) if row else None

    async def mark_used(self, handoff_id: str, *, now: datetime) -> bool:
        count = await self._update_where(
            SecretHandoff.id == handoff_id,
            SecretHandoff.used_at.is_(None),
            values={"used_at": now},
        )
        return count == 1
