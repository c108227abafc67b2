"""Password reset request repository. State transitions are conditional updates."""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.entities import PasswordResetRequestEntity
from app.domain.enums import ConsentStatus, PartnerRole
from app.infrastructure.persistence.models.password_reset_request import PasswordResetRequest
from app.infrastructure.persistence.repositories.base import BaseRepository, status_in
from app.shared.utils.datetime import ensure_utc, require_utc

# Prior states for each conditional write, read from the ConsentStatus transition table.
_VERIFIABLE = ConsentStatus.sources_of(ConsentStatus.VERIFIED)
_COMPLETABLE = ConsentStatus.sources_of(ConsentStatus.COMPLETED)
_OPEN = ConsentStatus.open_statuses()


def _to_entity(row: PasswordResetRequest) -> PasswordResetRequestEntity:
    return PasswordResetRequestEntity(
        id=row.id,
        account_id=row.account_id,
        initiating_email=row.initiating_email,
        partner_email=row.partner_email,
        initiating_role=PartnerRole(row.initiating_role),
        initiating_name=row.initiating_name,
        partner_display_name=row.partner_display_name,
        code_hash=row.code_hash,
        code_expires_at=require_utc(row.code_expires_at),
        status=ConsentStatus(row.status),
        mfa_verified_at=ensure_utc(row.mfa_verified_at),
        reset_token_hash=row.reset_token_hash,
        reset_token_expires_at=ensure_utc(row.reset_token_expires_at),
        used_at=ensure_utc(row.used_at),
    )


class PasswordResetRequestRepository(BaseRepository[PasswordResetRequest]):
    """Persist and transition password reset requests."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, PasswordResetRequest)

    async def add(self, request: PasswordResetRequestEntity) -> PasswordResetRequestEntity:
        row = await self._insert(
            PasswordResetRequest(
                id=request.id,
                account_id=request.account_id,
                initiating_email=request.initiating_email,
                partner_email=request.partner_email,
                initiating_role=request.initiating_role.value,
                initiating_name=request.initiating_name,
                partner_display_name=request.partner_display_name,
                code_hash=request.code_hash,
                code_expires_at=request.code_expires_at,
                status=request.status.value,
            )
        )
        return _to_entity(row)

    async def get_by_id(self, request_id: str) -> PasswordResetRequestEntity | None:
        row = await self._get_row(request_id)
        return _to_entity(row) if row else None

    async def get_by_reset_token_hash(
        self, reset_token_hash: str
    ) -> PasswordResetRequestEntity | None:
        result = await self.db.execute(
            select(PasswordResetRequest).where(
                PasswordResetRequest.reset_token_hash == reset_token_hash
            )
        )
        row = result.scalar_one_or_none()
        return _to_entity(row) if row else None

    async def delete_open_for_account(self, account_id: str) -> int:
        return await self._delete_where(
            PasswordResetRequest.account_id == account_id,
            status_in(PasswordResetRequest.status, _OPEN),
        )

    async def delete(self, request_id: str) -> None:
        await self._delete_where(PasswordResetRequest.id == request_id)

    async def mark_verified(
        self,
        request_id: str,
        *,
        reset_token_hash: str,
        reset_token_expires_at: datetime,
        now: datetime,
    ) -> bool:
        count = await self._update_where(
            PasswordResetRequest.id == request_id,
            status_in(PasswordResetRequest.status, _VERIFIABLE),
            PasswordResetRequest.used_at.is_(None),
            PasswordResetRequest.code_expires_at > now,
            values={
                "status": ConsentStatus.VERIFIED.value,
                "mfa_verified_at": now,
                "reset_token_hash": reset_token_hash,
                "reset_token_expires_at": reset_token_expires_at,
            },
        )
        return count == 1

    async def mark_completed(self, request_id: str, *, now: datetime) -> bool:
        count = await self._update_where(
            PasswordResetRequest.id == request_id,
            status_in(PasswordResetRequest.status, _COMPLETABLE),
            PasswordResetRequest.mfa_verified_at.is_not(None),
            PasswordResetRequest.used_at.is_(None),
            PasswordResetRequest.reset_token_expires_at > now,
            values={"status": ConsentStatus.COMPLETED.value, "used_at": now},
        )
        return count == 1
