"""Account deletion request repository."""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.entities import DeletionRequestEntity
from app.domain.enums import ConsentStatus, PartnerRole
from app.infrastructure.persistence.models.account_deletion_request import (
    AccountDeletionRequest,
)
from app.infrastructure.persistence.repositories.base import BaseRepository, status_in
from app.shared.utils.datetime import ensure_utc, require_utc

# Prior states for each conditional write, read from the ConsentStatus transition table.
_VERIFIABLE = ConsentStatus.sources_of(ConsentStatus.VERIFIED)
_COMPLETABLE = ConsentStatus.sources_of(ConsentStatus.COMPLETED)
_OPEN = ConsentStatus.open_statuses()


def _to_entity(row: AccountDeletionRequest) -> DeletionRequestEntity:
    return DeletionRequestEntity(
        id=row.id,
        account_id=row.account_id,
        code_hash=row.code_hash,
        expires_at=require_utc(row.expires_at),
        status=ConsentStatus(row.status),
        initiator_role=PartnerRole(row.initiator_role),
        approver_role=PartnerRole(row.approver_role),
        primary_email=row.primary_email,
        partner_email=row.partner_email,
        verified_at=ensure_utc(row.verified_at),
        completed_at=ensure_utc(row.completed_at),
    )


class DeletionRequestRepository(BaseRepository[AccountDeletionRequest]):
    """Persist and transition deletion requests; completed rows are the audit trail."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, AccountDeletionRequest)

    async def add(self, request: DeletionRequestEntity) -> DeletionRequestEntity:
        row = await self._insert(
            AccountDeletionRequest(
                id=request.id,
                account_id=request.account_id,
                primary_email=request.primary_email,
                partner_email=request.partner_email,
                code_hash=request.code_hash,
                expires_at=request.expires_at,
                status=request.status.value,
                initiator_role=request.initiator_role.value,
                approver_role=request.approver_role.value,
            )
        )
        return _to_entity(row)

    async def get_latest_for_account(self, account_id: str) -> DeletionRequestEntity | None:
        result = await self.db.execute(
            select(AccountDeletionRequest)
            .where(AccountDeletionRequest.account_id == account_id)
            .order_by(AccountDeletionRequest.created_at.desc())
            .limit(1)
        )
        row = result.scalar_one_or_none()
        return _to_entity(row) if row else None

    async def delete_open_for_account(self, account_id: str) -> int:
        return await self._delete_where(
            AccountDeletionRequest.account_id == account_id,
            status_in(AccountDeletionRequest.status, _OPEN),
        )

    async def mark_verified(self, request_id: str, *, now: datetime) -> bool:
        count = await self._update_where(
            AccountDeletionRequest.id == request_id,
            status_in(AccountDeletionRequest.status, _VERIFIABLE),
            AccountDeletionRequest.expires_at > now,
            values={"status": ConsentStatus.VERIFIED.value, "verified_at": now},
        )
        return count == 1

    async def mark_completed(self, request_id: str, *, now: datetime) -> bool:
        count = await self._update_where(
            AccountDeletionRequest.id == request_id,
            status_in(AccountDeletionRequest.status, _COMPLETABLE),
            values={"status": ConsentStatus.COMPLETED.value, "completed_at": now},
        )
        return count == 1
