"""DB session, unit of work, and repository dependencies (composition root).

Every repository of one request shares the session from get_db, so a
SqlAlchemyUnitOfWork transaction covers all of their writes.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.database import SqlAlchemyUnitOfWork, get_db
from app.infrastructure.persistence.repositories import (
    AccountRepository,
    DeletionRequestRepository,
    PasswordResetRequestRepository,
    SecretHandoffRepository,
)

DbSession = Annotated[AsyncSession, Depends(get_db)]


def get_uow(db: DbSession) -> SqlAlchemyUnitOfWork:
    """Transaction boundary over the request session."""
    return SqlAlchemyUnitOfWork(db)


def get_account_repo(db: DbSession) -> AccountRepository:
    return AccountRepository(db)


def get_password_reset_repo(db: DbSession) -> PasswordResetRequestRepository:
    return PasswordResetRequestRepository(db)


def get_deletion_request_repo(db: DbSession) -> DeletionRequestRepository:
    return DeletionRequestRepository(db)


def get_secret_handoff_repo(db: DbSession) -> SecretHandoffRepository:
    return SecretHandoffRepository(db)
