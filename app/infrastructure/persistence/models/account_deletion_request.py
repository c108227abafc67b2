"""Account deletion consent request ORM model.

account_id carries no foreign key: the row is the audit record of a
deletion and must outlive the account it removed.
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, String, text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class AccountDeletionRequest(CuidMixin, TimestampMixin, Base):
    """Deletion request. Table: account_deletion_request."""

    __tablename__ = "account_deletion_request"

    account_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    primary_email: Mapped[str | None] = mapped_column(String(254), nullable=True)
    partner_email: Mapped[str | None] = mapped_column(String(254), nullable=True)
    code_hash: Mapped[str] = mapped_column(String(100), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, server_default=text("'code_sent'")
    )
    initiator_role: Mapped[str] = mapped_column(String(20), nullable=False)
    approver_role: Mapped[str] = mapped_column(String(20), nullable=False)
    verified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('code_sent', 'verified', 'completed')",
            name="ck_account_deletion_request_status",
        ),
    )
