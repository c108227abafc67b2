"""Password reset consent request ORM model."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String, text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import TimestampMixin


class PasswordResetRequest(TimestampMixin, Base):
    """Two-stage reset request. id is an opaque random string handed to the client.

    The code and the reset token are stored only as hashes; reset_token_hash
    is the lookup key for finalize.
    """

    __tablename__ = "password_reset_request"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    account_id: Mapped[str] = mapped_column(
        String, ForeignKey("account.id"), nullable=False, index=True
    )
    initiating_email: Mapped[str] = mapped_column(String(254), nullable=False)
    partner_email: Mapped[str] = mapped_column(String(254), nullable=False)
    initiating_role: Mapped[str] = mapped_column(String(20), nullable=False)
    initiating_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    partner_display_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    code_hash: Mapped[str] = mapped_column(String(100), nullable=False)
    code_expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    mfa_verified_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    reset_token_hash: Mapped[str | None] = mapped_column(
        String(64), nullable=True, unique=True, index=True
    )
    reset_token_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    used_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, server_default=text("'code_sent'")
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('code_sent', 'verified', 'completed')",
            name="ck_password_reset_request_status",
        ),
        CheckConstraint(
            "initiating_role IN ('primary', 'partner')",
            name="ck_password_reset_request_role",
        ),
        CheckConstraint(
            "reset_token_hash IS NULL OR mfa_verified_at IS NOT NULL",
            name="ck_password_reset_request_token_after_mfa",
        ),
    )
