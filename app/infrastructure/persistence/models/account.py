"""Account ORM model: one login shared by a couple (or a single member)."""

from sqlalchemy import Boolean, CheckConstraint, String, text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class Account(CuidMixin, TimestampMixin, Base):
    """Account model. Table: account. Emails are stored lowercase; each is unique across accounts."""

    __tablename__ = "account"

    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    kind: Mapped[str] = mapped_column(
        String(20), nullable=False, server_default=text("'couple'")
    )
    primary_email: Mapped[str | None] = mapped_column(
        String(254), nullable=True, unique=True, index=True
    )
    partner_email: Mapped[str | None] = mapped_column(
        String(254), nullable=True, unique=True, index=True
    )
    primary_display_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    partner_display_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)
    is_primary_email_verified: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )
    is_partner_email_verified: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )

    __table_args__ = (
        CheckConstraint("kind IN ('couple', 'single')", name="ck_account_kind"),
    )
