"""In-app notification ORM model."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    AccountOwnedMixin,
    CreatedAtMixin,
    CuidMixin,
)


class Notification(CuidMixin, AccountOwnedMixin, CreatedAtMixin, Base):
    """Notification for account_id, optionally caused by actor_account_id. Table: notification."""

    __tablename__ = "notification"

    actor_account_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("account.id"), nullable=True, index=True
    )
    kind: Mapped[str] = mapped_column(String(50), nullable=False)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
