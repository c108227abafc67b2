"""Direct message ORM model."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CreatedAtMixin, CuidMixin


class DirectMessage(CuidMixin, CreatedAtMixin, Base):
    """Message between two accounts. Table: direct_message."""

    __tablename__ = "direct_message"

    sender_account_id: Mapped[str] = mapped_column(
        String, ForeignKey("account.id"), nullable=False, index=True
    )
    recipient_account_id: Mapped[str] = mapped_column(
        String, ForeignKey("account.id"), nullable=False, index=True
    )
    body: Mapped[str] = mapped_column(Text, nullable=False)
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
