"""One-time encrypted secret handoff ORM model."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CreatedAtMixin


class SecretHandoff(CreatedAtMixin, Base):
    """Stored by token_hash; encrypted_payload is Fernet ciphertext; used_at marks redemption."""

    __tablename__ = "secret_handoff"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    token_hash: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    account_id: Mapped[str] = mapped_column(
        String, ForeignKey("account.id"), nullable=False, index=True
    )
    recipient_email: Mapped[str] = mapped_column(String(254), nullable=False)
    encrypted_payload: Mapped[str] = mapped_column(Text, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    used_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
