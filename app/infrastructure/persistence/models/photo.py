"""Photo ORM models: photos, their comments, and photos shared between accounts."""

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    AccountOwnedMixin,
    CreatedAtMixin,
    CuidMixin,
)


class Photo(CuidMixin, AccountOwnedMixin, CreatedAtMixin, Base):
    """Photo uploaded by an account. Table: photo."""

    __tablename__ = "photo"

    storage_ref: Mapped[str] = mapped_column(String(1024), nullable=False)
    caption: Mapped[str | None] = mapped_column(Text, nullable=True)


class PhotoComment(CuidMixin, AccountOwnedMixin, CreatedAtMixin, Base):
    """Comment by account_id on a photo (possibly another account's). Table: photo_comment."""

    __tablename__ = "photo_comment"

    photo_id: Mapped[str] = mapped_column(
        String, ForeignKey("photo.id"), nullable=False, index=True
    )
    body: Mapped[str] = mapped_column(Text, nullable=False)


class SharedPhoto(CuidMixin, CreatedAtMixin, Base):
    """Photo sent from one account to another. Table: shared_photo."""

    __tablename__ = "shared_photo"

    photo_id: Mapped[str] = mapped_column(
        String, ForeignKey("photo.id"), nullable=False, index=True
    )
    sender_account_id: Mapped[str] = mapped_column(
        String, ForeignKey("account.id"), nullable=False, index=True
    )
    recipient_account_id: Mapped[str] = mapped_column(
        String, ForeignKey("account.id"), nullable=False, index=True
    )
