"""Favorite ORM model: an account bookmarking another account."""

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    AccountOwnedMixin,
    CreatedAtMixin,
    CuidMixin,
)


class Favorite(CuidMixin, AccountOwnedMixin, CreatedAtMixin, Base):
    """Table: favorite. Unique (account_id, favorite_account_id)."""

    __tablename__ = "favorite"

    favorite_account_id: Mapped[str] = mapped_column(
        String, ForeignKey("account.id"), nullable=False, index=True
    )

    __table_args__ = (
        UniqueConstraint("account_id", "favorite_account_id", name="uq_favorite_pair"),
    )
