"""Base repository: lookups, inserts, and conditional updates shared by the consent stores."""

from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.enums import ConsentStatus
from app.infrastructure.persistence.database import Base


def status_in(column: Any, statuses: Iterable[ConsentStatus]) -> ColumnElement[bool]:
    """WHERE column IN (...) over ConsentStatus values."""
    return column.in_(sorted(status.value for status in statuses))


ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository over one model and one request-scoped session.

    Subclasses map rows to domain entities in _to_entity. Writes only flush;
    the unit of work owns commit and rollback.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def _get_row(self, entity_id: str) -> ModelType | None:
        """Return a single row by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def _first_where(self, *criteria: ColumnElement[bool]) -> ModelType | None:
        result = await self.db.execute(select(self.model).where(*criteria).limit(1))
        return result.scalar_one_or_none()

    async def _insert(self, row: ModelType) -> ModelType:
        """Persist a new row and reload server defaults."""
        self.db.add(row)
        await self.db.flush()
        await self.db.refresh(row)
        return row

    async def _update_where(
        self, *criteria: ColumnElement[bool], values: dict[str, Any]
    ) -> int:
        """UPDATE ... WHERE criteria; return affected row count.

        The WHERE clause carries the expected prior state, so a row count of 0
        means another request already moved the row on.
        """
        result: Any = await self.db.execute(
            update(self.model)
            .where(*criteria)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)

    async def _delete_where(self, *criteria: ColumnElement[bool]) -> int:
        result: Any = await self.db.execute(
            delete(self.model).where(*criteria).execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)
