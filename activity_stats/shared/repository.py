"""
Generic async repository.

Feature repositories subclass this and bind a model:

    class AthleteCacheRepository(BaseRepository[AthleteCache]):
        def __init__(self, db: AsyncSession):
            super().__init__(db, AthleteCache)

Writes only flush; committing is left to the caller that owns the session.
"""

from typing import Any, Generic, Type, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """Lookup, create, update, delete and count for one model."""

    def __init__(self, db: AsyncSession, model: Type[T]):
        self.db = db
        self.model = model

    def _where(self, query: Select, filters: dict[str, Any]) -> Select:
        for column, value in filters.items():
            query = query.where(getattr(self.model, column) == value)
        return query

    async def get_by(self, **filters) -> T | None:
        """
        Single row matching all equality filters.

        Raises:
            MultipleResultsFound: More than one row matched
        """
        result = await self.db.execute(self._where(select(self.model), filters))
        return result.scalar_one_or_none()

    async def create(self, **values) -> T:
        entity = self.model(**values)
        self.db.add(entity)
        await self.db.flush()
        await self.db.refresh(entity)
        return entity

    async def update(self, entity: T, **values) -> T:
        for column, value in values.items():
            setattr(entity, column, value)
        await self.db.flush()
        await self.db.refresh(entity)
        return entity

    async def delete(self, entity: T) -> None:
        await self.db.delete(entity)
        await self.db.flush()

    async def count(self, **filters) -> int:
        query = self._where(select(func.count()).select_from(self.model), filters)
        result = await self.db.execute(query)
        return result.scalar() or 0
