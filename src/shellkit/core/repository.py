"""Generic async repository over a SQLAlchemy session."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Base


class BaseRepository[T: Base, IdT]:
    """Base repository providing basic persistence operations for a single model."""

    def __init__(self, session: AsyncSession, model: type[T]) -> None:
        """Initialize repository with database session and model type."""
        self.s = session
        self.model = model

    async def find_by_id(self, id: IdT) -> T | None:
        """Find an entity by its primary key."""
        return await self.s.get(self.model, id)

    async def find_all(self) -> list[T]:
        """Return all entities of this model."""
        result = await self.s.scalars(select(self.model))
        return list(result.all())

    async def exists_by_id(self, id: IdT) -> bool:
        """Return True when a row with this primary key exists, bypassing the identity map."""
        pk = inspect(self.model).primary_key[0]
        result = await self.s.scalar(select(pk).where(pk == id).limit(1))
        return result is not None

    async def count(self) -> int:
        """Count all entities of this model."""
        result = await self.s.scalar(select(func.count()).select_from(self.model))
        return int(result or 0)

    async def save(self, entity: T) -> T:
        """Add an entity to the session (insert, or update when already persistent)."""
        self.s.add(entity)
        return entity

    async def delete_by_id(self, id: IdT) -> None:
        """Delete an entity by primary key if present."""
        entity = await self.find_by_id(id)
        if entity is not None:
            await self.s.delete(entity)

    async def commit(self) -> None:
        """Commit the current transaction."""
        await self.s.commit()

    async def refresh_many(self, entities: Sequence[T]) -> None:
        """Refresh entities from the database after a commit."""
        for entity in entities:
            await self.s.refresh(entity)
