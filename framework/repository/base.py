"""
Repository abstract base class and generic implementation.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar, Optional, List, Type, Any
from sqlalchemy import delete as sa_delete
from sqlmodel import SQLModel, select, func
from sqlmodel.ext.asyncio.session import AsyncSession

T = TypeVar("T", bound=SQLModel)


class IRepository(ABC, Generic[T]):
    """Repository interface; defines standard data access API."""

    @abstractmethod
    async def get_by_id(self, id: str) -> Optional[T]:
        """Get entity by ID."""
        pass

    @abstractmethod
    async def get_all(self, limit: int = 100, offset: int = 0) -> List[T]:
        """Get all entities (paginated)."""
        pass

    @abstractmethod
    async def create(self, entity: T) -> T:
        """Create entity."""
        pass

    @abstractmethod
    async def update(self, entity: T) -> T:
        """Update entity."""
        pass

    @abstractmethod
    async def delete(self, id: str) -> bool:
        """Delete entity."""
        pass


class BaseRepository(IRepository[T]):
    """Generic repository implementation with SQLModel CRUD; subclasses add custom queries."""

    def __init__(self, session: AsyncSession, model: Type[T]):
        self.session = session
        self.model = model

    def _filtered(self, statement, filters: dict):
        for key, value in filters.items():
            if not hasattr(self.model, key):
                raise AttributeError(f"{self.model.__name__} has no column {key!r}")
            statement = statement.where(getattr(self.model, key) == value)
        return statement

    async def get_by_id(self, id: str) -> Optional[T]:
        """Get entity by ID."""
        statement = select(self.model).where(self.model.id == id)
        result = await self.session.exec(statement)
        return result.first()

    async def get_all(self, limit: int = 100, offset: int = 0) -> List[T]:
        """Get all entities (paginated)."""
        statement = select(self.model).limit(limit).offset(offset)
        result = await self.session.exec(statement)
        return list(result.all())

    async def create(self, entity: T) -> T:
        self.session.add(entity)
        return entity

    async def create_many(self, entities: List[T]) -> List[T]:
        self.session.add_all(entities)
        return entities

    async def update(self, entity: T) -> T:
        """Update entity (SQLModel tracks changes)."""
        self.session.add(entity)
        return entity

    async def delete(self, id: str) -> bool:
        entity = await self.get_by_id(id)
        if entity:
            await self.session.delete(entity)
            return True
        return False

    async def delete_where(self, column: Any, values: List[Any]) -> int:
        """Bulk delete rows whose column is in values; returns affected row count."""
        if not values:
            return 0
        result = await self.session.execute(sa_delete(self.model).where(column.in_(values)))
        return result.rowcount

    async def find_one(self, **filters) -> Optional[T]:
        """Find one entity by filters (e.g. slug='acme')."""
        statement = self._filtered(select(self.model), filters)
        result = await self.session.exec(statement)
        return result.first()

    async def find_all(self, order_by: Any = None, **filters) -> List[T]:
        """Find entities by filters, optionally ordered (pass a column or column.desc())."""
        statement = self._filtered(select(self.model), filters)
        if order_by is not None:
            statement = statement.order_by(order_by)
        result = await self.session.exec(statement)
        return list(result.all())

    async def count(self, **filters) -> int:
        """Count entities matching filters."""
        statement = self._filtered(select(func.count(self.model.id)), filters)
        result = await self.session.exec(statement)
        return result.one()
