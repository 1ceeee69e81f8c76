"""
Unit of Work: manages repositories and transaction boundaries.
"""

from typing import Optional, Type, TypeVar
from fastapi import Depends
from sqlmodel.ext.asyncio.session import AsyncSession
from framework.database.manager import get_db

R = TypeVar("R")


class UnitOfWork:
    """Manages related repositories with a shared session and transaction commit/rollback."""

    def __init__(self, session: Optional[AsyncSession] = None):
        if session is None:
            raise ValueError("Session must be provided: UnitOfWork(session=...)")

        self.session = session
        self._repositories = {}

    def get_repository(self, repo_class: Type[R]) -> R:
        """Get or create a repository instance (one per class per unit of work)."""
        if repo_class not in self._repositories:
            self._repositories[repo_class] = repo_class(self.session)
        return self._repositories[repo_class]

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()

    async def flush(self) -> None:
        """Flush pending inserts so defaults and foreign keys are visible to later statements."""
        await self.session.flush()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            await self.rollback()
        else:
            await self.commit()


def get_uow(db: AsyncSession = Depends(get_db)) -> UnitOfWork:
    """Dependency: create UnitOfWork over the request's session."""
    return UnitOfWork(session=db)
