"""Placed student repository implementation."""

from typing import List
from sqlmodel import select
from framework.repository.base import BaseRepository
from .models import PlacedStudent


class PlacedStudentRepository(BaseRepository[PlacedStudent]):
    """Placed student repository."""

    def __init__(self, session):
        super().__init__(session, PlacedStudent)

    async def list_for_company(self, company_id: str) -> List[PlacedStudent]:
        """Students placed at a company, latest batch first."""
        statement = (
            select(PlacedStudent)
            .where(PlacedStudent.company_id == company_id)
            .order_by(PlacedStudent.batch.desc(), PlacedStudent.student_name)
        )
        result = await self.session.exec(statement)
        return list(result.all())

    async def list_recent(self, limit: int = 500, offset: int = 0) -> List[PlacedStudent]:
        statement = (
            select(PlacedStudent)
            .order_by(PlacedStudent.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.exec(statement)
        return list(result.all())

    async def list_all(self) -> List[PlacedStudent]:
        result = await self.session.exec(select(PlacedStudent))
        return list(result.all())
