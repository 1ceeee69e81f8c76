"""Company repository implementation."""

from typing import Optional, List
from sqlmodel import select, func
from framework.repository.base import BaseRepository
from .models import Company


class CompanyRepository(BaseRepository[Company]):
    """Company repository."""

    def __init__(self, session):
        super().__init__(session, Company)

    async def get_by_slug(self, slug: str) -> Optional[Company]:
        return await self.find_one(slug=slug)

    async def list_by_name(self, search: Optional[str] = None) -> List[Company]:
        """Companies ordered by name, optionally filtered by a case-insensitive name substring."""
        statement = select(Company)
        if search:
            statement = statement.where(func.lower(Company.name).contains(search.strip().lower()))
        statement = statement.order_by(Company.name)
        result = await self.session.exec(statement)
        return list(result.all())

    async def get_many(self, ids: List[str]) -> dict[str, Company]:
        """Companies for a set of ids, keyed by id."""
        if not ids:
            return {}
        statement = select(Company).where(Company.id.in_(list(set(ids))))
        result = await self.session.exec(statement)
        return {company.id: company for company in result.all()}
