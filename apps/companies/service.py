from typing import List, Optional
from framework.exceptions.handler import NotFoundException
from framework.repository.unit_of_work import UnitOfWork
from apps.reviews.repository import ReviewRepository
from .models import Company
from .repository import CompanyRepository


class CompanyService:
    """Read side of companies; writes are admin operations in the moderation app."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def list_companies(self, search: Optional[str] = None) -> List[Company]:
        company_repo = self.uow.get_repository(CompanyRepository)
        return await company_repo.list_by_name(search)

    async def get_by_slug(self, slug: str) -> Company:
        company_repo = self.uow.get_repository(CompanyRepository)
        company = await company_repo.get_by_slug(slug)
        if not company:
            raise NotFoundException("Company not found")
        return company

    async def get_company_detail(self, slug: str) -> dict:
        """Company with its counts of approved reviews per type."""
        company = await self.get_by_slug(slug)
        review_repo = self.uow.get_repository(ReviewRepository)
        counts = await review_repo.count_by_type(company.id)
        return {**company.model_dump(), "review_counts": counts}
